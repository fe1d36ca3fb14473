from __future__ import annotations

import asyncio

import pytest

from smartvpn.services.status_poller import PollState, StatusPoller
from smartvpn.services.vpn_client import Err, Ok, TransportError
from tests.utils.fakes import GatedFetch, settle


class CountingFetch:
    def __init__(self, *results) -> None:
        self.results = list(results)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0]


def recorder():
    updates: list[tuple] = []
    return updates, lambda snap, err: updates.append((snap, err))


@pytest.mark.unit
async def test_first_load_goes_loading_then_ready():
    fetch = GatedFetch()
    updates, on_update = recorder()
    poller = StatusPoller("t", fetch, on_update=on_update)
    assert poller.state is PollState.IDLE

    mount = asyncio.create_task(poller.mount())
    await settle()
    assert poller.state is PollState.LOADING
    assert updates == []

    fetch.pending[0].set_result(Ok("snap-1"))
    await mount
    assert poller.state is PollState.READY
    assert updates == [("snap-1", None)]

    refresh = asyncio.create_task(poller.refresh())
    await settle()
    assert poller.state is PollState.REFRESHING
    fetch.pending[1].set_result(Ok("snap-2"))
    assert await refresh is True
    assert poller.state is PollState.READY
    assert poller.snapshot == "snap-2"
    await poller.unmount()


@pytest.mark.unit
async def test_failure_keeps_previous_snapshot_and_is_observable():
    err = TransportError("network", "down")
    fetch = CountingFetch(Ok("good"), Err(err))
    updates, on_update = recorder()
    poller = StatusPoller("t", fetch, on_update=on_update)

    await poller.mount()
    assert await poller.refresh() is True

    assert poller.state is PollState.READY
    assert poller.snapshot == "good"
    assert poller.last_error == err
    assert poller.error_count == 1
    assert updates[-1] == ("good", err)


@pytest.mark.unit
async def test_failed_first_load_settles_ready_with_no_data():
    fetch = CountingFetch(Err(TransportError("status", "HTTP 500")))
    updates, on_update = recorder()
    poller = StatusPoller("t", fetch, on_update=on_update)

    await poller.mount()

    assert poller.state is PollState.READY
    assert poller.snapshot is None
    assert updates[0][0] is None


@pytest.mark.unit
async def test_stale_response_never_overwrites_newer_one():
    fetch = GatedFetch()
    updates, on_update = recorder()
    poller = StatusPoller("t", fetch, on_update=on_update)
    mount = asyncio.create_task(poller.mount())
    await settle()
    fetch.pending[0].set_result(Ok("initial"))
    await mount

    older = asyncio.create_task(poller.refresh())
    await settle()
    newer = asyncio.create_task(poller.refresh())
    await settle()
    assert len(fetch.pending) == 3

    # newest resolves first, the slow older one afterwards
    fetch.pending[2].set_result(Ok("newer"))
    assert await newer is True
    fetch.pending[1].set_result(Ok("older"))
    assert await older is False

    assert poller.snapshot == "newer"
    assert [u[0] for u in updates] == ["initial", "newer"]
    await poller.unmount()


@pytest.mark.unit
async def test_tick_is_skipped_while_request_in_flight():
    fetch = GatedFetch()
    poller = StatusPoller("t", fetch)
    mount = asyncio.create_task(poller.mount())
    await settle()

    assert poller.in_flight
    assert await poller.tick() is False
    assert len(fetch.pending) == 1

    fetch.pending[0].set_result(Ok("x"))
    await mount
    assert not poller.in_flight


@pytest.mark.unit
async def test_response_after_unmount_is_discarded():
    fetch = GatedFetch()
    updates, on_update = recorder()
    poller = StatusPoller("t", fetch, on_update=on_update, interval=0.01)
    mount = asyncio.create_task(poller.mount())
    await settle()

    await poller.unmount()
    fetch.pending[0].set_result(Ok("late"))
    await mount

    assert updates == []
    assert poller.snapshot is None
    # no timer was armed and later calls are inert
    await asyncio.sleep(0.05)
    assert len(fetch.pending) == 1
    assert await poller.refresh() is False
    assert await poller.tick() is False


@pytest.mark.unit
async def test_periodic_poller_stops_on_unmount():
    fetch = CountingFetch(Ok("s"))
    updates, on_update = recorder()
    poller = StatusPoller("home", fetch, on_update=on_update, interval=0.01)

    await poller.mount()
    await asyncio.sleep(0.08)
    assert fetch.calls >= 3

    await poller.unmount()
    calls, n_updates = fetch.calls, len(updates)
    await asyncio.sleep(0.05)
    assert fetch.calls == calls
    assert len(updates) == n_updates


@pytest.mark.unit
async def test_one_shot_poller_fetches_once():
    fetch = CountingFetch(Ok("s"))
    poller = StatusPoller("rules", fetch, interval=None)

    await poller.mount()
    await poller.mount()  # idempotent
    await asyncio.sleep(0.05)

    assert fetch.calls == 1
    await poller.unmount()


@pytest.mark.unit
async def test_failing_view_update_does_not_break_polling():
    def boom(snap, err):
        raise RuntimeError("widget gone")

    poller = StatusPoller("t", CountingFetch(Ok("s")), on_update=boom)
    await poller.mount()
    assert poller.snapshot == "s"
    assert poller.state is PollState.READY


@pytest.mark.unit
def test_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        StatusPoller("t", CountingFetch(Ok(1)), interval=0)


@pytest.mark.unit
async def test_periodic_loop_survives_a_raising_fetch(caplog):
    calls = 0

    async def flaky():
        nonlocal calls
        calls += 1
        if calls == 2:
            raise RuntimeError("bad fetch")
        return Ok(calls)

    poller = StatusPoller("home", flaky, interval=0.01)
    await poller.mount()
    await asyncio.sleep(0.08)
    await poller.unmount()

    assert calls >= 4
    assert not poller.in_flight
    assert poller.snapshot not in (None, 1)
    assert "poll tick failed" in caplog.text
