from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

import smartvpn.pages.history as history_mod
import smartvpn.pages.home as home_mod
import smartvpn.pages.rules as rules_mod
import smartvpn.pages.servers as servers_mod
from smartvpn import main
from tests.utils.fakes import wait_until

if TYPE_CHECKING:
    from nicegui.testing import User
    from pytest import MonkeyPatch

    from tests.utils.fakes import FakeVpnClient

# pages mount on a short ui.timer, so allow the first fetch to land
RETRIES = 20


@pytest.mark.unit
@pytest.mark.module_under_test(main)
async def test_home_shows_connected_server(user: User, monkeypatch: MonkeyPatch, fake_client: FakeVpnClient):
    monkeypatch.setattr(home_mod, "client", fake_client, raising=True)

    await user.open("/")
    await wait_until(lambda: fake_client.count("get_status") >= 1)

    await user.should_see("Connected", retries=RETRIES)
    await user.should_see("Server: Singapore", retries=RETRIES)
    await user.should_see("Disconnect", retries=RETRIES)
    await user.should_see("Manage Servers", retries=RETRIES)


@pytest.mark.unit
@pytest.mark.module_under_test(main)
async def test_home_toggle_disconnects_and_repolls(user: User, monkeypatch: MonkeyPatch, fake_client: FakeVpnClient):
    monkeypatch.setattr(home_mod, "client", fake_client, raising=True)
    await user.open("/")
    await wait_until(lambda: fake_client.count("get_status") >= 1)
    await user.should_see("Server: Singapore", retries=RETRIES)
    polls_before = fake_client.count("get_status")

    user.find("Disconnect").click()

    await wait_until(lambda: fake_client.count("disconnect") == 1)
    await wait_until(lambda: fake_client.count("get_status") > polls_before)
    assert fake_client.count("connect") == 0


@pytest.mark.unit
@pytest.mark.module_under_test(main)
async def test_home_marks_unreachable_backend(user: User, monkeypatch: MonkeyPatch, fake_client: FakeVpnClient):
    fake_client.status_payload = None
    monkeypatch.setattr(home_mod, "client", fake_client, raising=True)

    await user.open("/")
    await wait_until(lambda: fake_client.count("get_status") >= 1)

    await user.should_see("offline", retries=RETRIES)
    await user.should_see("Disconnected", retries=RETRIES)


@pytest.mark.unit
@pytest.mark.module_under_test(main)
async def test_servers_click_connects_to_that_server(user: User, monkeypatch: MonkeyPatch, fake_client: FakeVpnClient):
    monkeypatch.setattr(servers_mod, "client", fake_client, raising=True)
    await user.open("/servers")
    await wait_until(lambda: fake_client.count("get_status") >= 1)
    await user.should_see("US East", retries=RETRIES)

    user.find("server-us-1").click()

    await wait_until(lambda: fake_client.count("connect") == 1)
    await wait_until(lambda: fake_client.count("get_status") == 2)
    assert ("connect", "us-1") in fake_client.calls


@pytest.mark.unit
@pytest.mark.module_under_test(main)
async def test_servers_highlight_only_connected_row(user: User, monkeypatch: MonkeyPatch, fake_client: FakeVpnClient):
    monkeypatch.setattr(servers_mod, "client", fake_client, raising=True)
    await user.open("/servers")
    await wait_until(lambda: fake_client.count("get_status") >= 1)
    await user.should_see("US East", retries=RETRIES)

    connected = user.find(marker="server-sg-1").elements
    other = user.find(marker="server-us-1").elements

    assert connected and other
    assert all("active" in el.classes for el in connected)
    assert not any("active" in el.classes for el in other)


@pytest.mark.unit
@pytest.mark.module_under_test(main)
async def test_rules_show_enabled_and_disabled_badges(user: User, monkeypatch: MonkeyPatch, fake_client: FakeVpnClient):
    monkeypatch.setattr(rules_mod, "client", fake_client, raising=True)

    await user.open("/rules")
    await wait_until(lambda: fake_client.count("get_status") >= 1)

    await user.should_see("Routing Rules", retries=RETRIES)
    await user.should_see("Streaming", retries=RETRIES)
    await user.should_see("Banking", retries=RETRIES)
    await user.should_see("Active", retries=RETRIES)
    await user.should_see("Disabled", retries=RETRIES)
    assert fake_client.count("get_status") == 1


@pytest.mark.unit
@pytest.mark.module_under_test(main)
async def test_history_renders_direction_glyphs(user: User, monkeypatch: MonkeyPatch, fake_client: FakeVpnClient):
    monkeypatch.setattr(history_mod, "client", fake_client, raising=True)

    await user.open("/history")
    await wait_until(lambda: fake_client.count("get_history") >= 1)

    await user.should_see("Connection History", retries=RETRIES)
    await user.should_see("↑", retries=RETRIES)
    await user.should_see("↓", retries=RETRIES)
    assert fake_client.count("get_history") == 1
