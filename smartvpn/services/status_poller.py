from __future__ import annotations

import asyncio
import contextlib
import logging
from enum import Enum
from typing import Awaitable, Callable, Generic, TypeVar

from smartvpn.services.vpn_client import Result, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PollState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    REFRESHING = "refreshing"


class StatusPoller(Generic[T]):
    """
    Per-screen polling loop against one backend endpoint.

    - mount() fetches once, then (when ``interval`` is set) re-polls on an asyncio task.
    - tick() is skipped while a request is in flight, so slow responses coalesce ticks.
    - refresh() always issues a request; it supersedes whatever is in flight.
    - Each request carries a sequence number and only the latest one is applied.
    - After unmount() no response is applied and ``on_update`` is never called.

    A failed fetch keeps the previous snapshot and reports the error through
    ``on_update(snapshot, error)``; nothing is raised to the caller.
    """

    def __init__(
        self,
        name: str,
        fetch: Callable[[], Awaitable[Result[T]]],
        on_update: Callable[[T | None, TransportError | None], None] | None = None,
        interval: float | None = None,
    ) -> None:
        if interval is not None and interval <= 0:
            raise ValueError("interval must be > 0 or None")
        self.name = name
        self.interval = interval
        self._fetch = fetch
        self._on_update = on_update

        self.state = PollState.IDLE
        self.snapshot: T | None = None
        self.last_error: TransportError | None = None
        self.error_count = 0

        self._seq = 0
        self._in_flight = 0
        self._mounted = False
        self._disposed = False
        self._task: asyncio.Task | None = None

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def in_flight(self) -> bool:
        return self._in_flight > 0

    async def mount(self) -> None:
        """Fetch immediately and arm the periodic timer, if any."""
        if self._mounted or self._disposed:
            return
        self._mounted = True
        logger.debug("[%s] mounted (interval=%s)", self.name, self.interval)
        await self._poll()
        if self.interval is not None and self._mounted:
            self._task = asyncio.create_task(self._run(), name=f"poller-{self.name}")

    async def unmount(self) -> None:
        """Cancel the timer; responses still in flight will be discarded."""
        if self._disposed:
            return
        self._mounted = False
        self._disposed = True
        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        logger.debug("[%s] unmounted", self.name)

    async def tick(self) -> bool:
        """Periodic poll; returns False when skipped because a request is in flight."""
        if not self._mounted:
            return False
        if self.in_flight:
            logger.debug("[%s] tick skipped, request in flight", self.name)
            return False
        return await self._poll()

    async def refresh(self) -> bool:
        """Forced poll, issued regardless of any request in flight."""
        if not self._mounted:
            return False
        return await self._poll()

    async def _run(self) -> None:
        assert self.interval is not None
        try:
            while self._mounted:
                await asyncio.sleep(self.interval)
                try:
                    await self.tick()
                except Exception:
                    logger.exception("[%s] poll tick failed", self.name)
        except asyncio.CancelledError:
            pass

    async def _poll(self) -> bool:
        """Issue one request; returns True when its response was applied."""
        self._seq += 1
        seq = self._seq
        self._in_flight += 1
        first_load = self.snapshot is None and self.state != PollState.READY
        self.state = PollState.LOADING if first_load else PollState.REFRESHING
        try:
            result = await self._fetch()
        finally:
            self._in_flight -= 1

        if not self._mounted:
            logger.debug("[%s] response #%s discarded after unmount", self.name, seq)
            return False
        if seq != self._seq:
            logger.debug("[%s] stale response #%s discarded (latest #%s)", self.name, seq, self._seq)
            return False

        if result.ok:
            self.snapshot = result.data
            self.last_error = None
        else:
            self.last_error = result.error
            self.error_count += 1
            logger.warning("[%s] poll failed: %s", self.name, result.error)
        self.state = PollState.READY
        self._publish()
        return True

    def _publish(self) -> None:
        if self._on_update is None:
            return
        try:
            self._on_update(self.snapshot, self.last_error)
        except Exception:
            logger.exception("[%s] view update failed", self.name)
