from __future__ import annotations

from nicegui import ui

from smartvpn import config
from smartvpn.constants import HISTORY
from smartvpn.reconcile import HistoryRow, reconcile_history
from smartvpn.services.status_poller import StatusPoller
from smartvpn.services.vpn_client import TransportError, client
from smartvpn.state import HistoryEntry, ListState


class HistoryPage:
    """Connection history, newest first as returned by the backend."""

    def __init__(self) -> None:
        self.state = ListState()
        self.rows: list[HistoryRow] = []
        self.poller: StatusPoller[list[HistoryEntry]] = StatusPoller(
            HISTORY,
            client.get_history,
            on_update=self.apply,
            interval=config.polling.interval_for(HISTORY),
        )

    async def mount(self) -> None:
        await self.poller.mount()

    async def unmount(self) -> None:
        await self.poller.unmount()

    def apply(
        self, snapshot: list[HistoryEntry] | None, error: TransportError | None
    ) -> None:
        self.rows = reconcile_history(snapshot)
        self.state.loading = False
        self.state.offline = error is not None
        self.state.empty = not self.rows
        self.render_rows.refresh()

    @ui.refreshable
    def render_rows(self) -> None:
        for row in self.rows:
            with ui.card().classes("w-full"), ui.row().classes("items-center gap-3 no-wrap"):
                ui.label(row.glyph).classes("vpn-glyph")
                with ui.column().classes("gap-0"):
                    ui.label(row.server).classes("text-md font-medium")
                    ui.label(row.time_text).classes("vpn-muted text-xs")

    def build(self) -> None:
        with ui.column().classes("w-full max-w-xl mx-auto gap-3 p-4"):
            with ui.row().classes("items-center gap-2"):
                ui.label("Connection History").classes("vpn-screen-title")
                ui.badge("offline", color="warning").bind_visibility_from(self.state, "offline")
            ui.spinner(size="lg", color="primary").bind_visibility_from(self.state, "loading")
            ui.label("No connections yet").classes("vpn-muted").bind_visibility_from(
                self.state, "empty"
            )
            with ui.column().classes("w-full gap-3"):
                self.render_rows()
