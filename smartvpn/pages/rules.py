from __future__ import annotations

from nicegui import ui

from smartvpn import config
from smartvpn.constants import RULES
from smartvpn.reconcile import RuleRow, reconcile_rules
from smartvpn.services.status_poller import StatusPoller
from smartvpn.services.vpn_client import TransportError, client
from smartvpn.state import ListState, SystemStatus


class RulesPage:
    """Routing rules (read-only)."""

    def __init__(self) -> None:
        self.state = ListState()
        self.rows: list[RuleRow] = []
        self.poller: StatusPoller[SystemStatus] = StatusPoller(
            RULES,
            client.get_status,
            on_update=self.apply,
            interval=config.polling.interval_for(RULES),
        )

    async def mount(self) -> None:
        await self.poller.mount()

    async def unmount(self) -> None:
        await self.poller.unmount()

    def apply(self, snapshot: SystemStatus | None, error: TransportError | None) -> None:
        self.rows = reconcile_rules(snapshot)
        self.state.loading = False
        self.state.offline = error is not None
        self.state.empty = not self.rows
        self.render_rows.refresh()

    @ui.refreshable
    def render_rows(self) -> None:
        for row in self.rows:
            with ui.card().classes("w-full"), ui.row().classes(
                "w-full items-center justify-between no-wrap"
            ):
                with ui.column().classes("gap-0"):
                    ui.label(row.name).classes("text-md font-medium")
                    ui.label(row.pattern).classes("vpn-muted text-sm font-mono")
                ui.label(row.badge).classes(
                    "vpn-badge " + ("enabled" if row.enabled else "disabled")
                )

    def build(self) -> None:
        with ui.column().classes("w-full max-w-xl mx-auto gap-3 p-4"):
            with ui.row().classes("items-center gap-2"):
                ui.label("Routing Rules").classes("vpn-screen-title")
                ui.badge("offline", color="warning").bind_visibility_from(self.state, "offline")
            ui.spinner(size="lg", color="primary").bind_visibility_from(self.state, "loading")
            ui.label("No routing rules").classes("vpn-muted").bind_visibility_from(
                self.state, "empty"
            )
            with ui.column().classes("w-full gap-3"):
                self.render_rows()
