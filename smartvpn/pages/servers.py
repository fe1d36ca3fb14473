from __future__ import annotations

from functools import partial

from nicegui import ui

from smartvpn import config
from smartvpn.constants import SERVERS
from smartvpn.reconcile import ServerRow, reconcile_servers
from smartvpn.services.actions import ConnectionActions
from smartvpn.services.status_poller import StatusPoller
from smartvpn.services.vpn_client import TransportError, client
from smartvpn.state import ListState, SystemStatus


class ServersPage:
    """Server list; tapping a server connects to it."""

    def __init__(self) -> None:
        self.state = ListState()
        self.rows: list[ServerRow] = []
        self.poller: StatusPoller[SystemStatus] = StatusPoller(
            SERVERS,
            client.get_status,
            on_update=self.apply,
            interval=config.polling.interval_for(SERVERS),
        )
        self.actions = ConnectionActions(client, self.poller)

    async def mount(self) -> None:
        await self.poller.mount()

    async def unmount(self) -> None:
        await self.poller.unmount()

    def apply(self, snapshot: SystemStatus | None, error: TransportError | None) -> None:
        self.rows = reconcile_servers(snapshot)
        self.state.loading = False
        self.state.offline = error is not None
        self.state.empty = not self.rows
        self.render_rows.refresh()

    async def connect_to_server(self, server_id: str) -> None:
        result = await self.actions.connect_to_server(server_id)
        if not result.ok:
            ui.notify(f"Connect to {server_id} failed: {result.error}", color="negative")

    @ui.refreshable
    def render_rows(self) -> None:
        for row in self.rows:
            card = (
                ui.card()
                .classes("w-full vpn-row" + (" active" if row.active else ""))
                .mark(f"server-{row.id}")
            )
            card.on("click", partial(self.connect_to_server, row.id))
            with card, ui.row().classes("w-full items-center justify-between no-wrap"):
                with ui.column().classes("gap-0"):
                    ui.label(row.name).classes("text-md font-medium")
                    ui.label(row.host).classes("vpn-muted text-sm")
                with ui.column().classes("items-end gap-1"):
                    ui.label(row.protocol).classes("vpn-badge")
                    ui.label(row.country).classes("vpn-muted text-xs")

    def build(self) -> None:
        with ui.column().classes("w-full max-w-xl mx-auto gap-3 p-4"):
            with ui.row().classes("items-center gap-2"):
                ui.label("VPN Servers").classes("vpn-screen-title")
                ui.badge("offline", color="warning").bind_visibility_from(self.state, "offline")
            ui.spinner(size="lg", color="primary").bind_visibility_from(self.state, "loading")
            ui.label("No servers configured").classes("vpn-muted").bind_visibility_from(
                self.state, "empty"
            )
            with ui.column().classes("w-full gap-3"):
                self.render_rows()
