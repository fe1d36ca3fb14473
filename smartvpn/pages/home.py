from __future__ import annotations

import logging

from nicegui import ui

from smartvpn import config
from smartvpn.common.logging_config import attach_ui_log, detach_ui_log
from smartvpn.constants import APP_TITLE, HISTORY, HOME, RULES, SERVERS
from smartvpn.reconcile import reconcile_home
from smartvpn.services.actions import ConnectionActions
from smartvpn.services.status_poller import StatusPoller
from smartvpn.services.vpn_client import TransportError, client
from smartvpn.state import HomeState, SystemStatus

NAV_ITEMS = (
    ("📡", "Manage Servers", f"/{SERVERS}"),
    ("🔗", "Routing Rules", f"/{RULES}"),
    ("📜", "History", f"/{HISTORY}"),
)


class HomePage:
    """Home screen: connection card, quick stats and navigation."""

    def __init__(self) -> None:
        self.state = HomeState()
        self.poller: StatusPoller[SystemStatus] = StatusPoller(
            HOME,
            client.get_status,
            on_update=self.apply,
            interval=config.polling.interval_for(HOME),
        )
        self.actions = ConnectionActions(client, self.poller)

        self.status_dot: ui.element | None = None
        self.toggle_button: ui.button | None = None
        self.activity_log: ui.log | None = None

    # ---- Lifecycle ----

    async def mount(self) -> None:
        await self.poller.mount()

    async def unmount(self) -> None:
        await self.poller.unmount()
        if self.activity_log is not None:
            detach_ui_log(self.activity_log)

    def apply(self, snapshot: SystemStatus | None, error: TransportError | None) -> None:
        """Copy the reconciled snapshot into the bindable view state."""
        view = reconcile_home(snapshot)
        s = self.state
        s.loading = False
        s.offline = error is not None
        s.connected = view.is_connected
        s.status_text = view.status_text
        s.server_line = view.server_line
        s.show_server_line = view.show_server_line
        s.button_label = view.button_label
        s.total_servers = str(view.total_servers)
        s.active_rules = str(view.active_rules)

        if self.status_dot:
            if view.is_connected:
                self.status_dot.classes(add="on")
            else:
                self.status_dot.classes(remove="on")
        if self.toggle_button:
            self.toggle_button.props(
                "color=negative" if view.is_connected else "color=positive"
            )

    # ---- Actions ----

    async def on_toggle(self) -> None:
        if self.state.busy:
            return
        self.state.busy = True
        try:
            result = await self.actions.toggle_connection()
        finally:
            self.state.busy = False
        if result is not None and not result.ok:
            ui.notify(f"Request failed: {result.error}", color="negative")

    # ---- UI ----

    def _stat_card(self, field: str, caption: str) -> None:
        with ui.card().classes("flex-1 items-center"):
            ui.label("0").bind_text_from(self.state, field).classes("vpn-stat-value")
            ui.label(caption).classes("vpn-muted text-sm")

    def build(self) -> None:
        with ui.column().classes("w-full max-w-xl mx-auto gap-4 p-4"):
            ui.label(f"🛡️ {APP_TITLE}").classes("vpn-title")
            ui.spinner(size="lg", color="primary").bind_visibility_from(self.state, "loading")

            with ui.column().classes("w-full gap-4").bind_visibility_from(
                self.state, "loading", backward=lambda v: not v
            ):
                # Status card
                with ui.card().classes("w-full"):
                    ui.label("Connection Status").classes("vpn-subtle text-sm")
                    with ui.row().classes("items-center gap-2"):
                        self.status_dot = ui.element("div").classes("vpn-dot")
                        ui.label("Disconnected").bind_text_from(
                            self.state, "status_text"
                        ).classes("text-lg font-medium")
                        ui.badge("offline", color="warning").bind_visibility_from(
                            self.state, "offline"
                        )
                    ui.label().bind_text_from(self.state, "server_line").bind_visibility_from(
                        self.state, "show_server_line"
                    ).classes("vpn-muted")
                    self.toggle_button = (
                        ui.button("Connect", on_click=self.on_toggle)
                        .bind_text_from(self.state, "button_label")
                        .bind_enabled_from(self.state, "busy", backward=lambda b: not b)
                        .props("unelevated color=positive")
                        .classes("w-full")
                    )

                # Quick stats
                with ui.row().classes("w-full gap-4 no-wrap"):
                    self._stat_card("total_servers", "Servers")
                    self._stat_card("active_rules", "Active Rules")

                # Navigation
                with ui.column().classes("w-full gap-2"):
                    for icon, text, target in NAV_ITEMS:
                        with ui.card().classes("w-full vpn-row").on(
                            "click", lambda t=target: ui.navigate.to(t)
                        ):
                            with ui.row().classes("items-center gap-3"):
                                ui.label(icon)
                                ui.label(text)

                with ui.expansion("Activity", icon="list").classes("w-full"):
                    self.activity_log = ui.log(max_lines=200).classes("w-full h-40")
        attach_ui_log(self.activity_log)
        logging.debug("Home page built")
