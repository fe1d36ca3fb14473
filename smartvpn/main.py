import argparse
import dataclasses
import logging
import sys

from nicegui import ui

from smartvpn import config
from smartvpn.common.logging_config import TRACE, configure_logging
from smartvpn.common.theme import apply_theme
from smartvpn.constants import (
    API_BASE,
    APP_TITLE,
    HISTORY,
    LOG_LEVEL,
    RULES,
    SERVER_HOST,
    SERVER_PORT,
    SERVERS,
)
from smartvpn.pages.history import HistoryPage
from smartvpn.pages.home import HomePage
from smartvpn.pages.rules import RulesPage
from smartvpn.pages.servers import ServersPage
from smartvpn.services.vpn_client import client

Screen = HomePage | ServersPage | RulesPage | HistoryPage


def build_header(title: str) -> None:
    # Sub-screens get a back arrow to the home screen
    with ui.header().classes("p-2 items-center gap-2"):
        ui.button(icon="arrow_back", on_click=lambda: ui.navigate.to("/")).props(
            "flat round"
        )
        ui.label(title).classes("text-lg font-medium")


def mount_screen(page: Screen) -> None:
    """Build a page and tie its poller to the browser client's lifetime."""
    apply_theme()
    page.build()
    # fetch right after the client connects; stop when it goes away
    ui.timer(0.1, page.mount, once=True)
    ui.context.client.on_disconnect(page.unmount)


@ui.page("/")
def home_screen() -> None:
    mount_screen(HomePage())


@ui.page(f"/{SERVERS}")
def servers_screen() -> None:
    build_header("Servers")
    mount_screen(ServersPage())


@ui.page(f"/{RULES}")
def rules_screen() -> None:
    build_header("Rules")
    mount_screen(RulesPage())


@ui.page(f"/{HISTORY}")
def history_screen() -> None:
    build_header("History")
    mount_screen(HistoryPage())


def main() -> None:
    # CLI: web bind, backend target, poll interval and log level
    parser = argparse.ArgumentParser(description=f"{APP_TITLE} NiceGUI console")
    parser.add_argument("--host", default=SERVER_HOST, help="Webserver bind host")
    parser.add_argument(
        "--port", type=int, default=SERVER_PORT, help="Webserver bind port"
    )
    parser.add_argument(
        "--api-base", default=API_BASE, help="Base URL of the VPN management API"
    )
    parser.add_argument(
        "--poll-interval-ms",
        type=int,
        default=None,
        help="Home screen refresh interval in milliseconds",
    )
    parser.add_argument(
        "--log-level",
        choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set log level",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity; -v=INFO, -vv=DEBUG",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Enable WARNING logging"
    )
    args, _ = parser.parse_known_args()

    client.base_url = args.api_base
    if args.poll_interval_ms is not None:
        if args.poll_interval_ms <= 0:
            parser.error("--poll-interval-ms must be > 0")
        config.polling = dataclasses.replace(
            config.polling, poll_interval_s=args.poll_interval_ms / 1000.0
        )

    # Resolve log level priority: explicit --log-level > -v/-q > env default from constants
    if args.log_level:
        if args.log_level == "TRACE":
            runtime_log_level = TRACE
        else:
            runtime_log_level = getattr(logging, args.log_level)
    elif args.verbose >= 3:
        runtime_log_level = TRACE
    elif args.verbose >= 2:
        runtime_log_level = logging.DEBUG
    elif args.verbose == 1:
        runtime_log_level = logging.INFO
    elif args.quiet:
        runtime_log_level = logging.WARNING
    else:
        runtime_log_level = LOG_LEVEL

    configure_logging(runtime_log_level)
    logging.info("Webserver bind: host=%s port=%s", args.host, args.port)
    logging.info("Backend target: %s", client.base_url)
    logging.info(
        "Polling: every %.1fs, one-shot screens: %s",
        config.polling.poll_interval_s,
        ", ".join(sorted(config.polling.one_shot_screens)) or "none",
    )

    ui.run(
        title=APP_TITLE,
        host=args.host,
        port=args.port,
        reload=False,
        show=False,
        loop="uvloop" if sys.platform != "win32" else "asyncio",
        http="httptools",
        ws="wsproto",
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
