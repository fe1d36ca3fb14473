"""Pure mapping from backend snapshots to what each screen renders.

No network access and no shared cache: every screen calls its own function on
its own latest snapshot. All functions accept ``None`` (nothing loaded yet).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from smartvpn.state import HistoryEntry, SystemStatus

NO_SERVER = "None"
CONNECT_GLYPH = "↑"
DISCONNECT_GLYPH = "↓"
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class HomeView:
    is_connected: bool
    status_text: str
    server_name: str
    server_line: str
    show_server_line: bool
    button_label: str
    total_servers: int
    active_rules: int


@dataclass(frozen=True)
class ServerRow:
    id: str
    name: str
    host: str
    protocol: str
    country: str
    active: bool


@dataclass(frozen=True)
class RuleRow:
    id: str
    name: str
    pattern: str
    enabled: bool
    badge: str


@dataclass(frozen=True)
class HistoryRow:
    id: str
    glyph: str
    server: str
    time_text: str


def reconcile_home(status: SystemStatus | None) -> HomeView:
    connected = bool(status and status.connection.connected)
    server_name = (status.connection.server_name if status else None) or NO_SERVER
    return HomeView(
        is_connected=connected,
        status_text="Connected" if connected else "Disconnected",
        server_name=server_name,
        server_line=f"Server: {server_name}" if connected else "",
        show_server_line=connected,
        button_label="Disconnect" if connected else "Connect",
        total_servers=status.stats.total_servers if status else 0,
        active_rules=status.stats.active_rules if status else 0,
    )


def reconcile_servers(status: SystemStatus | None) -> list[ServerRow]:
    if status is None:
        return []
    conn = status.connection
    return [
        ServerRow(
            id=s.id,
            name=s.name,
            host=s.host,
            protocol=s.protocol,
            country=s.country,
            active=conn.connected and conn.server_id == s.id,
        )
        for s in status.servers
    ]


def reconcile_rules(status: SystemStatus | None) -> list[RuleRow]:
    if status is None:
        return []
    return [
        RuleRow(
            id=r.id,
            name=r.name,
            pattern=r.pattern,
            enabled=r.enabled,
            badge="Active" if r.enabled else "Disabled",
        )
        for r in status.rules
    ]


def history_glyph(entry_type: str) -> str:
    return CONNECT_GLYPH if entry_type == "connect" else DISCONNECT_GLYPH


def format_timestamp(timestamp: str) -> str:
    """Render an ISO-8601 timestamp in local time; unparsable input is returned as-is."""
    if not timestamp:
        return ""
    try:
        # fromisoformat() only accepts a trailing "Z" from Python 3.11 on
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return timestamp
    # Naive timestamps are taken as local time already
    return parsed.astimezone().strftime(TIME_FORMAT)


def reconcile_history(entries: Iterable[HistoryEntry] | None) -> list[HistoryRow]:
    # Backend order is kept (newest first); never re-sorted here
    return [
        HistoryRow(
            id=e.id,
            glyph=history_glyph(e.type),
            server=e.server,
            time_text=format_timestamp(e.timestamp),
        )
        for e in entries or ()
    ]
