from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from nicegui import binding


def _as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _as_count(value: Any) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


# ---- Backend snapshots (read-only copies of backend state) ----


@dataclass(frozen=True)
class ConnectionState:
    connected: bool = False
    server_id: str | None = None
    server_name: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ConnectionState":
        data = data or {}
        connected = bool(data.get("connected"))
        if not connected:
            # server fields are only meaningful while connected
            return cls(connected=False)
        server_id = data.get("serverId")
        server_name = data.get("serverName")
        return cls(
            connected=True,
            server_id=None if server_id is None else str(server_id),
            server_name=None if server_name is None else str(server_name),
        )


@dataclass(frozen=True)
class ServerSummary:
    id: str
    name: str = ""
    host: str = ""
    protocol: str = ""
    country: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ServerSummary":
        return cls(
            id=str(data["id"]),
            name=_as_str(data.get("name")),
            host=_as_str(data.get("host")),
            protocol=_as_str(data.get("protocol")),
            country=_as_str(data.get("country")),
        )


@dataclass(frozen=True)
class RuleSummary:
    id: str
    name: str = ""
    pattern: str = ""
    enabled: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuleSummary":
        return cls(
            id=str(data["id"]),
            name=_as_str(data.get("name")),
            pattern=_as_str(data.get("pattern")),
            enabled=bool(data.get("enabled")),
        )


@dataclass(frozen=True)
class StatsSummary:
    total_servers: int = 0
    active_rules: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "StatsSummary":
        data = data or {}
        return cls(
            total_servers=_as_count(data.get("totalServers")),
            active_rules=_as_count(data.get("activeRules")),
        )


@dataclass(frozen=True)
class SystemStatus:
    """One full snapshot as returned by ``GET /status``."""

    connection: ConnectionState = field(default_factory=ConnectionState)
    servers: tuple[ServerSummary, ...] = ()
    rules: tuple[RuleSummary, ...] = ()
    stats: StatsSummary = field(default_factory=StatsSummary)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SystemStatus":
        if not isinstance(data, dict):
            raise TypeError(f"status payload must be an object, got {type(data).__name__}")
        return cls(
            connection=ConnectionState.from_dict(data.get("connection")),
            servers=tuple(ServerSummary.from_dict(s) for s in _as_list(data.get("servers"))),
            rules=tuple(RuleSummary.from_dict(r) for r in _as_list(data.get("rules"))),
            stats=StatsSummary.from_dict(data.get("stats")),
        )


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    type: str  # "connect" | "disconnect"
    server: str = ""
    timestamp: str = ""  # ISO-8601

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryEntry":
        return cls(
            id=str(data["id"]),
            type=_as_str(data.get("type")),
            server=_as_str(data.get("server")),
            timestamp=_as_str(data.get("timestamp")),
        )

    @classmethod
    def list_from_payload(cls, data: Any) -> list["HistoryEntry"]:
        if not isinstance(data, list):
            raise TypeError(f"history payload must be a list, got {type(data).__name__}")
        return [cls.from_dict(item) for item in data]


# ---- Per-screen view state (one instance per mounted page, never shared) ----


@binding.bindable_dataclass
class HomeState:
    loading: bool = True
    connected: bool = False
    status_text: str = "Disconnected"
    server_line: str = ""
    show_server_line: bool = False
    button_label: str = "Connect"
    total_servers: str = "0"
    active_rules: str = "0"
    offline: bool = False
    busy: bool = False


@binding.bindable_dataclass
class ListState:
    """View state for the list screens (servers, rules, history)."""

    loading: bool = True
    offline: bool = False
    empty: bool = False
