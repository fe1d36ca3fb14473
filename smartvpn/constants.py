from __future__ import annotations

import logging
import os

APP_TITLE = "Smart VPN"

# Backend target (what the UI polls)
API_BASE: str = os.getenv("SMARTVPN_API_BASE", "http://localhost:3001/api")
# Webserver bind (NiceGUI host/port)
SERVER_HOST: str = os.getenv("SMARTVPN_SERVER_IP", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SMARTVPN_SERVER_PORT", "8080"))

# Screen names, also used as route keys and poller names
HOME = "home"
SERVERS = "servers"
RULES = "rules"
HISTORY = "history"


def _resolve_log_level() -> int:
    s = os.getenv("SMARTVPN_LOG_LEVEL")
    if s:
        name = s.strip().upper()
        mapping = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
        }
        return mapping.get(name, logging.WARNING)
    else:
        return logging.WARNING


LOG_LEVEL: int = _resolve_log_level()
