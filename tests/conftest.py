from __future__ import annotations

import copy
import os
from typing import Any

import pytest

# Must be set before smartvpn modules are imported; nothing listens on port 9
os.environ.setdefault("SMARTVPN_API_BASE", "http://127.0.0.1:9/api")
os.environ.setdefault("SMARTVPN_LOG_LEVEL", "WARNING")

pytest_plugins = ["nicegui.testing.user_plugin"]

from tests.utils.fakes import HISTORY_ENTRIES, SINGAPORE_STATUS, FakeVpnClient  # noqa: E402


@pytest.fixture
def status_payload() -> dict[str, Any]:
    return copy.deepcopy(SINGAPORE_STATUS)


@pytest.fixture
def fake_client(status_payload) -> FakeVpnClient:
    return FakeVpnClient(status_payload, copy.deepcopy(HISTORY_ENTRIES))
