"""HTTP/JSON client for the VPN management backend.

Every call returns an ``Ok``/``Err`` result instead of raising, so pollers and
pages can keep their prior state when the backend is unreachable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar, Union

import httpx

from smartvpn.constants import API_BASE
from smartvpn.state import HistoryEntry, SystemStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")

ErrorKind = Literal["network", "status", "decode", "rejected"]


@dataclass(frozen=True)
class TransportError:
    kind: ErrorKind
    detail: str = ""

    def __str__(self) -> str:
        return f"{self.kind}: {self.detail}" if self.detail else self.kind


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: T
    ok: Literal[True] = True


@dataclass(frozen=True)
class Err:
    error: TransportError
    ok: Literal[False] = False


Result = Union[Ok[T], Err]


class VpnApiClient:
    """Thin wrapper over the backend's ``{success, data}`` envelope.

    No retries, no caching, and no explicit timeout beyond the httpx default.
    """

    def __init__(
        self, base_url: str = API_BASE, transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        self.base_url = base_url
        self._transport = transport

    async def request(self, method: str, path: str, body: Any = None) -> Result[Any]:
        """Issue one request and unwrap the envelope's ``data`` field."""
        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body  # also sets Content-Type: application/json
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, transport=self._transport
            ) as http:
                resp = await http.request(method, path, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("%s %s failed: %s", method, path, e)
            return Err(TransportError("network", str(e) or type(e).__name__))

        if resp.is_error:
            logger.warning("%s %s returned HTTP %s", method, path, resp.status_code)
            return Err(TransportError("status", f"HTTP {resp.status_code}"))

        try:
            envelope = resp.json()
        except ValueError as e:
            logger.warning("%s %s returned malformed JSON: %s", method, path, e)
            return Err(TransportError("decode", "malformed JSON"))

        if not isinstance(envelope, dict):
            logger.warning("%s %s returned a non-object envelope", method, path)
            return Err(TransportError("decode", "envelope is not an object"))
        if not envelope.get("success"):
            reason = envelope.get("error") or envelope.get("message") or ""
            logger.warning("%s %s rejected by backend: %s", method, path, reason)
            return Err(TransportError("rejected", str(reason)))
        return Ok(envelope.get("data"))

    async def get_status(self) -> Result[SystemStatus]:
        res = await self.request("GET", "/status")
        if not res.ok:
            return res
        try:
            return Ok(SystemStatus.from_dict(res.data))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Unexpected /status payload: %s", e)
            return Err(TransportError("decode", f"bad status payload: {e}"))

    async def get_history(self) -> Result[list[HistoryEntry]]:
        res = await self.request("GET", "/history")
        if not res.ok:
            return res
        try:
            return Ok(HistoryEntry.list_from_payload(res.data))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Unexpected /history payload: %s", e)
            return Err(TransportError("decode", f"bad history payload: {e}"))

    async def post_connect(self, server_id: str) -> Result[Any]:
        return await self.request("POST", "/connection/connect", {"serverId": server_id})

    async def post_disconnect(self) -> Result[Any]:
        return await self.request("POST", "/connection/disconnect")


# Module-level singleton instance
client = VpnApiClient(base_url=API_BASE)
