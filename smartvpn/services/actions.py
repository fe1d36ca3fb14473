from __future__ import annotations

import logging
from typing import Any

from smartvpn.services.status_poller import StatusPoller
from smartvpn.services.vpn_client import Result, VpnApiClient
from smartvpn.state import SystemStatus

logger = logging.getLogger(__name__)


class ConnectionActions:
    """
    Connect/disconnect mutations for one screen.

    Each action is followed by exactly one forced poll on the screen's own
    poller, whether or not the backend accepted the mutation. No local state is
    changed before that poll resolves.
    """

    def __init__(self, client: VpnApiClient, poller: StatusPoller[SystemStatus]) -> None:
        self.client = client
        self.poller = poller

    async def toggle_connection(self) -> Result[Any] | None:
        """Disconnect when connected, else connect to the first known server.

        Returns the mutation result, or None when there was nothing to do.
        """
        status = self.poller.snapshot
        result: Result[Any] | None = None
        if status is not None and status.connection.connected:
            logger.info("DISCONNECT requested")
            result = await self.client.post_disconnect()
        elif status is not None and status.servers:
            server_id = status.servers[0].id
            logger.info("CONNECT requested: %s", server_id)
            result = await self.client.post_connect(server_id)
        else:
            logger.info("Toggle ignored: no server known yet")
        self._log_outcome(result)
        await self.poller.refresh()
        return result

    async def connect_to_server(self, server_id: str) -> Result[Any]:
        logger.info("CONNECT requested: %s", server_id)
        result = await self.client.post_connect(server_id)
        self._log_outcome(result)
        await self.poller.refresh()
        return result

    @staticmethod
    def _log_outcome(result: Result[Any] | None) -> None:
        if result is not None and not result.ok:
            logger.warning("Connection change failed: %s", result.error)
