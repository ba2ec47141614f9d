"""Reconcile HTTP client for cluster agents.

The agent side of the poll protocol: sends the observed workspace states
and receives the desired state and config to apply for each workspace.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from remotedev.core.domain import UpdateType
from remotedev.core.logging_schema import Component, LogEvent
from remotedev.core.models import WorkspaceAgentInfo, WorkspaceReconcileInfo

logger = logging.getLogger(__name__)

RECONCILE_PATH = "/api/v1/reconcile"


@dataclass
class ReconcileClientConfig:
    """Reconciler connection configuration."""

    endpoint: str
    token: str
    timeout: float = 30.0


class ReconcileClient:
    """HTTP client for the reconcile endpoint."""

    def __init__(
        self,
        config: ReconcileClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._config.token}",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._config.endpoint,
                headers=self._get_headers(),
                timeout=self._config.timeout,
                transport=self._transport,
            )
        return self._client

    async def reconcile(
        self,
        update_type: UpdateType,
        workspace_agent_infos: Sequence[WorkspaceAgentInfo] = (),
    ) -> list[WorkspaceReconcileInfo]:
        """Send one poll.

        Args:
            update_type: full on agent startup, partial afterwards
            workspace_agent_infos: Workspaces whose state changed since the last poll

        Returns:
            Workspaces the agent should act on

        Raises:
            httpx.HTTPStatusError: If the reconciler rejects the poll
        """
        client = await self._get_client()
        payload = {
            "update_type": update_type.value,
            "workspace_agent_infos": [
                info.model_dump(mode="json", exclude_none=True)
                for info in workspace_agent_infos
            ],
        }
        resp = await client.post(RECONCILE_PATH, json=payload)
        resp.raise_for_status()

        infos = [
            WorkspaceReconcileInfo.model_validate(item)
            for item in resp.json().get("workspace_rails_infos", [])
        ]
        logger.debug(
            "Reconcile poll completed",
            extra={
                "event": LogEvent.RECONCILE_COMPLETE,
                "component": Component.AGENT,
                "update_type": update_type,
                "reported_count": len(workspace_agent_infos),
                "returned_count": len(infos),
            },
        )
        return infos

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
