"""Agent-side poll client."""

from remotedev.agent.client import ReconcileClient, ReconcileClientConfig

__all__ = ["ReconcileClient", "ReconcileClientConfig"]
