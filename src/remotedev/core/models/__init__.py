"""Workspace, agent and reconcile protocol models."""

from remotedev.core.models.reconcile import (
    WorkspaceAgentInfo,
    WorkspaceErrorDetails,
    WorkspaceReconcileContext,
    WorkspaceReconcileInfo,
)
from remotedev.core.models.workspace import (
    Agent,
    AgentConfig,
    Workspace,
    WorkspaceVariable,
    utc_now,
)

__all__ = [
    "Agent",
    "AgentConfig",
    "Workspace",
    "WorkspaceAgentInfo",
    "WorkspaceErrorDetails",
    "WorkspaceReconcileContext",
    "WorkspaceReconcileInfo",
    "WorkspaceVariable",
    "utc_now",
]
