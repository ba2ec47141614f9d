"""Reconcile protocol value objects.

WorkspaceReconcileContext is the flat aggregate consumed by the desired
config generator. WorkspaceAgentInfo and WorkspaceReconcileInfo are the
per-workspace entries of the agent poll request and response.
"""

from typing import Any

from pydantic import BaseModel, field_validator

from remotedev.core.domain.workspace import ErrorType, States, TerminationProgress
from remotedev.core.errors import InvalidWorkspaceConfigError
from remotedev.core.models.workspace import Agent, Workspace, WorkspaceVariable


class WorkspaceReconcileContext(BaseModel):
    """Immutable snapshot of one workspace and its agent config."""

    workspace_id: int
    name: str
    namespace: str
    desired_state: States
    processed_devfile: str
    dns_zone: str
    agent_id: int
    network_policy_enabled: bool
    gitlab_workspaces_proxy_namespace: str
    workspace_variables: tuple[WorkspaceVariable, ...] = ()

    model_config = {"frozen": True}

    @classmethod
    def from_workspace(cls, workspace: Workspace, agent: Agent) -> "WorkspaceReconcileContext":
        """Assemble the context from a workspace and its owning agent.

        Raises:
            InvalidWorkspaceConfigError: If the agent does not own the workspace.
        """
        if workspace.agent_id != agent.id:
            raise InvalidWorkspaceConfigError(
                f"Workspace {workspace.name} does not belong to agent {agent.id}"
            )
        return cls(
            workspace_id=workspace.id,
            name=workspace.name,
            namespace=workspace.namespace,
            desired_state=workspace.desired_state,
            processed_devfile=workspace.processed_devfile,
            dns_zone=workspace.dns_zone,
            agent_id=agent.id,
            network_policy_enabled=agent.config.network_policy_enabled,
            gitlab_workspaces_proxy_namespace=agent.config.gitlab_workspaces_proxy_namespace,
            workspace_variables=tuple(workspace.workspace_variables),
        )


class WorkspaceErrorDetails(BaseModel):
    """Error the agent hit while applying or watching workspace resources."""

    error_type: ErrorType
    error_message: str | None = None


class WorkspaceAgentInfo(BaseModel):
    """Observed state of one workspace, as reported by the agent.

    actual_state may be sent directly. Otherwise it is derived from
    latest_k8s_deployment_info, termination_progress and error_details.
    """

    name: str
    namespace: str
    actual_state: States | None = None
    resource_version: str | None = None
    latest_k8s_deployment_info: dict[str, Any] | None = None
    termination_progress: TerminationProgress | None = None
    error_details: WorkspaceErrorDetails | None = None

    @field_validator("resource_version", mode="before")
    @classmethod
    def _coerce_resource_version(cls, value: Any) -> str | None:
        # k8s resourceVersion is opaque, agents may send it as a number
        return None if value is None else str(value)


class WorkspaceReconcileInfo(BaseModel):
    """Per-workspace entry returned to the agent."""

    name: str
    namespace: str
    desired_state: States
    actual_state: States
    deployment_resource_version: str | None
    config_to_apply: list[dict[str, Any]] | None
