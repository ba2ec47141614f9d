"""Workspace and agent records.

These mirror what the external persistence layer stores. They are plain
pydantic models so any store implementation can hand them to the
reconcile handler.
"""

from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, Field

from remotedev.core.domain.workspace import States, VariableType


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


class WorkspaceVariable(BaseModel):
    """Key/value injected into the workspace, as env var or file."""

    key: str
    value: str
    variable_type: VariableType

    model_config = {"frozen": True}


class AgentConfig(BaseModel):
    """Remote development settings of a cluster agent."""

    dns_zone: str
    network_policy_enabled: bool = True
    gitlab_workspaces_proxy_namespace: str = "gitlab-workspaces"


class Agent(BaseModel):
    """Cluster agent that provisions workspaces.

    token_digest is the sha256 hex digest of the agent bearer token.
    """

    id: int
    name: str
    config: AgentConfig
    token_digest: str = ""


class Workspace(BaseModel):
    """Workspace record.

    desired_state is user intent, actual_state is the last state reported
    by the agent. responded_to_agent_at is None until the workspace has been
    returned to the agent at least once.
    """

    id: int
    name: str
    namespace: str
    agent_id: int
    user_id: int | None = None
    desired_state: States = States.RUNNING
    actual_state: States = States.CREATION_REQUESTED
    processed_devfile: str
    dns_zone: str
    workspace_variables: list[WorkspaceVariable] = Field(default_factory=list)
    deployment_resource_version: str | None = None
    force_include_all_resources: bool = True
    max_hours_before_termination: int = 24
    created_at: datetime = Field(default_factory=utc_now)
    desired_state_updated_at: datetime = Field(default_factory=utc_now)
    responded_to_agent_at: datetime | None = None

    def set_desired_state(self, state: States, now: datetime | None = None) -> None:
        """Update desired_state and its timestamp."""
        self.desired_state = state
        self.desired_state_updated_at = now or utc_now()

    def desired_state_updated_more_recently_than_last_response_to_agent(self) -> bool:
        if self.responded_to_agent_at is None:
            return True
        return self.desired_state_updated_at > self.responded_to_agent_at

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check if the workspace outlived max_hours_before_termination."""
        deadline = self.created_at + timedelta(hours=self.max_hours_before_termination)
        return (now or utc_now()) >= deadline
