"""State store interfaces for agents and workspaces."""

from abc import ABC, abstractmethod

from remotedev.core.models import Agent, Workspace


class AgentRegistry(ABC):
    """Interface for looking up cluster agents.

    Implementations: InMemoryStore
    """

    @abstractmethod
    async def find_by_token(self, token: str) -> Agent | None:
        """Resolve a bearer token to its agent.

        Args:
            token: Raw bearer token sent by the agent

        Returns:
            Agent, or None if no agent owns the token
        """
        ...

    @abstractmethod
    async def get_agent(self, agent_id: int) -> Agent | None:
        """Get agent by ID."""
        ...


class WorkspaceStore(ABC):
    """Interface for workspace persistence.

    Workspaces returned by this interface are snapshots. Callers mutate them
    and hand them back through save().
    """

    @abstractmethod
    async def list_for_agent(self, agent_id: int) -> list[Workspace]:
        """List all workspaces provisioned through an agent, ordered by ID."""
        ...

    @abstractmethod
    async def get_by_name(self, agent_id: int, name: str) -> Workspace | None:
        """Get a workspace of an agent by name.

        Args:
            agent_id: Owning agent ID
            name: Workspace name (unique per agent)

        Returns:
            Workspace, or None if not found
        """
        ...

    @abstractmethod
    async def save(self, workspace: Workspace) -> None:
        """Insert or replace a workspace."""
        ...
