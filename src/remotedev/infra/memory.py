"""In-memory agent and workspace store.

Stands in for the persistence layer of the hosting application. Records
are deep-copied on the way in and out, so callers never share state with
the store and must save() what they change.
"""

import asyncio
import hashlib
import hmac

from remotedev.core.interfaces.store import AgentRegistry, WorkspaceStore
from remotedev.core.models import Agent, Workspace


def token_digest(token: str) -> str:
    """sha256 hex digest of an agent token, as stored on Agent."""
    return hashlib.sha256(token.encode()).hexdigest()


class InMemoryStore(AgentRegistry, WorkspaceStore):
    """Agents and workspaces held in process memory."""

    def __init__(self) -> None:
        self._agents: dict[int, Agent] = {}
        self._workspaces: dict[int, Workspace] = {}
        self._lock = asyncio.Lock()

    async def add_agent(self, agent: Agent, token: str | None = None) -> Agent:
        """Register an agent, optionally setting its token digest from a raw token."""
        if token is not None:
            agent = agent.model_copy(update={"token_digest": token_digest(token)})
        async with self._lock:
            self._agents[agent.id] = agent.model_copy(deep=True)
        return agent

    async def find_by_token(self, token: str) -> Agent | None:
        digest = token_digest(token)
        for agent in self._agents.values():
            if agent.token_digest and hmac.compare_digest(agent.token_digest, digest):
                return agent.model_copy(deep=True)
        return None

    async def get_agent(self, agent_id: int) -> Agent | None:
        agent = self._agents.get(agent_id)
        return agent.model_copy(deep=True) if agent else None

    async def list_for_agent(self, agent_id: int) -> list[Workspace]:
        return [
            w.model_copy(deep=True)
            for _, w in sorted(self._workspaces.items())
            if w.agent_id == agent_id
        ]

    async def get_by_name(self, agent_id: int, name: str) -> Workspace | None:
        for workspace in self._workspaces.values():
            if workspace.agent_id == agent_id and workspace.name == name:
                return workspace.model_copy(deep=True)
        return None

    async def save(self, workspace: Workspace) -> None:
        async with self._lock:
            self._workspaces[workspace.id] = workspace.model_copy(deep=True)
