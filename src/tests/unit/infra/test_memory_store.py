"""Tests for InMemoryStore."""

import pytest

from remotedev.core.domain import States
from remotedev.core.models import Agent, AgentConfig, Workspace
from remotedev.infra import InMemoryStore, token_digest


def make_agent(agent_id: int = 1) -> Agent:
    return Agent(id=agent_id, name=f"agent-{agent_id}", config=AgentConfig(dns_zone="example.dev"))


def make_workspace(workspace_id: int, agent_id: int = 1) -> Workspace:
    return Workspace(
        id=workspace_id,
        name=f"workspace-{workspace_id}",
        namespace=f"ns-{workspace_id}",
        agent_id=agent_id,
        processed_devfile="components: []",
        dns_zone="example.dev",
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


class TestAgentRegistry:
    async def test_find_by_token(self, store: InMemoryStore) -> None:
        await store.add_agent(make_agent(), token="s3cr3t")

        agent = await store.find_by_token("s3cr3t")

        assert agent is not None
        assert agent.id == 1
        assert agent.token_digest == token_digest("s3cr3t")

    async def test_unknown_token(self, store: InMemoryStore) -> None:
        await store.add_agent(make_agent(), token="s3cr3t")

        assert await store.find_by_token("other") is None

    async def test_agent_without_token_never_matches(self, store: InMemoryStore) -> None:
        await store.add_agent(make_agent())

        assert await store.find_by_token("") is None

    async def test_get_agent(self, store: InMemoryStore) -> None:
        await store.add_agent(make_agent(2))

        assert (await store.get_agent(2)).name == "agent-2"
        assert await store.get_agent(3) is None


class TestWorkspaceStore:
    async def test_list_for_agent_ordered_by_id(self, store: InMemoryStore) -> None:
        await store.save(make_workspace(12))
        await store.save(make_workspace(10))
        await store.save(make_workspace(11, agent_id=2))

        workspaces = await store.list_for_agent(1)

        assert [w.id for w in workspaces] == [10, 12]

    async def test_get_by_name_is_scoped_to_agent(self, store: InMemoryStore) -> None:
        await store.save(make_workspace(10, agent_id=2))

        assert await store.get_by_name(1, "workspace-10") is None
        assert (await store.get_by_name(2, "workspace-10")).id == 10

    async def test_returns_copies(self, store: InMemoryStore) -> None:
        """Changes are only visible after save()."""
        await store.save(make_workspace(10))

        workspace = await store.get_by_name(1, "workspace-10")
        workspace.actual_state = States.RUNNING

        assert (await store.get_by_name(1, "workspace-10")).actual_state == States.CREATION_REQUESTED

        await store.save(workspace)
        assert (await store.get_by_name(1, "workspace-10")).actual_state == States.RUNNING
