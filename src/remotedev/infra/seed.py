"""Load agents and workspaces into the in-memory store from YAML.

Example seed file:

    agents:
      - id: 1
        name: dev-cluster
        token: s3cr3t
        config:
          dns_zone: workspaces.example.dev
    workspaces:
      - id: 10
        name: workspace-1-1-abc123
        namespace: gl-rd-ns-1-1-abc123
        agent_id: 1
        dns_zone: workspaces.example.dev
        processed_devfile: |
          schemaVersion: 2.2.0
          components: ...
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from remotedev.core.errors import AgentNotFoundError
from remotedev.core.logging_schema import LogEvent
from remotedev.core.models import Agent, Workspace
from remotedev.infra.memory import InMemoryStore

logger = logging.getLogger(__name__)


class SeedAgent(Agent):
    """Agent entry of a seed file, with its raw bearer token."""

    token: str


class SeedFile(BaseModel):
    agents: list[SeedAgent] = Field(default_factory=list)
    workspaces: list[Workspace] = Field(default_factory=list)


async def load_seed(store: InMemoryStore, path: str | Path) -> SeedFile:
    """Load a seed file into the store.

    Raises:
        FileNotFoundError: If the seed file does not exist
        yaml.YAMLError: If the file is not valid YAML
        pydantic.ValidationError: If an entry is malformed
        AgentNotFoundError: If a workspace references an agent that is not registered
    """
    raw = yaml.safe_load(Path(path).read_text()) or {}
    seed = SeedFile.model_validate(raw)

    for entry in seed.agents:
        agent = Agent.model_validate(entry.model_dump(exclude={"token"}))
        await store.add_agent(agent, token=entry.token)
    for workspace in seed.workspaces:
        if await store.get_agent(workspace.agent_id) is None:
            raise AgentNotFoundError(
                f"Workspace {workspace.name} references unknown agent {workspace.agent_id}"
            )
        await store.save(workspace)

    logger.info(
        "Store seeded",
        extra={
            "event": LogEvent.STORE_SEEDED,
            "path": str(path),
            "agent_count": len(seed.agents),
            "workspace_count": len(seed.workspaces),
        },
    )
    return seed
