"""Fixtures for reconcile unit tests."""

import logging
from datetime import UTC, datetime
from typing import Any

import pytest

from remotedev.core.domain import States, VariableType
from remotedev.core.models import (
    Agent,
    AgentConfig,
    Workspace,
    WorkspaceReconcileContext,
    WorkspaceVariable,
)

DEVFILE = """\
schemaVersion: 2.2.0
components:
  - name: tooling-container
    container:
      image: registry.gitlab.com/gitlab-org/workspaces/gitlab-workspaces-tools:latest
      memoryLimit: 1Gi
      cpuRequest: 500m
      endpoints:
        - name: http-3000
          targetPort: 3000
      volumeMounts:
        - name: gl-workspace-data
          path: /projects
      env:
        - name: GL_EDITOR_PORT
          value: 60001
  - name: gl-workspace-data
    volume:
      size: 50Gi
"""


class RecordingCompiler:
    """Devfile compiler test double returning fixed resources."""

    def __init__(self, resources: list[dict[str, Any]] | None = None) -> None:
        self.resources = resources if resources is not None else [
            {"apiVersion": "apps/v1", "kind": "Deployment", "metadata": {"name": "ws"}},
        ]
        self.calls: list[dict[str, Any]] = []

    def __call__(self, **kwargs: Any) -> list[dict[str, Any]]:
        self.calls.append(kwargs)
        return [dict(r) for r in self.resources]


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("tests.reconcile")


@pytest.fixture
def agent() -> Agent:
    return Agent(
        id=1,
        name="dev-cluster",
        config=AgentConfig(
            dns_zone="workspaces.example.dev",
            network_policy_enabled=True,
            gitlab_workspaces_proxy_namespace="gitlab-workspaces",
        ),
    )


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def make_workspace(now: datetime):
    """Factory for workspaces owned by agent 1."""

    def _make(**overrides: Any) -> Workspace:
        workspace_id = overrides.pop("id", 10)
        fields: dict[str, Any] = {
            "id": workspace_id,
            "name": f"workspace-{workspace_id}",
            "namespace": f"gl-rd-ns-{workspace_id}",
            "agent_id": 1,
            "user_id": 7,
            "processed_devfile": DEVFILE,
            "dns_zone": "workspaces.example.dev",
            "created_at": now,
            "desired_state_updated_at": now,
        }
        fields.update(overrides)
        return Workspace(**fields)

    return _make


@pytest.fixture
def make_context():
    """Factory for reconcile contexts."""

    def _make(**overrides: Any) -> WorkspaceReconcileContext:
        fields: dict[str, Any] = {
            "workspace_id": 10,
            "name": "workspace-10",
            "namespace": "gl-rd-ns-10",
            "desired_state": States.RUNNING,
            "processed_devfile": DEVFILE,
            "dns_zone": "workspaces.example.dev",
            "agent_id": 1,
            "network_policy_enabled": True,
            "gitlab_workspaces_proxy_namespace": "gitlab-workspaces",
            "workspace_variables": (
                WorkspaceVariable(key="API_TOKEN", value="t0ken", variable_type=VariableType.ENVIRONMENT),
                WorkspaceVariable(key="gitconfig", value="[user]\n", variable_type=VariableType.FILE),
            ),
        }
        fields.update(overrides)
        return WorkspaceReconcileContext(**fields)

    return _make


@pytest.fixture
def recording_compiler() -> RecordingCompiler:
    return RecordingCompiler()


@pytest.fixture
def processed_devfile() -> str:
    return DEVFILE
