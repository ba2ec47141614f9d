"""Agent reconcile endpoint."""

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from remotedev.app.api.dependencies import CurrentAgent, Handler
from remotedev.core.domain import UpdateType
from remotedev.core.models import WorkspaceAgentInfo, WorkspaceReconcileInfo

router = APIRouter(tags=["reconcile"])


# =============================================================================
# Request/Response Models
# =============================================================================


class ReconcileRequest(BaseModel):
    """Agent poll request."""

    update_type: UpdateType
    workspace_agent_infos: list[WorkspaceAgentInfo] = Field(default_factory=list)


class ReconcileResponse(BaseModel):
    """Agent poll response."""

    workspace_rails_infos: list[WorkspaceReconcileInfo]


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "/reconcile",
    response_model=ReconcileResponse,
    status_code=status.HTTP_201_CREATED,
)
async def reconcile(
    body: ReconcileRequest,
    agent: CurrentAgent,
    handler: Handler,
) -> ReconcileResponse:
    """Record reported workspace states and return what the agent should apply."""
    infos = await handler.reconcile(agent, body.update_type, body.workspace_agent_infos)
    return ReconcileResponse(workspace_rails_infos=infos)
