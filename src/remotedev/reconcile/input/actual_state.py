"""Actual state calculation from agent-reported deployment info.

The agent sends the latest Kubernetes Deployment (spec and status) it saw
for a workspace. The actual state is derived from spec.replicas and the
reasons of the Progressing and Available conditions.
"""

from typing import Any

from remotedev.core.domain.workspace import States, TerminationProgress
from remotedev.core.models import WorkspaceErrorDetails

# Progressing condition reasons while a rollout is underway
PROGRESSING_REASONS = frozenset({
    "NewReplicaSetCreated",
    "FoundNewReplicaSet",
    "ReplicaSetUpdated",
})
ROLLOUT_COMPLETE_REASON = "NewReplicaSetAvailable"
PROGRESS_DEADLINE_EXCEEDED_REASON = "ProgressDeadlineExceeded"
MINIMUM_REPLICAS_AVAILABLE_REASON = "MinimumReplicasAvailable"
MINIMUM_REPLICAS_UNAVAILABLE_REASON = "MinimumReplicasUnavailable"


def _condition_reasons(conditions: list[Any]) -> dict[str, str] | None:
    """Map condition type to reason, or None if any condition is malformed."""
    reasons: dict[str, str] = {}
    for condition in conditions:
        if not isinstance(condition, dict):
            return None
        condition_type = condition.get("type")
        reason = condition.get("reason")
        if not condition_type or not reason:
            return None
        reasons[condition_type] = reason
    return reasons


def calculate_actual_state(
    latest_k8s_deployment_info: dict[str, Any] | None,
    termination_progress: TerminationProgress | str | None = None,
    latest_error_details: WorkspaceErrorDetails | dict[str, Any] | None = None,
) -> States:
    """Calculate a workspace's actual state.

    Termination progress and error details take precedence over the
    deployment status: a finished termination is always Terminated, and
    any reported error otherwise wins over an in-progress termination.

    Args:
        latest_k8s_deployment_info: Deployment document with spec and status.
        termination_progress: Terminating or Terminated, if the agent is
            deleting the workspace.
        latest_error_details: Error reported by the agent's applier or
            informer, if any.

    Returns:
        The calculated state. Unknown when the deployment info is incomplete
        or in a combination that is not recognised.
    """
    if termination_progress == TerminationProgress.TERMINATED:
        return States.TERMINATED
    if latest_error_details:
        return States.ERROR
    if termination_progress == TerminationProgress.TERMINATING:
        return States.TERMINATING

    info = latest_k8s_deployment_info or {}
    spec = info.get("spec")
    status = info.get("status")
    if not isinstance(spec, dict) or not isinstance(status, dict):
        return States.UNKNOWN
    replicas = spec.get("replicas")
    conditions = status.get("conditions")
    if not isinstance(replicas, int) or not isinstance(conditions, list):
        return States.UNKNOWN
    if replicas not in (0, 1):
        return States.UNKNOWN

    reasons = _condition_reasons(conditions)
    if reasons is None:
        return States.UNKNOWN
    progressing = reasons.get("Progressing")
    available = reasons.get("Available")

    if progressing in PROGRESSING_REASONS:
        return States.STOPPING if replicas == 0 else States.STARTING

    if progressing == PROGRESS_DEADLINE_EXCEEDED_REASON:
        return States.FAILED

    if progressing == ROLLOUT_COMPLETE_REASON:
        if replicas == 0 and available == MINIMUM_REPLICAS_AVAILABLE_REASON:
            return States.STOPPED
        if (
            available == MINIMUM_REPLICAS_AVAILABLE_REASON
            and status.get("availableReplicas") == 1
        ):
            return States.RUNNING
        # TODO: a scaled-up workspace that keeps failing stays Starting here
        # until the progress deadline passes; detect crash loops from pod status.
        if replicas == 1 and status.get("unavailableReplicas") == 1:
            return States.STARTING
        return States.UNKNOWN

    if available == MINIMUM_REPLICAS_UNAVAILABLE_REASON:
        return States.FAILED

    return States.UNKNOWN
