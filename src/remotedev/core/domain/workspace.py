"""Workspace domain enums.

States are shared between desired_state (user intent) and actual_state
(agent observation). RESTART_REQUESTED only ever appears as a desired state.
"""

from enum import StrEnum


class States(StrEnum):
    """Workspace lifecycle states."""

    UNKNOWN = "Unknown"
    CREATION_REQUESTED = "CreationRequested"
    STARTING = "Starting"
    RUNNING = "Running"
    STOPPING = "Stopping"
    STOPPED = "Stopped"
    TERMINATING = "Terminating"
    TERMINATED = "Terminated"
    FAILED = "Failed"
    ERROR = "Error"
    RESTART_REQUESTED = "RestartRequested"
    ROTATE_CREDENTIALS = "RotateCredentials"


class UpdateType(StrEnum):
    """Reconcile poll type sent by the agent."""

    FULL = "full"
    PARTIAL = "partial"


class VariableType(StrEnum):
    """How a workspace variable is injected into the workspace pod."""

    ENVIRONMENT = "env_var"
    FILE = "file"


class ErrorType(StrEnum):
    """error_details.error_type values reported by the agent."""

    APPLIER = "applier"
    KUBERNETES = "kubernetes"


class TerminationProgress(StrEnum):
    """termination_progress values reported by the agent."""

    TERMINATING = "Terminating"
    TERMINATED = "Terminated"


# Desired states that schedule the workspace pod (replicas=1)
STARTED_STATES = frozenset({
    States.CREATION_REQUESTED,
    States.RUNNING,
})

# Actual states that are logged as abnormal when reported
ABNORMAL_ACTUAL_STATES = frozenset({
    States.UNKNOWN,
    States.ERROR,
})
