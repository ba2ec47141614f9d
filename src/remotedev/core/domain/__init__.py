"""Domain enums."""

from remotedev.core.domain.workspace import (
    ABNORMAL_ACTUAL_STATES,
    STARTED_STATES,
    ErrorType,
    States,
    TerminationProgress,
    UpdateType,
    VariableType,
)

__all__ = [
    "ErrorType",
    "States",
    "TerminationProgress",
    "UpdateType",
    "VariableType",
    "ABNORMAL_ACTUAL_STATES",
    "STARTED_STATES",
]
