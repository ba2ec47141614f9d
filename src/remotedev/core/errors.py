"""Error handling module for remotedev.

This module defines error codes, exception classes, and response models.

Error Response Format:
{
    "error": {
        "code": "UNAUTHORIZED",
        "message": "Agent token required"
    }
}

Usage:
    from remotedev.core.errors import ForbiddenError

    raise ForbiddenError("Remote development is not licensed")
"""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes."""

    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    AGENT_NOT_FOUND = "AGENT_NOT_FOUND"
    INVALID_WORKSPACE_CONFIG = "INVALID_WORKSPACE_CONFIG"


class ErrorDetail(BaseModel):
    """Error detail containing code and message."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error response format."""

    error: ErrorDetail


class RemoteDevError(Exception):
    """Base exception for remotedev.

    All remotedev specific exceptions inherit from this class so that the
    FastAPI app can render them with a single exception handler.

    Attributes:
        code: The error code from ErrorCode enum
        message: Human-readable error message
        status_code: HTTP status code to return
    """

    def __init__(self, code: ErrorCode, message: str, status_code: int) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert exception to ErrorResponse model."""
        return ErrorResponse(
            error=ErrorDetail(code=self.code.value, message=self.message)
        )


class UnauthorizedError(RemoteDevError):
    """401 Unauthorized - Missing or invalid agent token."""

    def __init__(self, message: str = "Agent token required") -> None:
        super().__init__(ErrorCode.UNAUTHORIZED, message, 401)


class ForbiddenError(RemoteDevError):
    """403 Forbidden - Feature disabled or unlicensed."""

    def __init__(self, message: str = "Remote development is not available") -> None:
        super().__init__(ErrorCode.FORBIDDEN, message, 403)


class AgentNotFoundError(RemoteDevError):
    """404 Not Found - Agent referenced by a workspace is not registered."""

    def __init__(self, message: str = "Agent not found") -> None:
        super().__init__(ErrorCode.AGENT_NOT_FOUND, message, 404)


class InvalidWorkspaceConfigError(RemoteDevError):
    """422 Unprocessable - Workspace is missing data required for reconciliation."""

    def __init__(self, message: str = "Workspace configuration is incomplete") -> None:
        super().__init__(ErrorCode.INVALID_WORKSPACE_CONFIG, message, 422)
