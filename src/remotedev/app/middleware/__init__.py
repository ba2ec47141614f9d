"""HTTP middleware."""

from remotedev.app.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
