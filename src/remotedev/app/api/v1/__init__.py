"""API v1 module."""

from remotedev.app.api.v1.reconcile import router as reconcile_router

__all__ = ["reconcile_router"]
