"""API dependencies for dependency injection."""

import logging
from typing import Annotated

from fastapi import Depends, Header

from remotedev.core.errors import ForbiddenError, UnauthorizedError
from remotedev.core.interfaces import REMOTE_DEVELOPMENT_FEATURE, FeatureChecker
from remotedev.core.logging_schema import Component, LogEvent
from remotedev.core.models import Agent
from remotedev.infra import InMemoryStore
from remotedev.reconcile.handler import ReconcileHandler

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "Bearer "

# Singletons, set during app startup
_store: InMemoryStore | None = None
_feature_checker: FeatureChecker | None = None


def init_dependencies(store: InMemoryStore, feature_checker: FeatureChecker) -> None:
    """Install the store and feature checker used by all endpoints.

    Must be called during app startup.
    """
    global _store, _feature_checker
    _store = store
    _feature_checker = feature_checker


def reset_dependencies() -> None:
    """Reset singletons (for testing)."""
    global _store, _feature_checker
    _store = None
    _feature_checker = None


def get_store() -> InMemoryStore:
    """Get store singleton.

    Raises:
        RuntimeError: If called before init_dependencies().
    """
    if _store is None:
        raise RuntimeError("Store not initialized. Call init_dependencies() first.")
    return _store


def get_feature_checker() -> FeatureChecker:
    """Get feature checker singleton.

    Raises:
        RuntimeError: If called before init_dependencies().
    """
    if _feature_checker is None:
        raise RuntimeError("Feature checker not initialized. Call init_dependencies() first.")
    return _feature_checker


def get_reconcile_handler(
    store: Annotated[InMemoryStore, Depends(get_store)],
) -> ReconcileHandler:
    return ReconcileHandler(store)


async def get_current_agent(
    store: Annotated[InMemoryStore, Depends(get_store)],
    authorization: Annotated[str | None, Header()] = None,
) -> Agent:
    """Resolve the calling agent from its bearer token.

    Raises:
        UnauthorizedError: If the token is missing or unknown
    """
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        raise UnauthorizedError()
    token = authorization[len(_BEARER_PREFIX):].strip()
    agent = await store.find_by_token(token) if token else None
    if agent is None:
        logger.warning(
            "Agent token rejected",
            extra={"event": LogEvent.AUTH_FAILED, "component": Component.API},
        )
        raise UnauthorizedError("Invalid agent token")
    return agent


async def require_remote_development(
    agent: Annotated[Agent, Depends(get_current_agent)],
    features: Annotated[FeatureChecker, Depends(get_feature_checker)],
) -> Agent:
    """Authenticated agent for which remote development is available.

    Raises:
        ForbiddenError: If the feature is disabled or unlicensed
    """
    if not features.is_enabled(REMOTE_DEVELOPMENT_FEATURE, agent):
        logger.info(
            "Remote development not available for agent",
            extra={
                "event": LogEvent.FEATURE_DISABLED,
                "component": Component.API,
                "agent_id": agent.id,
            },
        )
        raise ForbiddenError()
    return agent


CurrentAgent = Annotated[Agent, Depends(require_remote_development)]
Handler = Annotated[ReconcileHandler, Depends(get_reconcile_handler)]
