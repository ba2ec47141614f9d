"""Core interfaces for the reconciler."""

from remotedev.core.interfaces.devfile import DevfileCompiler
from remotedev.core.interfaces.features import REMOTE_DEVELOPMENT_FEATURE, FeatureChecker
from remotedev.core.interfaces.store import AgentRegistry, WorkspaceStore

__all__ = [
    # Stores
    "AgentRegistry",
    "WorkspaceStore",
    # Feature gating
    "FeatureChecker",
    "REMOTE_DEVELOPMENT_FEATURE",
    # Devfile compiler
    "DevfileCompiler",
]
