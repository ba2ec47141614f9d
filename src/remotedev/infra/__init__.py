"""Infrastructure implementations (in-memory store, feature checker)."""

from remotedev.infra.features import SettingsFeatureChecker
from remotedev.infra.memory import InMemoryStore, token_digest
from remotedev.infra.seed import load_seed

__all__ = [
    # Store
    "InMemoryStore",
    "token_digest",
    "load_seed",
    # Feature gating
    "SettingsFeatureChecker",
]
