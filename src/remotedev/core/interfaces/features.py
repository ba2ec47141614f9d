"""Feature availability interface checked at the reconcile boundary."""

from abc import ABC, abstractmethod

from remotedev.core.models import Agent

REMOTE_DEVELOPMENT_FEATURE = "remote_development"


class FeatureChecker(ABC):
    """Capability check evaluated once per request.

    Implementations: SettingsFeatureChecker
    """

    @abstractmethod
    def is_enabled(self, feature: str, scope: Agent | None = None) -> bool:
        """Check whether a feature is enabled and licensed for a scope.

        Args:
            feature: Feature name (e.g., "remote_development")
            scope: Agent the request is made for, None for global checks

        Returns:
            True if the feature may be used
        """
        ...
