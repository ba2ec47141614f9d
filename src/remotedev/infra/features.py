"""Feature checker backed by application settings."""

import logging

from remotedev.app.config import FeaturesConfig
from remotedev.core.interfaces.features import REMOTE_DEVELOPMENT_FEATURE, FeatureChecker
from remotedev.core.models import Agent

logger = logging.getLogger(__name__)


class SettingsFeatureChecker(FeatureChecker):
    """Evaluates feature availability from FeaturesConfig.

    Only remote_development is known. Unknown features are disabled.
    """

    def __init__(self, config: FeaturesConfig) -> None:
        self._config = config

    def is_enabled(self, feature: str, scope: Agent | None = None) -> bool:
        if feature != REMOTE_DEVELOPMENT_FEATURE:
            logger.debug("Unknown feature %s treated as disabled", feature)
            return False
        if not (self._config.remote_development_enabled and self._config.remote_development_licensed):
            return False
        return scope is None or scope.id not in self._config.disabled_agent_ids
