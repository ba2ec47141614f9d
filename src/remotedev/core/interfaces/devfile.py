"""Devfile resource compiler interface."""

import logging
from typing import Any, Protocol


class DevfileCompiler(Protocol):
    """Turns a processed devfile into core workspace k8s resources.

    Returns an empty list when the devfile cannot be compiled. Recoverable
    problems are reported through logger and never raised.
    """

    def __call__(
        self,
        *,
        processed_devfile: str,
        name: str,
        namespace: str,
        replicas: int,
        domain_template: str,
        labels: dict[str, str],
        annotations: dict[str, str],
        env_secret_names: list[str],
        file_secret_names: list[str],
        logger: logging.Logger,
    ) -> list[dict[str, Any]]: ...
