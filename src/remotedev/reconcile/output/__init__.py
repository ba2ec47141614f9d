"""Desired config generation."""

from remotedev.reconcile.output.desired_config import (
    generate_desired_config,
    get_domain_template,
    get_workspace_replicas,
)

__all__ = [
    "generate_desired_config",
    "get_domain_template",
    "get_workspace_replicas",
]
