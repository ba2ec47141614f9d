"""Helpers shared by the k8s resource builders."""

from typing import Any

Resource = dict[str, Any]

# Annotation/label keys written on every workspace resource
AGENT_ID_LABEL = "agent.gitlab.com/id"
INVENTORY_ID_LABEL = "cli-utils.sigs.k8s.io/inventory-id"
OWNING_INVENTORY_ANNOTATION = "config.k8s.io/owning-inventory"
HOST_TEMPLATE_ANNOTATION = "workspaces.gitlab.com/host-template"
WORKSPACE_ID_ANNOTATION = "workspaces.gitlab.com/id"


def stringify_keys(value: Any) -> Any:
    """Return a deep copy of value with every mapping key converted to str.

    Lists and tuples are rebuilt as lists. Scalars are returned unchanged.
    """
    if isinstance(value, dict):
        return {str(k): stringify_keys(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [stringify_keys(v) for v in value]
    return value
