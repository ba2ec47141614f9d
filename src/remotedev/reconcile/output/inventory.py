"""Inventory ConfigMap used by the agent's apply/prune tool."""

from remotedev.reconcile.output.resources import (
    AGENT_ID_LABEL,
    INVENTORY_ID_LABEL,
    Resource,
    stringify_keys,
)


def build_inventory_config_map(name: str, namespace: str, agent_id: int | str) -> Resource:
    """Build the inventory marker for a group of resources.

    Resources annotated with config.k8s.io/owning-inventory=<name> belong to
    this inventory. Resources that drop out of a later apply are pruned.
    """
    return stringify_keys({
        "kind": "ConfigMap",
        "apiVersion": "v1",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "labels": {
                INVENTORY_ID_LABEL: name,
                AGENT_ID_LABEL: str(agent_id),
            },
        },
    })
