"""Ownership labels and annotations attached to every workspace resource."""

from remotedev.reconcile.output.resources import (
    AGENT_ID_LABEL,
    HOST_TEMPLATE_ANNOTATION,
    OWNING_INVENTORY_ANNOTATION,
    WORKSPACE_ID_ANNOTATION,
)


def build_labels_and_annotations(
    agent_id: int | str,
    domain_template: str,
    owning_inventory: str,
    workspace_id: int | str,
) -> tuple[dict[str, str], dict[str, str]]:
    """Build (labels, annotations) for resources owned by one inventory.

    k8s label and annotation values must be strings, so every value is
    converted with str() here rather than by the callers.
    """
    labels = {
        AGENT_ID_LABEL: str(agent_id),
    }
    annotations = {
        OWNING_INVENTORY_ANNOTATION: str(owning_inventory),
        HOST_TEMPLATE_ANNOTATION: str(domain_template),
        WORKSPACE_ID_ANNOTATION: str(workspace_id),
    }
    return labels, annotations
