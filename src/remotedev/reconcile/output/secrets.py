"""Secrets holding workspace variables.

Variables are split by type: env_var variables are exposed through envFrom,
file variables are mounted as files. Both secrets live in their own
inventory so they can be applied separately from the workload.
"""

import base64
from collections.abc import Iterable

from remotedev.core.domain.workspace import VariableType
from remotedev.core.models import WorkspaceReconcileContext, WorkspaceVariable
from remotedev.reconcile.output.inventory import build_inventory_config_map
from remotedev.reconcile.output.labels import build_labels_and_annotations
from remotedev.reconcile.output.naming import get_domain_template, secrets_inventory_name
from remotedev.reconcile.output.resources import Resource, stringify_keys


def _encode(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def _secret_data(
    variables: Iterable[WorkspaceVariable], variable_type: VariableType
) -> dict[str, str]:
    """Fold variables of one type into key -> base64 value (last key wins)."""
    data: dict[str, str] = {}
    for variable in variables:
        if variable.variable_type == variable_type:
            data[variable.key] = variable.value
    return {key: _encode(value) for key, value in data.items()}


def build_secret(
    name: str,
    namespace: str,
    labels: dict[str, str],
    annotations: dict[str, str],
    data: dict[str, str],
) -> Resource:
    """Build an Opaque secret. data values must already be base64 encoded."""
    return stringify_keys({
        "kind": "Secret",
        "apiVersion": "v1",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "labels": dict(labels),
            "annotations": dict(annotations),
        },
        "data": dict(data),
    })


def build_secrets(
    context: WorkspaceReconcileContext,
    env_secret_name: str,
    file_secret_name: str,
) -> list[Resource]:
    """Build [inventory, env secret, file secret] for a workspace.

    Both secrets are always emitted, with empty data when the workspace has
    no variables of that type.
    """
    inventory_name = secrets_inventory_name(context.name)
    domain_template = get_domain_template(context.name, context.dns_zone)
    labels, annotations = build_labels_and_annotations(
        agent_id=context.agent_id,
        domain_template=domain_template,
        owning_inventory=inventory_name,
        workspace_id=context.workspace_id,
    )

    inventory = build_inventory_config_map(
        name=inventory_name,
        namespace=context.namespace,
        agent_id=context.agent_id,
    )
    env_secret = build_secret(
        name=env_secret_name,
        namespace=context.namespace,
        labels=labels,
        annotations=annotations,
        data=_secret_data(context.workspace_variables, VariableType.ENVIRONMENT),
    )
    file_secret = build_secret(
        name=file_secret_name,
        namespace=context.namespace,
        labels=labels,
        annotations=annotations,
        data=_secret_data(context.workspace_variables, VariableType.FILE),
    )

    return [inventory, env_secret, file_secret]
