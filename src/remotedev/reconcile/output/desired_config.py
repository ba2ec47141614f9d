"""Desired config generation for one workspace.

Output order is fixed:

    [workspace inventory, *devfile resources, network policy?, secrets inventory?, env secret?, file secret?]

The generator is pure. It reads a WorkspaceReconcileContext snapshot and
returns fresh resource documents on every call.
"""

import logging

from remotedev.core.domain.workspace import STARTED_STATES, States
from remotedev.core.interfaces.devfile import DevfileCompiler
from remotedev.core.logging_schema import Component, LogEvent
from remotedev.core.models import WorkspaceReconcileContext
from remotedev.reconcile.output.devfile import compile_devfile
from remotedev.reconcile.output.inventory import build_inventory_config_map
from remotedev.reconcile.output.labels import build_labels_and_annotations
from remotedev.reconcile.output.naming import (
    env_secret_name as make_env_secret_name,
    file_secret_name as make_file_secret_name,
    get_domain_template,
    workspace_inventory_name,
)
from remotedev.reconcile.output.network_policy import build_network_policy
from remotedev.reconcile.output.resources import Resource, stringify_keys
from remotedev.reconcile.output.secrets import build_secrets


def get_workspace_replicas(desired_state: States) -> int:
    """1 if the workspace pod should be scheduled, else 0."""
    return 1 if desired_state in STARTED_STATES else 0


def generate_desired_config(
    context: WorkspaceReconcileContext,
    include_all_resources: bool,
    logger: logging.Logger,
    compiler: DevfileCompiler | None = None,
) -> list[Resource]:
    """Generate the ordered k8s resources to apply for a workspace.

    Args:
        context: Workspace snapshot with its agent config
        include_all_resources: Also emit the secrets inventory and secrets
        logger: Sink for devfile diagnostics
        compiler: Devfile resource compiler (defaults to compile_devfile)

    Returns:
        Resources to apply, or [] if the devfile could not be compiled.
    """
    compiler = compiler or compile_devfile
    env_secret_name = make_env_secret_name(context.name)
    file_secret_name = make_file_secret_name(context.name)
    replicas = get_workspace_replicas(context.desired_state)
    domain_template = get_domain_template(context.name, context.dns_zone)
    inventory_name = workspace_inventory_name(context.name)
    labels, annotations = build_labels_and_annotations(
        agent_id=context.agent_id,
        domain_template=domain_template,
        owning_inventory=inventory_name,
        workspace_id=context.workspace_id,
    )

    workspace_resources = compiler(
        processed_devfile=context.processed_devfile,
        name=context.name,
        namespace=context.namespace,
        replicas=replicas,
        domain_template=domain_template,
        labels=labels,
        annotations=annotations,
        env_secret_names=[env_secret_name],
        file_secret_names=[file_secret_name],
        logger=logger,
    )
    # Nothing is applied until the devfile compiles again
    if not workspace_resources:
        logger.warning(
            "No resources compiled from devfile, skipping desired config",
            extra={
                "event": LogEvent.DESIRED_CONFIG_EMPTY,
                "component": Component.GENERATOR,
                "workspace_name": context.name,
                "workspace_id": context.workspace_id,
            },
        )
        return []

    desired_config: list[Resource] = [
        build_inventory_config_map(
            name=inventory_name,
            namespace=context.namespace,
            agent_id=context.agent_id,
        ),
        *(stringify_keys(resource) for resource in workspace_resources),
    ]

    if context.network_policy_enabled:
        desired_config.append(
            build_network_policy(
                name=context.name,
                namespace=context.namespace,
                labels=labels,
                annotations=annotations,
                proxy_namespace=context.gitlab_workspaces_proxy_namespace,
            )
        )

    if include_all_resources:
        desired_config.extend(
            build_secrets(
                context,
                env_secret_name=env_secret_name,
                file_secret_name=file_secret_name,
            )
        )

    logger.debug(
        "Generated desired config",
        extra={
            "event": LogEvent.DESIRED_CONFIG_GENERATED,
            "component": Component.GENERATOR,
            "workspace_name": context.name,
            "resource_count": len(desired_config),
            "include_all_resources": include_all_resources,
        },
    )
    return desired_config
