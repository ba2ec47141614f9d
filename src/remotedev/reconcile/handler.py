"""Reconcile protocol handler.

Handles one agent poll:

1. Apply: record the actual state and deployment resource version reported
   for each known workspace. Reports for unknown workspaces are skipped.
2. Transition: RestartRequested workspaces that reached Stopped go back to
   Running. Workspaces past max_hours_before_termination are Terminated.
3. Select: full polls return every workspace not yet Terminated. Partial
   polls return the reported workspaces and those whose desired state
   changed since the last response.
4. Generate: desired config for each selected workspace that needs one.
5. Bookkeeping: mark every returned workspace as responded to.
"""

import logging
import time
from collections.abc import Callable, Sequence
from datetime import datetime

from remotedev.app.metrics.collector import (
    DESIRED_CONFIG_DURATION,
    DESIRED_CONFIG_EMPTY_TOTAL,
    ORPHANED_WORKSPACES_TOTAL,
    RECONCILE_DURATION,
    RECONCILE_REQUESTS_TOTAL,
    WORKSPACES_RETURNED_TOTAL,
)
from remotedev.core.domain.workspace import ABNORMAL_ACTUAL_STATES, States, UpdateType
from remotedev.core.interfaces.devfile import DevfileCompiler
from remotedev.core.interfaces.store import WorkspaceStore
from remotedev.core.logging_schema import Component, LogEvent
from remotedev.core.models import (
    Agent,
    Workspace,
    WorkspaceAgentInfo,
    WorkspaceReconcileContext,
    WorkspaceReconcileInfo,
)
from remotedev.core.models.workspace import utc_now
from remotedev.reconcile.input.actual_state import calculate_actual_state
from remotedev.reconcile.output.desired_config import generate_desired_config

logger = logging.getLogger(__name__)


class ReconcileHandler:
    """Reconciles the workspaces of one agent per poll.

    The handler holds no per-agent state. Everything it needs between polls
    lives on the Workspace records in the store.
    """

    def __init__(
        self,
        store: WorkspaceStore,
        compiler: DevfileCompiler | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._compiler = compiler
        self._clock = clock

    async def reconcile(
        self,
        agent: Agent,
        update_type: UpdateType,
        workspace_agent_infos: Sequence[WorkspaceAgentInfo],
    ) -> list[WorkspaceReconcileInfo]:
        """Handle one agent poll.

        Args:
            agent: Authenticated agent
            update_type: full or partial
            workspace_agent_infos: Workspaces reported by the agent

        Returns:
            Entries to send back, in response order
        """
        start = time.monotonic()
        now = self._clock()
        logger.debug(
            "Reconcile started",
            extra={
                "event": LogEvent.RECONCILE_STARTED,
                "component": Component.RECONCILE,
                "agent_id": agent.id,
                "update_type": update_type,
                "reported_count": len(workspace_agent_infos),
            },
        )

        reported = await self._apply_agent_infos(agent, workspace_agent_infos)
        workspaces = await self._store.list_for_agent(agent.id)
        for workspace in workspaces:
            if self._transition(workspace, now):
                await self._store.save(workspace)

        to_return = self._select(update_type, workspaces, reported)
        infos = [
            await self._respond(agent, update_type, workspace, now)
            for workspace in to_return
        ]

        duration = time.monotonic() - start
        RECONCILE_REQUESTS_TOTAL.labels(update_type=update_type.value).inc()
        RECONCILE_DURATION.labels(update_type=update_type.value).observe(duration)
        WORKSPACES_RETURNED_TOTAL.labels(update_type=update_type.value).inc(len(infos))
        logger.info(
            "Reconcile completed",
            extra={
                "event": LogEvent.RECONCILE_COMPLETE,
                "component": Component.RECONCILE,
                "agent_id": agent.id,
                "update_type": update_type,
                "reported_count": len(workspace_agent_infos),
                "returned_count": len(infos),
                "duration_ms": duration * 1000,
            },
        )
        return infos

    async def _apply_agent_infos(
        self,
        agent: Agent,
        workspace_agent_infos: Sequence[WorkspaceAgentInfo],
    ) -> list[str]:
        """Record reported state. Returns names of known reported workspaces."""
        reported: list[str] = []
        for info in workspace_agent_infos:
            workspace = await self._store.get_by_name(agent.id, info.name)
            if workspace is None:
                ORPHANED_WORKSPACES_TOTAL.inc()
                logger.warning(
                    "Received agent info for workspace that does not exist",
                    extra={
                        "event": LogEvent.ORPHANED_WORKSPACE,
                        "component": Component.RECONCILE,
                        "error_type": LogEvent.ORPHANED_WORKSPACE,
                        "agent_id": agent.id,
                        "workspace_name": info.name,
                        "workspace_namespace": info.namespace,
                    },
                )
                continue

            actual_state = info.actual_state or calculate_actual_state(
                info.latest_k8s_deployment_info,
                termination_progress=info.termination_progress,
                latest_error_details=info.error_details,
            )
            if actual_state in ABNORMAL_ACTUAL_STATES:
                logger.warning(
                    "Abnormal workspace actual state",
                    extra={
                        "event": LogEvent.ABNORMAL_ACTUAL_STATE,
                        "component": Component.RECONCILE,
                        "error_type": LogEvent.ABNORMAL_ACTUAL_STATE,
                        "agent_id": agent.id,
                        "workspace_name": workspace.name,
                        "actual_state": actual_state,
                        "error_details": (
                            info.error_details.model_dump(mode="json")
                            if info.error_details
                            else None
                        ),
                    },
                )
            if actual_state != workspace.actual_state:
                logger.info(
                    "Workspace actual state changed",
                    extra={
                        "event": LogEvent.STATE_CHANGED,
                        "component": Component.RECONCILE,
                        "workspace_name": workspace.name,
                        "from_state": workspace.actual_state,
                        "to_state": actual_state,
                    },
                )
            workspace.actual_state = actual_state
            # Terminated reports carry no deployment, keep the last known version
            if info.resource_version is not None:
                workspace.deployment_resource_version = info.resource_version
            await self._store.save(workspace)
            if workspace.name not in reported:
                reported.append(workspace.name)
        return reported

    def _transition(self, workspace: Workspace, now: datetime) -> bool:
        """Apply server-side desired state transitions. Returns True if changed."""
        desired_state = workspace.desired_state
        if desired_state == States.RESTART_REQUESTED and workspace.actual_state == States.STOPPED:
            desired_state = States.RUNNING
        if desired_state != States.TERMINATED and workspace.is_expired(now):
            desired_state = States.TERMINATED
        if desired_state == workspace.desired_state:
            return False

        logger.info(
            "Workspace desired state changed",
            extra={
                "event": LogEvent.STATE_CHANGED,
                "component": Component.RECONCILE,
                "workspace_name": workspace.name,
                "from_state": workspace.desired_state,
                "to_state": desired_state,
            },
        )
        workspace.set_desired_state(desired_state, now)
        return True

    def _select(
        self,
        update_type: UpdateType,
        workspaces: list[Workspace],
        reported: list[str],
    ) -> list[Workspace]:
        if update_type == UpdateType.FULL:
            return [w for w in workspaces if w.actual_state != States.TERMINATED]

        by_name = {w.name: w for w in workspaces}
        selected = [by_name[name] for name in reported if name in by_name]
        changed = sorted(
            (
                w
                for w in workspaces
                if w.name not in reported
                and w.desired_state_updated_more_recently_than_last_response_to_agent()
            ),
            key=lambda w: w.name,
        )
        return selected + changed

    async def _respond(
        self,
        agent: Agent,
        update_type: UpdateType,
        workspace: Workspace,
        now: datetime,
    ) -> WorkspaceReconcileInfo:
        full = update_type == UpdateType.FULL
        config_to_apply = None
        if (
            full
            or workspace.force_include_all_resources
            or workspace.desired_state_updated_more_recently_than_last_response_to_agent()
        ):
            context = WorkspaceReconcileContext.from_workspace(workspace, agent)
            with DESIRED_CONFIG_DURATION.time():
                desired_config = generate_desired_config(
                    context,
                    include_all_resources=full or workspace.force_include_all_resources,
                    logger=logger,
                    compiler=self._compiler,
                )
            if desired_config:
                config_to_apply = desired_config
            else:
                DESIRED_CONFIG_EMPTY_TOTAL.inc()

        info = WorkspaceReconcileInfo(
            name=workspace.name,
            namespace=workspace.namespace,
            desired_state=workspace.desired_state,
            actual_state=workspace.actual_state,
            deployment_resource_version=workspace.deployment_resource_version,
            config_to_apply=config_to_apply,
        )

        workspace.responded_to_agent_at = now
        workspace.force_include_all_resources = False
        await self._store.save(workspace)
        return info
