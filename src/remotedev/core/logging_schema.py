"""Logging field schema - v1.0

Standard fields (added to all logs):
- schema_version: Log schema version
- service: Service name (remotedev-reconciler)
- component: Component name (RECONCILE, GENERATOR, API)
- event: Event type (reconcile_complete, desired_config_empty, etc.)
- trace_id: Request trace ID
- duration_ms: Duration in milliseconds

High cardinality fields (OK in logs, NOT in metric labels):
- workspace_name: Workspace name
- agent_id: Agent ID
"""

from enum import StrEnum


class LogEvent(StrEnum):
    """Standard log event types.

    Use these event types in the 'event' extra field for consistent
    log filtering and analysis.
    """

    # Reconcile events
    RECONCILE_STARTED = "reconcile_started"
    RECONCILE_COMPLETE = "reconcile_complete"
    ORPHANED_WORKSPACE = "orphaned_workspace"
    ABNORMAL_ACTUAL_STATE = "abnormal_actual_state"
    STATE_CHANGED = "state_changed"

    # Generator events
    DESIRED_CONFIG_GENERATED = "desired_config_generated"
    DESIRED_CONFIG_EMPTY = "desired_config_empty"
    DEVFILE_INVALID = "devfile_invalid"

    # Lifecycle events
    APP_STARTED = "app_started"
    APP_STOPPED = "app_stopped"
    STORE_SEEDED = "store_seeded"

    # API events
    REQUEST_COMPLETE = "request_complete"
    REQUEST_FAILED = "request_failed"
    REQUEST_SLOW = "request_slow"
    AUTH_FAILED = "auth_failed"
    FEATURE_DISABLED = "feature_disabled"


class Component(StrEnum):
    """Component identifiers for log filtering."""

    RECONCILE = "reconcile"  # Reconcile protocol handler
    GENERATOR = "generator"  # Desired config generator
    DEVFILE = "devfile"  # Devfile resource compiler
    API = "api"  # REST API
    AGENT = "agent"  # Agent poll client
