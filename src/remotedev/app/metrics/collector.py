"""Prometheus metrics definitions for the reconcile service."""

from prometheus_client import Counter, Histogram

# =============================================================================
# Histogram Buckets
# =============================================================================
# Log scale with SLO boundaries (200ms, 1s, 5s)

# FAST: CPU-bound work such as generating a desired config (0.5ms ~ 5s)
_BUCKETS_FAST = (
    0.0005, 0.001, 0.002, 0.005, 0.01,
    0.02, 0.05, 0.1, 0.2, 0.5,
    1, 2, 5,
)  # 13 buckets

# MEDIUM: HTTP requests and whole reconcile polls (5ms ~ 60s)
_BUCKETS_MEDIUM = (
    0.005, 0.01, 0.02, 0.04, 0.09,
    0.18, 0.36, 0.73, 1.5, 3,
    6.2, 12.7, 26, 53,
)  # 14 buckets

# =============================================================================
# HTTP Metrics
# =============================================================================

HTTP_REQUESTS_TOTAL = Counter(
    "remotedev_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "remotedev_http_request_duration_seconds",
    "HTTP request duration",
    ["method", "endpoint"],
    buckets=_BUCKETS_MEDIUM,
)

# =============================================================================
# Reconcile Metrics
# =============================================================================
# agent_id is high cardinality and stays out of labels (see logging_schema)

RECONCILE_REQUESTS_TOTAL = Counter(
    "remotedev_reconcile_requests_total",
    "Total agent reconcile polls handled",
    ["update_type"],
)

RECONCILE_DURATION = Histogram(
    "remotedev_reconcile_duration_seconds",
    "Duration of handling one agent reconcile poll",
    ["update_type"],
    buckets=_BUCKETS_MEDIUM,
)

WORKSPACES_RETURNED_TOTAL = Counter(
    "remotedev_workspaces_returned_total",
    "Workspaces returned to agents",
    ["update_type"],
)

ORPHANED_WORKSPACES_TOTAL = Counter(
    "remotedev_orphaned_workspaces_total",
    "Agent reports for workspaces unknown to the store",
)

# =============================================================================
# Desired Config Metrics
# =============================================================================

DESIRED_CONFIG_DURATION = Histogram(
    "remotedev_desired_config_duration_seconds",
    "Duration of generating a workspace desired config",
    buckets=_BUCKETS_FAST,
)

DESIRED_CONFIG_EMPTY_TOTAL = Counter(
    "remotedev_desired_config_empty_total",
    "Desired configs skipped because the devfile compiled to nothing",
)
