"""Prometheus metrics module."""

from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest
from starlette.responses import Response


def get_metrics_response() -> Response:
    """Generate Prometheus metrics in text format from the process registry."""
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
    )
