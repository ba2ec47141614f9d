"""JSON logging configuration with request tracing and rate limiting."""

import logging
import sys
import time
from collections import defaultdict
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pythonjsonlogger import jsonlogger

from remotedev.app.config import LoggingConfig, get_settings

trace_id_ctx: ContextVar[str | None] = ContextVar("trace_id", default=None)


def get_trace_id() -> str | None:
    """Get current trace_id from context."""
    return trace_id_ctx.get()


def set_trace_id(trace_id: str | None = None) -> str:
    """Set trace_id in context, generating one if not provided.

    Args:
        trace_id: Optional trace ID to set. If None, generates a new UUID.

    Returns:
        The trace ID that was set.
    """
    tid = trace_id or str(uuid4())
    trace_id_ctx.set(tid)
    return tid


def clear_trace_context() -> None:
    """Clear trace context (call at end of request)."""
    trace_id_ctx.set(None)


class RateLimitFilter(logging.Filter):
    """Limit repeated log records to rate_per_minute.

    Agents poll every few seconds, so a broken devfile would otherwise log
    the same warning on every poll. Records carrying a structured event are
    limited per event and workspace (or agent), so one broken workspace does
    not hide warnings about another. ERROR logs always pass.
    """

    def __init__(self, rate_per_minute: int = 100) -> None:
        super().__init__()
        self.rate_per_minute = rate_per_minute
        self._counts: dict[str, list[float]] = defaultdict(list)
        self._warned: set[str] = set()

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.ERROR:
            return True

        key = self._key(record)
        now = time.time()
        self._counts[key] = [t for t in self._counts[key] if now - t < 60]

        if len(self._counts[key]) >= self.rate_per_minute:
            # Let the first suppressed record through with a marker
            if key not in self._warned:
                self._warned.add(key)
                record.msg = f"[RATE LIMITED] {record.msg} (max {self.rate_per_minute}/min)"
                self._counts[key].append(now)
                return True
            return False

        if key in self._warned and len(self._counts[key]) < self.rate_per_minute // 2:
            self._warned.discard(key)

        self._counts[key].append(now)
        return True

    @staticmethod
    def _key(record: logging.LogRecord) -> str:
        event = getattr(record, "event", None)
        if event is None:
            return f"{record.name}:{record.lineno}:{record.msg}"
        subject = getattr(record, "workspace_name", None) or getattr(record, "agent_id", "")
        return f"{event}:{subject}"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with schema version, service name and trace ID."""

    def __init__(self, *args: Any, config: LoggingConfig | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        config = config or get_settings().logging
        self._schema_version = config.schema_version
        self._service = config.service_name

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.fromtimestamp(
            record.created, tz=timezone.utc
        ).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["pid"] = record.process
        log_record["lineno"] = record.lineno

        log_record["schema_version"] = self._schema_version
        log_record["service"] = self._service

        if trace_id := get_trace_id():
            log_record.setdefault("trace_id", trace_id)

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        log_record.pop("color_message", None)


def setup_logging(level: int | None = None) -> None:
    """Configure JSON logging for the application.

    Args:
        level: Log level. If None, uses LOGGING_LEVEL from settings.
    """
    config = get_settings().logging

    if level is None:
        level = getattr(logging, config.level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter(config=config))
    handler.addFilter(RateLimitFilter(config.rate_limit_per_minute))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in ("uvicorn", "uvicorn.error"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.propagate = False
        uv_logger.addHandler(handler)

    # LoggingMiddleware emits one structured line per request instead
    logging.getLogger("uvicorn.access").disabled = True

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
