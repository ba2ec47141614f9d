"""Tests for JSON logging helpers."""

import json
import logging

from remotedev.app.config import LoggingConfig
from remotedev.app.logging import (
    CustomJsonFormatter,
    RateLimitFilter,
    clear_trace_context,
    set_trace_id,
)


def make_record(msg: str = "hello", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord("test", level, __file__, 1, msg, None, None)


class TestRateLimitFilter:
    def test_suppresses_after_limit(self) -> None:
        log_filter = RateLimitFilter(rate_per_minute=2)

        results = [log_filter.filter(make_record()) for _ in range(4)]

        # 2 allowed, 1 marked as rate limited, rest dropped
        assert results == [True, True, True, False]

    def test_errors_always_pass(self) -> None:
        log_filter = RateLimitFilter(rate_per_minute=1)

        results = [log_filter.filter(make_record(level=logging.ERROR)) for _ in range(5)]

        assert all(results)

    def test_events_limited_per_workspace(self) -> None:
        log_filter = RateLimitFilter(rate_per_minute=1)

        def devfile_warning(workspace_name: str) -> logging.LogRecord:
            record = make_record("Failed to compile devfile", level=logging.WARNING)
            record.event = "devfile_invalid"
            record.workspace_name = workspace_name
            return record

        results = [
            log_filter.filter(devfile_warning(name))
            for name in ("workspace-1", "workspace-1", "workspace-1", "workspace-2")
        ]

        # workspace-1: allowed, marked, dropped. workspace-2 has its own budget
        assert results == [True, True, False, True]


class TestCustomJsonFormatter:
    def test_adds_standard_fields(self) -> None:
        formatter = CustomJsonFormatter(config=LoggingConfig(service_name="svc"))
        set_trace_id("trace-1")
        try:
            record = make_record()
            record.event = "reconcile_complete"
            output = json.loads(formatter.format(record))
        finally:
            clear_trace_context()

        assert output["service"] == "svc"
        assert output["schema_version"] == "1.0"
        assert output["level"] == "INFO"
        assert output["trace_id"] == "trace-1"
        assert output["event"] == "reconcile_complete"
