"""
Logging configuration for the bootstrap invoker.

Centralized logging setup with:
- Structured JSON output
- Lambda request ID and function name bound per invocation
- Performance timing helpers

The bootstrap child writes to the inherited stdout/stderr directly.
Its output never passes through this pipeline.
"""

import logging
import sys
import time
from typing import Any

import structlog


def configure_logging(service_name: str, level: str = "INFO") -> None:
    """
    Configure structured logging for the invoker.

    Args:
        service_name: Name of the service for log context
        level: Standard logging level name
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _add_service_name(service_name),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def _add_service_name(service_name: str):
    """Processor to add service name to all logs."""

    def processor(logger, method_name, event_dict):
        event_dict["service"] = service_name
        return event_dict

    return processor


def bind_invocation_context(context: Any) -> str:
    """
    Bind Lambda request metadata to every log line of this invocation.

    Fields left over from the previous invocation in a warm container are
    cleared first.

    Args:
        context: Lambda context object (any attributes may be missing)

    Returns:
        The request ID, or an empty string when the context has none
    """
    structlog.contextvars.clear_contextvars()

    fields = {}
    request_id = getattr(context, "aws_request_id", None)
    if isinstance(request_id, str) and request_id:
        fields["invocation_id"] = request_id
    function_name = getattr(context, "function_name", None)
    if isinstance(function_name, str) and function_name:
        fields["function_name"] = function_name

    structlog.contextvars.bind_contextvars(**fields)
    return fields.get("invocation_id", "")


class Timer:
    """
    Context manager for timing operations.

    Usage:
        with Timer() as t:
            await child.wait()
        logger.info("Child exited", duration_ms=t.duration_ms)
    """

    def __init__(self):
        self._start: float = 0
        self._end: float = 0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args) -> None:
        self._end = time.perf_counter()

    @property
    def duration_ms(self) -> float:
        """Duration in milliseconds, rounded to 2 decimal places."""
        return round((self._end - self._start) * 1000, 2)


def truncate_for_logging(value: str, visible_chars: int = 256) -> str:
    """Shorten long values (event payloads) before logging them."""
    if not value:
        return ""
    if len(value) <= visible_chars:
        return value
    return value[:visible_chars] + "..."
