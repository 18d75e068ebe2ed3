"""Tests for per-invocation log context."""

from types import SimpleNamespace

import pytest
import structlog

from bootstrap_invoker.infrastructure.logging import Timer, bind_invocation_context, truncate_for_logging


@pytest.fixture(autouse=True)
def clean_contextvars():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


class TestBindInvocationContext:
    def test_binds_request_id_and_function_name(self) -> None:
        context = SimpleNamespace(aws_request_id="req-1", function_name="runner")

        assert bind_invocation_context(context) == "req-1"
        assert structlog.contextvars.get_contextvars() == {
            "invocation_id": "req-1",
            "function_name": "runner",
        }

    def test_previous_invocation_cleared(self) -> None:
        bind_invocation_context(SimpleNamespace(aws_request_id="req-1", function_name="runner"))
        structlog.contextvars.bind_contextvars(stale="value")

        bind_invocation_context(SimpleNamespace(aws_request_id="req-2"))

        assert structlog.contextvars.get_contextvars() == {"invocation_id": "req-2"}

    def test_context_without_metadata(self) -> None:
        bind_invocation_context(SimpleNamespace(aws_request_id="stale"))

        assert bind_invocation_context(object()) == ""
        assert structlog.contextvars.get_contextvars() == {}

    def test_bound_fields_merged_into_events(self) -> None:
        bind_invocation_context(SimpleNamespace(aws_request_id="req-3"))

        event_dict = structlog.contextvars.merge_contextvars(None, "info", {"event": "Bootstrap started"})

        assert event_dict["invocation_id"] == "req-3"


def test_timer_measures_duration() -> None:
    with Timer() as timer:
        pass

    assert timer.duration_ms >= 0


def test_truncate_for_logging() -> None:
    assert truncate_for_logging("") == ""
    assert truncate_for_logging("short") == "short"
    assert truncate_for_logging("x" * 10, visible_chars=4) == "xxxx..."
