"""
Invocation adapter for the bootstrap executable.

One call to ``handle`` spawns one child process with the event as its only
argument and reports the first terminal outcome to the completion signal:
either an uncaught error raised while the child runs, or the child's exit.

Following hexagonal architecture, the process launcher and the uncaught
error monitor are injected.
"""

import asyncio
import json
from typing import Any

import structlog

from .domain.exceptions import (
    BootstrapExitError,
    BootstrapSpawnError,
    EventSerializationError,
)
from .domain.ports import CompletionSignal, InvocationOutcome, ProcessLauncher
from .infrastructure.completion_guard import OnceCompletion
from .infrastructure.logging import Timer, truncate_for_logging
from .infrastructure.uncaught_errors import (
    UncaughtErrorMonitor,
    get_uncaught_error_monitor,
)

logger = structlog.get_logger()


def serialize_event(event: Any) -> str:
    """
    Encode an event as compact JSON text.

    Args:
        event: Any JSON-serializable value

    Returns:
        JSON text without insignificant whitespace

    Raises:
        EventSerializationError: If the event cannot be encoded
    """
    try:
        return json.dumps(event, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise EventSerializationError(f"Event is not JSON serializable: {e}") from e


class BootstrapInvoker:
    """
    Runs the bootstrap executable once per invocation.

    Invocations share no state apart from the process-wide error monitor,
    so the same instance can serve concurrent calls.
    """

    def __init__(
        self,
        launcher: ProcessLauncher,
        bootstrap_path: str = "./bootstrap",
        cwd: str | None = None,
        monitor: UncaughtErrorMonitor | None = None,
        log_event_payload: bool = False,
    ) -> None:
        """
        Initialize with injected dependencies.

        Args:
            launcher: ProcessLauncher implementation
            bootstrap_path: Executable to run for each event
            cwd: Working directory for the child, None to inherit
            monitor: Uncaught error monitor (process-wide one by default)
            log_event_payload: Include a truncated payload in logs
        """
        self._launcher = launcher
        self._bootstrap_path = bootstrap_path
        self._cwd = cwd
        self._monitor = monitor or get_uncaught_error_monitor()
        self._log_event_payload = log_event_payload

    async def handle(self, event: Any, completion: CompletionSignal) -> InvocationOutcome:
        """
        Run one invocation and report its outcome exactly once.

        Args:
            event: JSON-serializable event, passed through unmodified
            completion: Host completion signal

        Returns:
            The outcome that was reported
        """
        guard = OnceCompletion(completion)

        with Timer() as timer:
            await self._run(event, guard)

        outcome = guard.outcome
        logger.info(
            "Invocation completed",
            status=outcome.status.value,
            duration_ms=timer.duration_ms,
        )
        return outcome

    async def _run(self, event: Any, guard: OnceCompletion) -> None:
        try:
            payload = serialize_event(event)
        except EventSerializationError as e:
            self._fail(guard, e, "Invalid event")
            return

        if self._log_event_payload:
            logger.info("Received event", event=truncate_for_logging(payload))
        else:
            logger.info("Received event", event_bytes=len(payload.encode("utf-8")))

        loop = asyncio.get_running_loop()
        uncaught: asyncio.Future = loop.create_future()

        def deliver(error: BaseException) -> None:
            if not uncaught.done():
                uncaught.set_result(error)

        def on_uncaught(error: BaseException) -> None:
            # May be called from a foreign thread via threading.excepthook
            loop.call_soon_threadsafe(deliver, error)

        token = self._monitor.subscribe(on_uncaught, loop=loop)
        try:
            try:
                child = await self._launcher.spawn(
                    [self._bootstrap_path, payload],
                    cwd=self._cwd,
                )
            except BootstrapSpawnError as e:
                self._fail(guard, e, "Bootstrap spawn failed")
                return
            except Exception as e:
                self._fail(guard, e, "Bootstrap spawn failed")
                return

            logger.info("Bootstrap started", path=self._bootstrap_path, pid=child.pid)

            exit_task = asyncio.ensure_future(child.wait())
            try:
                done, _ = await asyncio.wait(
                    {exit_task, uncaught},
                    return_when=asyncio.FIRST_COMPLETED,
                )
                if uncaught in done:
                    self._fail(guard, uncaught.result(), "Invocation aborted by uncaught error")
                if exit_task in done and not guard.fired:
                    self._complete_from_exit(guard, exit_task.result(), child.pid)
            except Exception as e:
                self._fail(guard, e, "Error waiting for bootstrap")
            finally:
                if not exit_task.done():
                    # Stops waiting only; the child itself is left running
                    exit_task.cancel()
        finally:
            self._monitor.unsubscribe(token)
            if not uncaught.done():
                uncaught.cancel()

    def _complete_from_exit(self, guard: OnceCompletion, exit_code: int, pid: int) -> None:
        if exit_code == 0:
            logger.info("Bootstrap exited", pid=pid, exit_code=exit_code)
            guard.success()
            return
        self._fail(guard, BootstrapExitError(exit_code), "Bootstrap exited with error", pid=pid)

    def _fail(self, guard: OnceCompletion, error: BaseException, message: str, **fields) -> None:
        logger.error(
            message,
            error=str(error),
            error_type=type(error).__name__,
            **fields,
        )
        guard.failure(error)
