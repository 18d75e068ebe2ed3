"""Single-fire guard for completion signals.

Prevents an invocation from being reported twice when the uncaught error
path and the process exit path both produce an outcome.
"""

import threading

import structlog

from ..domain.ports import CompletionSignal, InvocationOutcome, OutcomeStatus

logger = structlog.get_logger()


class OnceCompletion(CompletionSignal):
    """
    Forwards the first outcome to the wrapped signal and drops the rest.

    Outcomes may race from different threads (a thread excepthook versus
    the event loop), so the fired flag is taken under a lock.
    """

    def __init__(self, completion: CompletionSignal) -> None:
        """
        Initialize the guard.

        Args:
            completion: The host's completion signal
        """
        self._completion = completion
        self._lock = threading.Lock()
        self._outcome: InvocationOutcome | None = None

    @property
    def fired(self) -> bool:
        return self._outcome is not None

    @property
    def outcome(self) -> InvocationOutcome | None:
        return self._outcome

    def success(self) -> bool:
        """
        Report success unless an outcome was already reported.

        Returns:
            True if this call was forwarded to the wrapped signal
        """
        return self._fire(InvocationOutcome(status=OutcomeStatus.SUCCEEDED))

    def failure(self, error: BaseException) -> bool:
        """
        Report failure unless an outcome was already reported.

        Args:
            error: The error describing the failure

        Returns:
            True if this call was forwarded to the wrapped signal
        """
        return self._fire(InvocationOutcome(status=OutcomeStatus.FAILED, error=error))

    def _fire(self, outcome: InvocationOutcome) -> bool:
        with self._lock:
            if self._outcome is not None:
                logger.warning(
                    "Dropping duplicate completion",
                    reported=self._outcome.status.value,
                    dropped=outcome.status.value,
                )
                return False
            self._outcome = outcome

        if outcome.succeeded:
            self._completion.success()
        else:
            self._completion.failure(outcome.error)
        return True
