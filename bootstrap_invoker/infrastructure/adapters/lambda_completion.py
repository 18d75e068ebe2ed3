"""Completion signal that maps onto the Python Lambda handler contract.

A Python Lambda handler reports success by returning and failure by
raising, so the outcome is held until the invocation finishes and then
replayed by ``raise_for_outcome``.
"""

from ...domain.ports import CompletionSignal, InvocationOutcome, OutcomeStatus


class LambdaCompletion(CompletionSignal):
    """Records the outcome of one Lambda invocation."""

    def __init__(self) -> None:
        self._outcome: InvocationOutcome | None = None

    @property
    def outcome(self) -> InvocationOutcome | None:
        return self._outcome

    def success(self) -> None:
        self._outcome = InvocationOutcome(status=OutcomeStatus.SUCCEEDED)

    def failure(self, error: BaseException) -> None:
        self._outcome = InvocationOutcome(status=OutcomeStatus.FAILED, error=error)

    def raise_for_outcome(self) -> None:
        """
        Return normally on success, raise the reported error on failure.

        Raises:
            RuntimeError: If no outcome was ever reported
        """
        if self._outcome is None:
            raise RuntimeError("Invocation finished without reporting an outcome")
        if not self._outcome.succeeded:
            raise self._outcome.error
