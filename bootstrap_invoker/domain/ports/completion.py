"""
Inbound port for reporting the outcome of an invocation.

The host runtime hands one of these to the adapter with every event.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class OutcomeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class InvocationOutcome:
    """Terminal outcome of one invocation."""

    status: OutcomeStatus
    error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == OutcomeStatus.SUCCEEDED


class CompletionSignal(ABC):
    """
    Two-outcome completion contract.

    Exactly one of ``success`` or ``failure`` is expected per invocation.
    """

    @abstractmethod
    def success(self) -> None:
        """Report that the invocation succeeded."""
        ...

    @abstractmethod
    def failure(self, error: BaseException) -> None:
        """
        Report that the invocation failed.

        Args:
            error: The error describing the failure
        """
        ...
