from .completion import CompletionSignal, InvocationOutcome, OutcomeStatus
from .process_launcher import ChildProcess, ProcessLauncher

__all__ = [
    "ChildProcess",
    "CompletionSignal",
    "InvocationOutcome",
    "OutcomeStatus",
    "ProcessLauncher",
]
