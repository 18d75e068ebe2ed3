"""Errors reported through the completion signal."""

import signal


class InvocationError(Exception):
    """Base class for invocation failures."""

    pass


class EventSerializationError(InvocationError):
    """Raised when the event cannot be encoded as JSON."""

    pass


class BootstrapSpawnError(InvocationError):
    """Raised when the bootstrap executable cannot be started."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to start {path}: {reason}")
        self.path = path


class BootstrapExitError(InvocationError):
    """Raised when the bootstrap process exits with a non-zero status."""

    def __init__(self, exit_code: int) -> None:
        message = f"Process exited with non-zero status code: {exit_code}"
        if exit_code < 0:
            # asyncio reports death by signal N as -N
            try:
                message += f" (terminated by {signal.Signals(-exit_code).name})"
            except ValueError:
                pass
        super().__init__(message)
        self.exit_code = exit_code
