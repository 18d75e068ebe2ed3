"""
Outbound port for starting child processes.

Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence


class ChildProcess(ABC):
    """Handle on a running child process."""

    @property
    @abstractmethod
    def pid(self) -> int:
        ...

    @abstractmethod
    async def wait(self) -> int:
        """
        Wait for the process to terminate.

        Returns:
            The exit status (negative when killed by a signal)
        """
        ...


class ProcessLauncher(ABC):
    """
    Outbound port for spawning the bootstrap executable.

    The child shares the parent's standard streams.
    """

    @abstractmethod
    async def spawn(
        self,
        argv: Sequence[str],
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ChildProcess:
        """
        Start a child process.

        Args:
            argv: Executable path followed by its arguments
            cwd: Working directory, or None to inherit
            env: Environment, or None to inherit

        Returns:
            Handle on the started process

        Raises:
            BootstrapSpawnError: If the process could not be started
        """
        ...
