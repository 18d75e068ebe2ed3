"""
Subprocess-backed implementation of ProcessLauncher.

The child is started with stdin, stdout and stderr left as None so it
shares the parent's file descriptors. Nothing is piped or buffered here.
"""

import asyncio
from collections.abc import Mapping, Sequence

import structlog

from ...domain.exceptions import BootstrapSpawnError
from ...domain.ports import ChildProcess, ProcessLauncher

logger = structlog.get_logger()


class SubprocessChild(ChildProcess):
    """ChildProcess wrapping an ``asyncio.subprocess.Process``."""

    def __init__(self, process: asyncio.subprocess.Process) -> None:
        self._process = process

    @property
    def pid(self) -> int:
        return self._process.pid

    async def wait(self) -> int:
        return await self._process.wait()


class SubprocessLauncher(ProcessLauncher):
    """Spawns children on the running event loop with inherited stdio."""

    async def spawn(
        self,
        argv: Sequence[str],
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ChildProcess:
        if not argv:
            raise BootstrapSpawnError("", "empty argument vector")

        executable = str(argv[0])
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=None,
                stdout=None,
                stderr=None,
                cwd=cwd,
                env=dict(env) if env is not None else None,
            )
        except (OSError, ValueError) as e:
            # ValueError covers arguments the OS cannot encode (e.g. NUL bytes)
            logger.error(
                "Failed to spawn bootstrap",
                path=executable,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise BootstrapSpawnError(executable, str(e)) from e

        logger.debug("Spawned child process", path=executable, pid=process.pid)
        return SubprocessChild(process)
