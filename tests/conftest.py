import asyncio
import stat
from pathlib import Path

import pytest

from bootstrap_invoker.domain.exceptions import BootstrapSpawnError
from bootstrap_invoker.domain.ports import ChildProcess, ProcessLauncher
from bootstrap_invoker.infrastructure.uncaught_errors import UncaughtErrorMonitor


class FakeChild(ChildProcess):
    """Child process that exits when the test says so."""

    def __init__(self, pid: int = 4242) -> None:
        self._pid = pid
        self._exit_code = 0
        self._exited = asyncio.Event()

    @property
    def pid(self) -> int:
        return self._pid

    async def wait(self) -> int:
        await self._exited.wait()
        return self._exit_code

    def exit(self, code: int) -> None:
        self._exit_code = code
        self._exited.set()


class FakeLauncher(ProcessLauncher):
    """Records spawn calls and hands back a FakeChild."""

    def __init__(self, child: FakeChild | None = None, error: Exception | None = None) -> None:
        self.child = child or FakeChild()
        self.error = error
        self.calls: list[dict] = []

    async def spawn(self, argv, cwd=None, env=None):
        self.calls.append({"argv": list(argv), "cwd": cwd, "env": env})
        if self.error is not None:
            raise self.error
        return self.child


@pytest.fixture
def monitor():
    monitor = UncaughtErrorMonitor()
    yield monitor
    assert monitor.subscriber_count == 0


@pytest.fixture
def fake_launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def failing_launcher() -> FakeLauncher:
    return FakeLauncher(error=BootstrapSpawnError("./bootstrap", "No such file or directory"))


@pytest.fixture
def make_bootstrap(tmp_path):
    """
    Factory for throwaway bootstrap executables.

    The script records its first argument in ``<name>.arg`` next to itself
    and exits with the requested status.
    """

    def _make(exit_code: int = 0, body: str = "", name: str = "bootstrap") -> Path:
        script = tmp_path / name
        arg_file = tmp_path / f"{name}.arg"
        script.write_text(
            "#!/bin/sh\n"
            f"printf '%s' \"$1\" > '{arg_file}'\n"
            f"{body}\n"
            f"exit {exit_code}\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


async def wait_until(predicate, attempts: int = 200) -> None:
    """Yield to the event loop until ``predicate`` holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")
