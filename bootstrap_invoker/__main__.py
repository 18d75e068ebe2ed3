"""Run the bootstrap executable once, outside of Lambda.

    python -m bootstrap_invoker '{"a":1}'
    echo '{"a":1}' | python -m bootstrap_invoker --bootstrap ./bin/bootstrap
"""

import argparse
import asyncio
import json
import sys

import structlog

from .config import settings
from .domain.exceptions import BootstrapExitError
from .domain.ports import InvocationOutcome
from .infrastructure.adapters import LambdaCompletion, SubprocessLauncher
from .infrastructure.logging import configure_logging
from .invoker import BootstrapInvoker

logger = structlog.get_logger()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="bootstrap_invoker",
        description="Invoke the bootstrap executable with a JSON event.",
    )
    parser.add_argument(
        "event",
        nargs="?",
        default="-",
        help="event as JSON text, or '-' to read it from stdin (default)",
    )
    parser.add_argument(
        "--bootstrap",
        default=settings.bootstrap_path,
        help=f"path to the executable (default: {settings.bootstrap_path})",
    )
    return parser.parse_args(argv)


def exit_status(outcome: InvocationOutcome) -> int:
    """Map an outcome to a shell exit status."""
    if outcome.succeeded:
        return 0
    if isinstance(outcome.error, BootstrapExitError):
        code = outcome.error.exit_code
        # Mirror the shell convention for children killed by a signal
        return code if code > 0 else 128 - code
    return 1


def read_event(args: argparse.Namespace) -> str:
    """Return the raw event text from the command line or stdin."""
    return sys.stdin.read() if args.event == "-" else args.event


async def main(raw_event: str, bootstrap_path: str) -> int:
    """
    Main entry point for local invocation.

    Args:
        raw_event: Event as JSON text
        bootstrap_path: Executable to run

    Returns:
        Shell exit status
    """
    try:
        event = json.loads(raw_event)
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON event", error=str(e))
        return 2

    invoker = BootstrapInvoker(
        launcher=SubprocessLauncher(),
        bootstrap_path=bootstrap_path,
        cwd=settings.bootstrap_cwd,
        log_event_payload=settings.log_event_payload,
    )
    outcome = await invoker.handle(event, LambdaCompletion())
    return exit_status(outcome)


def run(argv: list[str] | None = None) -> None:
    configure_logging(settings.service_name, settings.log_level)
    args = parse_args(argv)
    # stdin is drained before the event loop starts
    raw_event = read_event(args)
    sys.exit(asyncio.run(main(raw_event, args.bootstrap)))


if __name__ == "__main__":
    run()
