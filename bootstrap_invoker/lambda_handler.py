"""AWS Lambda handler that runs the bootstrap executable for each event."""

import asyncio
from typing import Any

import structlog

from .config import settings
from .infrastructure.adapters import LambdaCompletion, SubprocessLauncher
from .infrastructure.logging import bind_invocation_context, configure_logging
from .invoker import BootstrapInvoker

configure_logging(settings.service_name, settings.log_level)

logger = structlog.get_logger()


def create_invoker() -> BootstrapInvoker:
    """Wire the invoker from settings (Composition Root)."""
    return BootstrapInvoker(
        launcher=SubprocessLauncher(),
        bootstrap_path=settings.bootstrap_path,
        cwd=settings.bootstrap_cwd,
        log_event_payload=settings.log_event_payload,
    )


def handler(event: Any, context: Any) -> None:
    """
    AWS Lambda handler.

    Returns None when the bootstrap exits with status 0. Any failure is
    raised so the Lambda service records the invocation as failed.
    """
    bind_invocation_context(context)

    completion = LambdaCompletion()
    asyncio.run(create_invoker().handle(event, completion))
    completion.raise_for_outcome()
