"""Process-wide dispatch of otherwise unhandled errors.

Invocations subscribe for their lifetime and unsubscribe when they complete.
The monitor owns a single ``threading.excepthook`` and one exception handler
per event loop, so repeated invocations in a warm process never stack up
hooks.
"""

import asyncio
import itertools
import threading
from collections.abc import Callable
from dataclasses import dataclass

import structlog

logger = structlog.get_logger()

ErrorCallback = Callable[[BaseException], None]


@dataclass
class _Subscription:
    callback: ErrorCallback
    loop: asyncio.AbstractEventLoop | None


class UncaughtErrorMonitor:
    """
    Fans unhandled errors out to the invocations currently in flight.

    Thread errors go to every subscriber. Event loop errors go to the
    subscribers registered for that loop. Both are chained to whatever
    hook or handler was installed before the monitor took over.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._subscriptions: dict[int, _Subscription] = {}
        self._previous_thread_hook = None
        self._previous_loop_handlers: dict[asyncio.AbstractEventLoop, object] = {}

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(
        self,
        callback: ErrorCallback,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> int:
        """
        Register a callback for unhandled errors.

        Args:
            callback: Called with the error; may run on any thread
            loop: Event loop whose unhandled errors should also be delivered

        Returns:
            Token to pass to ``unsubscribe``
        """
        with self._lock:
            if not self._subscriptions:
                self._previous_thread_hook = threading.excepthook
                threading.excepthook = self._thread_hook

            if loop is not None and loop not in self._previous_loop_handlers:
                self._previous_loop_handlers[loop] = loop.get_exception_handler()
                loop.set_exception_handler(self._loop_handler)

            token = next(self._ids)
            self._subscriptions[token] = _Subscription(callback=callback, loop=loop)

        logger.debug("Subscribed to uncaught errors", token=token)
        return token

    def unsubscribe(self, token: int) -> None:
        """
        Remove a subscription and release hooks nobody needs any more.

        Args:
            token: Value returned by ``subscribe``
        """
        with self._lock:
            subscription = self._subscriptions.pop(token, None)
            if subscription is None:
                return

            loop = subscription.loop
            if loop is not None and not any(
                s.loop is loop for s in self._subscriptions.values()
            ):
                previous = self._previous_loop_handlers.pop(loop, None)
                if not loop.is_closed() and loop.get_exception_handler() == self._loop_handler:
                    loop.set_exception_handler(previous)

            if not self._subscriptions:
                if threading.excepthook == self._thread_hook:
                    threading.excepthook = self._previous_thread_hook
                self._previous_thread_hook = None

        logger.debug("Unsubscribed from uncaught errors", token=token)

    def report(
        self,
        error: BaseException,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> int:
        """
        Deliver an error to subscribers.

        Args:
            error: The unhandled error
            loop: Restrict delivery to subscribers of this loop

        Returns:
            Number of subscribers notified
        """
        with self._lock:
            callbacks = [
                s.callback
                for s in self._subscriptions.values()
                if loop is None or s.loop is loop
            ]

        logger.error(
            "Uncaught error during invocation",
            error=str(error),
            error_type=type(error).__name__,
            subscribers=len(callbacks),
        )
        for callback in callbacks:
            callback(error)
        return len(callbacks)

    def _thread_hook(self, args: threading.ExceptHookArgs) -> None:
        previous = self._previous_thread_hook
        if args.exc_value is not None and not issubclass(args.exc_type, SystemExit):
            self.report(args.exc_value)
        if previous is not None:
            previous(args)

    def _loop_handler(self, loop: asyncio.AbstractEventLoop, context: dict) -> None:
        error = context.get("exception")
        if error is None:
            error = RuntimeError(context.get("message", "Unhandled error in event loop"))
        self.report(error, loop=loop)

        previous = self._previous_loop_handlers.get(loop)
        if previous is not None:
            previous(loop, context)
        else:
            loop.default_exception_handler(context)


# Global instance
_monitor: UncaughtErrorMonitor | None = None


def get_uncaught_error_monitor() -> UncaughtErrorMonitor:
    """Get or create the process-wide monitor."""
    global _monitor
    if _monitor is None:
        _monitor = UncaughtErrorMonitor()
    return _monitor
