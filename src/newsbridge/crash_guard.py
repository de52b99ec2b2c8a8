"""Process-level hooks for errors that escape transport threads and tasks."""

import asyncio
import threading
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


class CrashGuard:
    """Logs uncaught errors and swallows the ones matching known-benign patterns.

    Anything not matching a pattern is logged and handed on to the hook that
    was installed before, so real failures still surface.
    """

    def __init__(self, suppressed_patterns: list[str]):
        self._patterns = [p for p in suppressed_patterns if p]
        self._previous_thread_hook = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def is_suppressed(self, error: Optional[BaseException], message: str = "") -> bool:
        text = f"{message} {error!s}" if error is not None else message
        return any(pattern in text for pattern in self._patterns)

    def install(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._previous_thread_hook = threading.excepthook
        threading.excepthook = self._thread_hook
        if loop is not None:
            self._loop = loop
            loop.set_exception_handler(self._loop_handler)
        logger.debug("crash_guard.installed", patterns=self._patterns)

    def uninstall(self) -> None:
        if self._previous_thread_hook is not None:
            threading.excepthook = self._previous_thread_hook
            self._previous_thread_hook = None
        if self._loop is not None:
            self._loop.set_exception_handler(None)
            self._loop = None

    def _thread_hook(self, args: threading.ExceptHookArgs) -> None:
        thread_name = args.thread.name if args.thread is not None else None
        if self.is_suppressed(args.exc_value):
            logger.warning(
                "crash_guard.suppressed",
                source="thread",
                thread=thread_name,
                error=str(args.exc_value),
            )
            return

        logger.error(
            "crash_guard.uncaught",
            source="thread",
            thread=thread_name,
            error=str(args.exc_value),
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
        )
        if self._previous_thread_hook is not None:
            self._previous_thread_hook(args)

    def _loop_handler(self, loop: asyncio.AbstractEventLoop, context: dict) -> None:
        error = context.get("exception")
        message = context.get("message", "")
        if self.is_suppressed(error, message):
            logger.warning("crash_guard.suppressed", source="event_loop", error=str(error or message))
            return

        logger.error("crash_guard.uncaught", source="event_loop", error=str(error or message))
        loop.default_exception_handler(context)
