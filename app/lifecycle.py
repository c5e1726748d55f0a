"""
Process Lifecycle Hooks

Fatal-error handling for the server process:
- Uncaught exceptions on the main thread (sys.excepthook)
- Exceptions nobody retrieved inside the event loop (loop exception handler)

Both are logged, the cache is flushed, and the process exits with status 1.
Event-loop reports that carry no exception are passed on to the previous
(or default) handler and do not stop the process.

Graceful shutdown (SIGINT / SIGTERM) is not handled here: uvicorn traps the
signals and runs the FastAPI lifespan shutdown, which clears the cache and
lets the process exit with status 0.
"""

import asyncio
import logging
import os
import sys
from typing import Callable, Optional

from core.logging import get_logger
from storage.cache import TTLCache

logger = get_logger(__name__)


def flush_cache(cache: TTLCache) -> None:
    """Best-effort cache clear before the process goes away."""
    logger.info("Flushing cache before exiting...")
    try:
        cache.clear()
    except Exception as e:
        logger.error(f"Failed to flush cache: {e}")
        return
    logger.info("Cache successfully flushed.")


def _hard_exit(code: int) -> None:
    logging.shutdown()
    os._exit(code)


def install_fatal_handlers(
    cache: TTLCache,
    loop: Optional[asyncio.AbstractEventLoop] = None,
    exit_func: Callable[[int], None] = _hard_exit
) -> Callable[[], None]:
    """
    Install fatal-error hooks that flush `cache` before the process dies.

    Args:
        cache: Cache to clear on fatal errors
        loop: Event loop to guard (the running loop if None)
        exit_func: Called with the exit status after an event-loop failure

    Returns:
        Callable that restores the previous hooks
    """
    loop = loop or asyncio.get_running_loop()
    previous_excepthook = sys.excepthook
    previous_loop_handler = loop.get_exception_handler()

    def excepthook(exc_type, exc, tb):
        if issubclass(exc_type, KeyboardInterrupt):
            previous_excepthook(exc_type, exc, tb)
            return
        logger.critical(f"Uncaught Exception: {exc}", exc_info=(exc_type, exc, tb))
        flush_cache(cache)
        # interpreter exits with status 1 once the hook returns

    def loop_exception_handler(_loop, context):
        exc = context.get("exception")
        message = context.get("message", "Unhandled error in event loop")
        if exc is None:
            # Message-only contexts ("Unclosed client session", ...) are diagnostics
            if previous_loop_handler is not None:
                previous_loop_handler(_loop, context)
            else:
                _loop.default_exception_handler(context)
            return

        logger.critical(
            f"Unhandled Rejection: {message}",
            exc_info=(type(exc), exc, exc.__traceback__)
        )
        flush_cache(cache)
        exit_func(1)

    sys.excepthook = excepthook
    loop.set_exception_handler(loop_exception_handler)

    def restore() -> None:
        sys.excepthook = previous_excepthook
        loop.set_exception_handler(previous_loop_handler)

    return restore
