"""Process-level error handling for the skill runtime."""

import asyncio
import functools
import logging
from typing import Callable, ParamSpec, TypeVar

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def setup_global_exception_handler() -> None:
    """Log exceptions from tasks nobody awaited (e.g. abandoned refreshes)."""

    def handle_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
        exception = context.get("exception")
        message = context.get("message", "Unhandled exception in async task")

        if exception:
            logger.error(
                "Asyncio exception handler caught: %s",
                message,
                exc_info=exception,
            )
        else:
            logger.error(
                "Asyncio exception handler caught: %s (context: %s)",
                message,
                context,
            )

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.debug("No running loop to install exception handler yet")
        return
    loop.set_exception_handler(handle_exception)


def log_unhandled_exceptions(func: Callable[P, T]) -> Callable[P, T]:
    """Decorator to log unhandled exceptions in sync entrypoints."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return func(*args, **kwargs)
        except Exception:
            logger.exception("Unhandled exception in %s", func.__name__)
            raise

    return wrapper


__all__ = ["log_unhandled_exceptions", "setup_global_exception_handler"]
