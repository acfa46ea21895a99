"""Graceful degradation for voice navigation entry points.

Voice commands must never dead-end: an unexpected exception inside the
resolver or the pipeline is logged and turned into the generic "projects"
fallback outcome instead of propagating to the page.

The decorated callable must be a method whose owner exposes
``fallback_outcome(context, reason)`` and which receives a PageContext
either positionally or as ``context=``.
"""

import functools
import inspect
import logging
from typing import Any, Callable

from .models import PageContext

logger = logging.getLogger("voicenav.graceful")

__all__ = ["graceful_navigation"]

INTERNAL_ERROR = "internal_error"


def _find_context(args: tuple, kwargs: dict) -> PageContext:
    context = kwargs.get("context")
    if isinstance(context, PageContext):
        return context
    for arg in args:
        if isinstance(arg, PageContext):
            return arg
    return PageContext()


def _log_failure(func: Callable, error: Exception) -> None:
    logger.error(
        "navigation_failed",
        extra={
            "function": func.__qualname__,
            "error": str(error),
            "error_type": type(error).__name__,
        },
        exc_info=True,
    )


def graceful_navigation(func: Callable) -> Callable:
    """Decorator turning unexpected exceptions into the fallback outcome.

    Works for plain and ``async`` methods.

    Example:
        class Resolver:
            @graceful_navigation
            def resolve(self, intent, context): ...

            def fallback_outcome(self, context, reason): ...
    """
    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(self, *args: Any, **kwargs: Any) -> Any:
            try:
                return await func(self, *args, **kwargs)
            except Exception as e:
                _log_failure(func, e)
                return self.fallback_outcome(_find_context(args, kwargs), INTERNAL_ERROR)

        return async_wrapper

    @functools.wraps(func)
    def wrapper(self, *args: Any, **kwargs: Any) -> Any:
        try:
            return func(self, *args, **kwargs)
        except Exception as e:
            _log_failure(func, e)
            return self.fallback_outcome(_find_context(args, kwargs), INTERNAL_ERROR)

    return wrapper
