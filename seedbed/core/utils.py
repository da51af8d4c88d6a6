"""Utility functions and decorators for Seedbed core."""

import functools
import logging
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def safe_slot(func: F) -> F:
    """Decorator to safely handle exceptions in Qt signal slots.

    Timer callbacks and worker completions are delivered by the Qt event
    loop. An exception escaping from one of them cannot be handled by the
    code that scheduled it, so the exception is logged and the slot
    returns ``None`` instead.

    Usage:
        @safe_slot
        def _on_worker_done(self, job_id: int, success: bool, payload: object) -> None:
            ...

    Args:
        func: The slot function to wrap.

    Returns:
        The wrapped function that catches exceptions.
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception:
            logger.exception(f"Exception in slot {func.__qualname__}")
            return None
    return wrapper  # type: ignore[return-value]


def is_blank(value: str | None) -> bool:
    """Return True if a text input is empty after trimming whitespace."""
    return not value or not value.strip()
