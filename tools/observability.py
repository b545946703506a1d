"""Structured start/finish logging around service operations."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, ParamSpec, TypeVar

from fitfx_app.logging_config import ensure_correlation_id, get_logger, log_event

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")

_MAX_LOGGED_ARGUMENTS = 6


def _argument_names(kwargs: Dict[str, Any]) -> list:
    names = sorted(kwargs)
    if len(names) > _MAX_LOGGED_ARGUMENTS:
        return [*names[:_MAX_LOGGED_ARGUMENTS], "..."]
    return names


def instrument_operation(
    operation: str,
    expected: tuple[type[Exception], ...] = (),
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log ``operation_started`` and ``operation_completed`` around a call.

    Exceptions in ``expected`` are normal outcomes the caller handles and are
    logged as ``operation_rejected`` without a traceback. Anything else is
    logged as ``operation_failed`` with one. Both are re-raised.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            started = time.perf_counter()

            def emit(level: int, event: str, **fields: Any) -> None:
                log_event(
                    LOGGER,
                    level,
                    event,
                    operation=operation,
                    correlation_id=correlation_id,
                    **fields,
                )

            def elapsed_ms() -> float:
                return round((time.perf_counter() - started) * 1000, 2)

            emit(logging.INFO, "operation_started", arguments=_argument_names(kwargs))
            try:
                result = func(*args, **kwargs)
            except expected as exc:
                emit(logging.WARNING, "operation_rejected", reason=type(exc).__name__, duration_ms=elapsed_ms())
                raise
            except Exception:
                emit(logging.ERROR, "operation_failed", duration_ms=elapsed_ms(), exc_info=True)
                raise
            emit(logging.INFO, "operation_completed", duration_ms=elapsed_ms())
            return result

        return wrapper

    return decorator


__all__ = ["instrument_operation"]
