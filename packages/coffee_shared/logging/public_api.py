"""Structured invocation/completion logging for public API methods.

Every decorated call emits one invocation record before it runs and one
completion record after it returns or raises. Both plain and coroutine
methods are supported.
"""

from __future__ import annotations

import inspect
from functools import wraps
from time import perf_counter
from typing import Any, Callable, Mapping

from . import fields
from .context import log_context


def public_api_logged(
    *,
    logger: Any,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate one public API method with invocation and completion logs."""

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        method_name = api_name or func.__name__

        def _start(kwargs: Mapping[str, Any]) -> tuple[dict[str, object], float]:
            invocation: dict[str, object] = {
                fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT,
                fields.COMPONENT_ID: component_id,
                fields.API_NAME: method_name,
            }
            invocation.update(
                {
                    name: str(kwargs[name])
                    for name in id_fields
                    if kwargs.get(name) not in (None, "")
                }
            )
            with log_context(invocation):
                logger.info("Public API invocation")
            return invocation, perf_counter()

        def _finish(
            invocation: Mapping[str, object],
            started: float,
            exc: Exception | None,
        ) -> None:
            payload = dict(invocation)
            payload.update(
                {
                    fields.EVENT: fields.PUBLIC_API_COMPLETION_EVENT,
                    fields.SUCCESS: exc is None,
                    fields.DURATION_MS: round((perf_counter() - started) * 1000.0, 3),
                    fields.ERRORS: [] if exc is None else [f"{type(exc).__name__}: {exc}"],
                    fields.ERROR_CATEGORY: (
                        None if exc is None else _exception_category(exc)
                    ),
                }
            )
            with log_context(payload):
                if exc is None:
                    logger.info("Public API completion")
                else:
                    logger.warning("Public API completion")

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                invocation, started = _start(kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as exc:
                    _finish(invocation, started, exc)
                    raise
                _finish(invocation, started, None)
                return result

            return async_wrapper

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            invocation, started = _start(kwargs)
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                _finish(invocation, started, exc)
                raise
            _finish(invocation, started, None)
            return result

        return wrapper

    return decorator


def _exception_category(exc: Exception) -> str:
    """Return the shared error category for a raised exception."""
    category = getattr(exc, "category", None)
    value = getattr(category, "value", category)
    if value in (None, ""):
        return "internal"
    return str(value)
