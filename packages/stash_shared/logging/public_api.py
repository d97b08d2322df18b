"""Logging decorator for public service methods.

``public_api_logged`` binds the component, method name and selected keyword
ids into the logging context for the whole call, emits a debug invocation
record, and an info (or warning, on failure) completion record carrying the
duration and error classification.
"""

from __future__ import annotations

from functools import wraps
from time import perf_counter
from typing import Any, Callable

from . import fields
from .context import log_context


def public_api_logged(
    *,
    logger: Any,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate one public API method with invocation and completion logs.

    ``id_fields`` names keyword arguments whose values are attached to the
    context, e.g. ``(fields.VIRTUAL_PATH,)``. Exceptions raised by the wrapped
    method are logged as a failed completion and then re-raised.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        method_name = api_name or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            invocation = {
                fields.COMPONENT_ID: component_id,
                fields.API_NAME: method_name,
                **{
                    name: str(kwargs[name])
                    for name in id_fields
                    if kwargs.get(name) not in (None, "")
                },
            }
            with log_context(invocation):
                with log_context({fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT}):
                    logger.debug("Public API invocation")

                started = perf_counter()
                try:
                    result = func(*args, **kwargs)
                except Exception as exc:
                    _log_completion(logger, started=started, exc=exc)
                    raise
                _log_completion(logger, started=started)
                return result

        return wrapper

    return decorator


def _log_completion(
    logger: Any, *, started: float, exc: Exception | None = None
) -> None:
    payload = {
        fields.EVENT: fields.PUBLIC_API_COMPLETION_EVENT,
        fields.SUCCESS: exc is None,
        fields.DURATION_MS: round((perf_counter() - started) * 1000.0, 3),
    }
    if exc is not None:
        payload[fields.ERRORS] = f"{type(exc).__name__}: {exc}"
        payload[fields.ERROR_CATEGORY] = _error_category(exc)
    with log_context(payload):
        if exc is None:
            logger.info("Public API completion")
        else:
            logger.warning("Public API completion")


def _error_category(exc: Exception) -> str:
    """Return the category of a domain error, or ``internal`` otherwise."""
    value = getattr(getattr(exc, "category", None), "value", None)
    return value if isinstance(value, str) else "internal"
