"""Context propagation helpers for structured logging.

A process-local logging context built on ``contextvars`` lets callers attach
fields such as the virtual path being imported to every log line emitted
underneath, without threading them through each call.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Mapping

_LOG_CONTEXT: ContextVar[dict[str, str]] = ContextVar("stash_log_context", default={})


def get_context() -> dict[str, str]:
    """Return a shallow copy of current logging context."""
    return dict(_LOG_CONTEXT.get())


def bind_context(**values: object) -> None:
    """Bind values into the current logging context.

    Values are stringified; ``None`` values are skipped.
    """
    if not values:
        return
    current = _LOG_CONTEXT.get().copy()
    current.update(
        {str(key): str(value) for key, value in values.items() if value is not None}
    )
    _LOG_CONTEXT.set(current)


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    """Temporarily bind logging context for the duration of a block."""
    token = _LOG_CONTEXT.set(_LOG_CONTEXT.get().copy())
    try:
        bind_context(**dict(values))
        yield
    finally:
        _LOG_CONTEXT.reset(token)
