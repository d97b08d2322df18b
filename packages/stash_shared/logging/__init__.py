"""Public logging API for Stash components.

This package wraps Python's ``logging`` module with stream defaults and
structured context propagation.
"""

from .config import configure_logging, get_logger
from .context import bind_context, get_context, log_context
from .public_api import public_api_logged

__all__ = [
    "bind_context",
    "configure_logging",
    "get_context",
    "get_logger",
    "log_context",
    "public_api_logged",
]
