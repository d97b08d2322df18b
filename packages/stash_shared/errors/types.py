"""Canonical shared error types for Stash components.

Errors cross two boundaries: raised exceptions inside the process and the
structured ``ErrorDetail`` shape rendered by actors such as the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class ErrorCategory(str, Enum):
    """High-level error categories shared across component boundaries."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    DEPENDENCY = "dependency"
    INTERNAL = "internal"


@dataclass(frozen=True)
class ErrorDetail:
    """Structured error object rendered at actor boundaries."""

    code: str
    message: str
    category: ErrorCategory
    metadata: Mapping[str, str] = field(default_factory=dict)
