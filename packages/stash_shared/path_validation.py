"""Shared validation helpers for virtual paths and stored filename extensions."""

from __future__ import annotations

_FORBIDDEN_SEGMENTS = frozenset({"", ".", ".."})
_SEPARATORS = ("/", "\\")


def normalize_virtual_path(*, value: str, field_name: str = "virtual_path") -> str:
    """Validate a ``/``-separated virtual path and return it unchanged.

    Virtual paths are opaque logical keys, but they double as owner-scoped
    names (``level/<id>/<suffix>``), so empty, relative or backslash segments
    are rejected. Surrounding whitespace is rejected rather than stripped so
    the stored key is always the key the caller will look up.
    """
    if value.strip() == "":
        raise ValueError(f"{field_name} is required")
    if value != value.strip():
        raise ValueError(f"{field_name} must not have surrounding whitespace")
    if "\\" in value:
        raise ValueError(f"{field_name} must use '/' separators")
    if value.startswith("/"):
        raise ValueError(f"{field_name} must be relative")
    if any(segment in _FORBIDDEN_SEGMENTS for segment in value.split("/")):
        raise ValueError(f"{field_name} must not contain empty, '.' or '..' segments")
    return value


def normalize_extension(*, value: str, field_name: str = "extension") -> str:
    """Return a filename extension with a leading dot, or ``""`` for none.

    The suffix is kept as given, spaces and case included, so stored names
    carry the source file's extension. Only path separators are refused.
    """
    if value in ("", "."):
        return ""
    token = value if value.startswith(".") else f".{value}"
    if any(separator in token for separator in _SEPARATORS):
        raise ValueError(f"{field_name} must not contain path separators")
    return token
