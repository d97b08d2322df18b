"""Tests for virtual path and extension validation helpers."""

from __future__ import annotations

import pytest

from packages.stash_shared.path_validation import (
    normalize_extension,
    normalize_virtual_path,
)


def test_virtual_path_is_returned_unchanged() -> None:
    assert normalize_virtual_path(value="level/song/chart.aff") == "level/song/chart.aff"


@pytest.mark.parametrize(
    ("value", "message"),
    [
        ("", "is required"),
        ("   ", "is required"),
        ("a/skin.png ", "surrounding whitespace"),
        (" a/skin.png", "surrounding whitespace"),
        ("a\\b", "'/' separators"),
        ("/a/b", "must be relative"),
        ("a//b", "segments"),
        ("a/./b", "segments"),
        ("a/../b", "segments"),
        ("a/", "segments"),
    ],
)
def test_virtual_path_rejections(value: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        normalize_virtual_path(value=value)


def test_extension_normalization_keeps_case() -> None:
    """Extensions gain a leading dot and keep their case."""
    assert normalize_extension(value="PNG") == ".PNG"
    assert normalize_extension(value=".tar.gz") == ".tar.gz"
    assert normalize_extension(value="") == ""
    assert normalize_extension(value=".") == ""


def test_extension_keeps_unusual_characters() -> None:
    """Anything but a path separator is a valid stored suffix."""
    assert normalize_extension(value=".png ~") == ".png ~"
    assert normalize_extension(value=".v1 final") == ".v1 final"
    assert normalize_extension(value=".tar (1)") == ".tar (1)"


@pytest.mark.parametrize("value", [".p/g", ".p\\g"])
def test_extension_rejects_separators(value: str) -> None:
    with pytest.raises(ValueError, match="path separators"):
        normalize_extension(value=value)
