"""Two-level directory sharding for stored blob filenames."""

from __future__ import annotations

from pathlib import PurePosixPath

SHARD_DEPTH = 2


def shard(filename: str) -> PurePosixPath:
    """Return the sharded relative path for one stored filename.

    The first and second characters become the two directory levels:
    ``"abXYZ.png"`` -> ``a/b/abXYZ.png``.
    """
    if len(filename) < SHARD_DEPTH:
        raise ValueError(f"filename too short to shard: {filename!r}")
    if "/" in filename or "\\" in filename:
        raise ValueError(f"filename must not contain path separators: {filename!r}")
    return PurePosixPath(*filename[:SHARD_DEPTH], filename)


def unshard(path: PurePosixPath | str) -> str:
    """Return the stored filename for one sharded relative path."""
    return PurePosixPath(path).name


def is_shardable(filename: str) -> bool:
    """Return whether ``shard`` accepts one filename."""
    return (
        len(filename) >= SHARD_DEPTH
        and "/" not in filename
        and "\\" not in filename
    )
