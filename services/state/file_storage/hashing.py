"""Content digests and their filesystem-safe base-62 names.

Stored filenames are ``encode_digest(sha256(content)) + extension``. The
encoding is left-padded to a fixed width so that ordinal string order of two
names with the same extension matches the numeric order of their digests;
compaction relies on that when it picks the topmost slot of a collision group.
"""

from __future__ import annotations

import hashlib
from functools import lru_cache
from pathlib import Path
from typing import BinaryIO

BASE62_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
DIGEST_SIZE = hashlib.sha256().digest_size
DEFAULT_CHUNK_SIZE = 64 * 1024


def digest_stream(stream: BinaryIO, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """Return the SHA-256 digest of a binary stream read in chunks."""
    hasher = hashlib.sha256()
    for chunk in iter(lambda: stream.read(chunk_size), b""):
        hasher.update(chunk)
    return hasher.digest()


def digest_file(path: Path, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """Return the SHA-256 digest of one file's bytes."""
    with path.open("rb") as handle:
        return digest_stream(handle, chunk_size=chunk_size)


def encode_digest(digest: bytes) -> str:
    """Encode a big-endian digest as fixed-width base-62 text."""
    number = int.from_bytes(digest, byteorder="big", signed=False)
    chars: list[str] = []
    while number:
        number, remainder = divmod(number, 62)
        chars.append(BASE62_ALPHABET[remainder])
    return "".join(reversed(chars)).rjust(encoded_width(len(digest)), "0")


def increment_digest(digest: bytes) -> bytes:
    """Add one to a digest as a big-endian unsigned integer, wrapping at overflow."""
    width = len(digest)
    number = int.from_bytes(digest, byteorder="big", signed=False) + 1
    return (number % (1 << (8 * width))).to_bytes(width, byteorder="big", signed=False)


def stored_filename(digest: bytes, extension: str) -> str:
    """Return the stored filename for one digest and extension."""
    return f"{encode_digest(digest)}{extension}"


@lru_cache(maxsize=8)
def encoded_width(size: int) -> int:
    """Return the base-62 digit count needed for any ``size``-byte value."""
    width = 1
    while 62**width < 256**size:
        width += 1
    return width
