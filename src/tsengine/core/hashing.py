"""
Deterministic hashing utilities for content validators.

Provides the stable, reproducible hash the fingerprint builder is built on:
values are rendered to strings, joined with ``|`` and digested with SHA-256.

Manifesto:
    A validator is only useful if it is:
    - **Deterministic:** Same inputs always produce the same hash
    - **Order-dependent:** (a, b) ≠ (b, a)
    - **Content-based:** Equal contents hash equal, regardless of identity
    - **Collision-resistant:** SHA-256, not a checksum

Examples:
    >>> compute_hash("US.GDP", "2020-01-01", 100.0) == compute_hash("US.GDP", "2020-01-01", 100.0)
    True
    >>> compute_hash("a", "b") != compute_hash("b", "a")
    True
    >>> len(compute_hash("test", length=16))
    16

Tags:
    hashing, fingerprint, etag, tsengine
"""

import hashlib
from collections.abc import Iterable
from typing import Any


def canonical(value: Any) -> str:
    """Render one value for hashing. ``None`` becomes the empty string."""
    if value is None:
        return ""
    if isinstance(value, float):
        return repr(value)
    return str(value)


def compute_hash(*values: Any, length: int | None = None) -> str:
    """
    Compute a deterministic SHA-256 hex digest from values.

    Args:
        *values: Values to hash (rendered with :func:`canonical`)
        length: Truncate the hex digest to this many characters
            (default: full 64-character digest)

    Returns:
        Hex string
    """
    return compute_hash_parts(values, length=length)


def compute_hash_parts(parts: Iterable[Any], *, length: int | None = None) -> str:
    """Like :func:`compute_hash` but streams an iterable of parts.

    Long point sequences are fed to the digest incrementally instead of being
    joined into one string first.
    """
    digest = hashlib.sha256()
    first = True
    for part in parts:
        if not first:
            digest.update(b"|")
        digest.update(canonical(part).encode("utf-8"))
        first = False
    hexdigest = digest.hexdigest()
    return hexdigest if length is None else hexdigest[:length]
