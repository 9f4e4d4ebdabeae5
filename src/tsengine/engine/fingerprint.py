"""
Deterministic fingerprints for conditional retrieval.

The fingerprint is a SHA-256 digest over a canonical ``|``-joined rendering
of every query input, the series' last-modified time, the page window, and
each point of the full (unpaged) sequence as ``date=value``. It is returned
quoted so the boundary can use it directly as an ``ETag``.

Canonical layout:
    ::

        series_id | start | end | as_of | FREQ | TRANSFORM | FILL
          | last_modified | point_count | page | page_size
          | 2020-01-31=100.0 | 2020-02-29= | ...

    ``None`` renders as the empty string, so a missing value (``2020-02-29=``)
    and a zero (``2020-02-29=0.0``) hash differently.

Examples:
    >>> fp = build_fingerprint("US.GDP", start, end, None, Frequency.MONTHLY,
    ...                        Transform.AS_IS, FillPolicy.NONE, modified, points, 1, 500)
    >>> fp.startswith('"') and fp.endswith('"')
    True
    >>> matches_validator(fp, f'W/{fp}, "other"')
    True

Tags:
    fingerprint, etag, conditional-get, hashing, tsengine
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from datetime import date, datetime

from tsengine.core.enums import FillPolicy, Frequency, Transform
from tsengine.core.hashing import compute_hash_parts
from tsengine.core.models import Observation
from tsengine.core.timestamps import to_iso8601


def _canonical_parts(
    series_id: str,
    start: date | None,
    end: date | None,
    as_of: date | None,
    frequency: Frequency,
    transform: Transform,
    fill_policy: FillPolicy,
    last_modified: datetime | None,
    points: Sequence[Observation],
    page: int,
    page_size: int,
) -> Iterator[object]:
    yield series_id
    yield start
    yield end
    yield as_of
    yield frequency.name
    yield transform.name
    yield fill_policy.name
    yield to_iso8601(last_modified)
    yield len(points)
    yield page
    yield page_size
    for point in points:
        yield f"{point.date.isoformat()}={'' if point.value is None else repr(float(point.value))}"


def build_fingerprint(
    series_id: str,
    start: date | None,
    end: date | None,
    as_of: date | None,
    frequency: Frequency,
    transform: Transform,
    fill_policy: FillPolicy,
    last_modified: datetime | None,
    points: Sequence[Observation],
    page: int,
    page_size: int,
) -> str:
    """Quoted hex SHA-256 fingerprint of a query and its full result."""
    digest = compute_hash_parts(
        _canonical_parts(
            series_id, start, end, as_of, frequency, transform, fill_policy,
            last_modified, points, page, page_size,
        )
    )
    return f'"{digest}"'


def matches_validator(fingerprint: str, if_none_match: str | None) -> bool:
    """True when an ``If-None-Match`` header value matches ``fingerprint``.

    Accepts ``*``, comma-separated lists, and weak (``W/``) validators, which
    compare equal to their strong form.
    """
    if not if_none_match:
        return False
    for candidate in if_none_match.split(","):
        candidate = candidate.strip()
        if candidate == "*":
            return True
        if candidate.startswith("W/"):
            candidate = candidate[2:]
        if candidate == fingerprint:
            return True
    return False
