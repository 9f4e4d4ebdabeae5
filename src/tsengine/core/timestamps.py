"""
UTC timestamp utilities (stdlib-only).

Revision times are compared as timezone-aware UTC instants everywhere: in
the in-process revision merge, in SQLite (as fixed-width ISO strings), and
in fingerprints.

STDLIB ONLY - NO PYDANTIC.
"""

from datetime import UTC, date, datetime, time


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime. Naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def end_of_day_utc(day: date) -> datetime:
    """Last representable instant of ``day`` in UTC.

    An as-of date includes every revision recorded on that day.
    """
    return datetime.combine(day, time.max, tzinfo=UTC)


def to_iso8601(dt: datetime | None) -> str | None:
    """Convert datetime to a fixed-width UTC ISO 8601 string.

    Fixed width keeps lexicographic order equal to chronological order,
    which the SQLite store relies on.
    """
    if dt is None:
        return None
    return ensure_utc(dt).isoformat(timespec="microseconds")


def from_iso8601(s: str | None) -> datetime | None:
    """Parse ISO 8601 string to an aware UTC datetime."""
    if s is None:
        return None
    return ensure_utc(datetime.fromisoformat(s))
