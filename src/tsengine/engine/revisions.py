"""
In-process point-in-time merge of current values and revision history.

Stores without a SQL window function (the in-memory store, key-value
backends) use :func:`merge_as_of` to produce the same result the SQLite
store gets from ``ROW_NUMBER() OVER (PARTITION BY date ORDER BY
revision_time DESC NULLS LAST)``.

Rule, per date:
    1. revisions with ``revision_time <= as_of`` → the latest one wins
    2. otherwise → the current value, if the date has one
    3. otherwise → the date is absent from the result

Tags:
    as-of, point-in-time, revisions, bitemporal, tsengine
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from tsengine.core.models import Observation, Revision
from tsengine.core.timestamps import ensure_utc


def merge_as_of(
    current: Iterable[Observation],
    revisions: Iterable[Revision],
    as_of: datetime,
) -> list[Observation]:
    """Observations as known at ``as_of``, ascending by date."""
    cutoff = ensure_utc(as_of)
    merged: dict[date, float | None] = {p.date: p.value for p in current}

    best: dict[date, Revision] = {}
    for revision in revisions:
        revised_at = ensure_utc(revision.revision_time)
        if revised_at > cutoff:
            continue
        held = best.get(revision.date)
        if held is None or revised_at > ensure_utc(held.revision_time):
            best[revision.date] = revision

    for day, revision in best.items():
        merged[day] = revision.value

    return [Observation(day, merged[day]) for day in sorted(merged)]
