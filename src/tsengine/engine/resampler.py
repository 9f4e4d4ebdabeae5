"""
Frequency conversion by bucket-end mapping.

Every input date is mapped to the last calendar day of the target-frequency
period containing it; the last observation seen for a bucket wins.

Architecture:
    ::

        to=QUARTERLY
        2020-01-31 ─┐
        2020-02-29 ─┼─▶ 2020-03-31  (value of 2020-03-31)
        2020-03-31 ─┘
        2020-04-30 ─┐
        2020-05-31 ─┼─▶ 2020-06-30  (value of 2020-06-30)
        2020-06-30 ─┘

    Bucket ends:
        DAILY      → the date itself
        WEEKLY     → next-or-same Sunday
        MONTHLY    → last day of the month
        QUARTERLY  → last day of the quarter
        ANNUAL     → December 31

Guardrails:
    - Input must ascend by date; output order is bucket insertion order.
    - Converting to a finer frequency only relabels dates; nothing is
      interpolated.

Tags:
    resampling, frequency, calendar, tsengine
"""

from __future__ import annotations

import calendar
from collections.abc import Callable, Sequence
from datetime import date, timedelta

from tsengine.core.enums import Frequency
from tsengine.core.models import Observation

_SUNDAY = 6


def _month_end(d: date) -> date:
    return date(d.year, d.month, calendar.monthrange(d.year, d.month)[1])


def _week_end(d: date) -> date:
    return d + timedelta(days=(_SUNDAY - d.weekday()) % 7)


def _quarter_end(d: date) -> date:
    quarter_end_month = ((d.month - 1) // 3 + 1) * 3
    return _month_end(date(d.year, quarter_end_month, 1))


def _year_end(d: date) -> date:
    return date(d.year, 12, 31)


_BUCKET_END: dict[Frequency, Callable[[date], date]] = {
    Frequency.NATIVE: lambda d: d,
    Frequency.DAILY: lambda d: d,
    Frequency.WEEKLY: _week_end,
    Frequency.MONTHLY: _month_end,
    Frequency.QUARTERLY: _quarter_end,
    Frequency.ANNUAL: _year_end,
}


def bucket_end(d: date, frequency: Frequency) -> date:
    """Last day of the ``frequency`` period containing ``d``."""
    return _BUCKET_END[frequency](d)


def resample(
    points: Sequence[Observation],
    from_freq: Frequency,
    to_freq: Frequency,
) -> Sequence[Observation]:
    """Convert ``points`` to ``to_freq``, keeping the last value per bucket.

    Returns ``points`` itself (not a copy) when ``to_freq`` is NATIVE or
    equal to ``from_freq``.
    """
    if to_freq is Frequency.NATIVE or to_freq == from_freq:
        return points

    to_bucket = _BUCKET_END[to_freq]
    buckets: dict[date, float | None] = {}
    for point in points:
        buckets[to_bucket(point.date)] = point.value
    return [Observation(bucket, value) for bucket, value in buckets.items()]
