"""
Statistical transforms over an ordered observation sequence.

Every transform preserves length and date alignment; only values change.
Percentage results are ``ratio * 100`` and every computed value is rounded
to six decimals so that equal inputs never differ by floating noise.

Transforms:
    ::

        AS_IS       input returned unchanged
        DIFF        v[i] - v[i-1]
        PCT_CHANGE  (v[i] / v[i-1] - 1) * 100
        MOM         same as PCT_CHANGE
        YOY         (v[i] / v[i-lag] - 1) * 100, lag = periods per year
        YTD         (v[i] / base - 1) * 100, base = first value of the year

    Missing operands, a zero denominator, or an out-of-range lag yield None.

Examples:
    >>> pts = [Observation(date(2020, m, 1), v) for m, v in [(1, 10.0), (2, 15.0)]]
    >>> [p.value for p in apply_transform(pts, Transform.DIFF, Frequency.MONTHLY)]
    [None, 5.0]

Tags:
    transform, yoy, ytd, pct-change, tsengine
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence

from tsengine.core.enums import Frequency, Transform
from tsengine.core.models import Observation

_SCALE = 1e6


def _normalize(value: float | None) -> float | None:
    if value is None:
        return None
    # six decimals, ties rounded up
    return math.floor(value * _SCALE + 0.5) / _SCALE


def _pct(current: float, base: float) -> float:
    return (current / base - 1.0) * 100.0


def yoy_lag(frequency: Frequency) -> int:
    """Number of periods separating an observation from the same period a year earlier."""
    return frequency.periods_per_year


def _diff(points: Sequence[Observation], frequency: Frequency) -> list[Observation]:
    out = []
    prev: float | None = None
    for point in points:
        value = point.value
        v = None if prev is None or value is None else value - prev
        out.append(point.with_value(_normalize(v)))
        prev = value
    return out


def _pct_change(points: Sequence[Observation], frequency: Frequency) -> list[Observation]:
    out = []
    prev: float | None = None
    for point in points:
        value = point.value
        v = None if prev is None or value is None or prev == 0 else _pct(value, prev)
        out.append(point.with_value(_normalize(v)))
        prev = value
    return out


def _yoy(points: Sequence[Observation], frequency: Frequency) -> list[Observation]:
    lag = yoy_lag(frequency)
    out = []
    for i, point in enumerate(points):
        v = None
        if point.value is not None and i >= lag:
            base = points[i - lag].value
            if base is not None and base != 0:
                v = _pct(point.value, base)
        out.append(point.with_value(_normalize(v)))
    return out


def _ytd(points: Sequence[Observation], frequency: Frequency) -> list[Observation]:
    out = []
    current_year: int | None = None
    base: float | None = None
    for point in points:
        if point.date.year != current_year:
            current_year = point.date.year
            base = None

        value = point.value
        v = None
        if value is not None:
            if base is None:
                base = value
                v = 0.0
            elif base == 0:
                v = 0.0 if value == 0 else None
            else:
                v = _pct(value, base)
        out.append(point.with_value(_normalize(v)))
    return out


_TRANSFORMS: dict[Transform, Callable[[Sequence[Observation], Frequency], list[Observation]]] = {
    Transform.DIFF: _diff,
    Transform.PCT_CHANGE: _pct_change,
    Transform.MOM: _pct_change,
    Transform.YOY: _yoy,
    Transform.YTD: _ytd,
}


def apply_transform(
    points: Sequence[Observation],
    transform: Transform,
    frequency: Frequency,
) -> Sequence[Observation]:
    """Apply ``transform`` to ``points`` at the resolved ``frequency``.

    ``frequency`` only matters for YOY, where it selects the lag.
    AS_IS returns ``points`` itself.
    """
    if transform is Transform.AS_IS:
        return points
    return _TRANSFORMS[transform](points, frequency)
