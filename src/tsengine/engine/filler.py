"""Missing-value fill policies. Length and dates are preserved."""

from __future__ import annotations

from collections.abc import Sequence

from tsengine.core.enums import FillPolicy
from tsengine.core.models import Observation


def _forward_fill(points: Sequence[Observation]) -> list[Observation]:
    out = []
    last: float | None = None
    for point in points:
        if point.value is not None:
            last = point.value
        out.append(point.with_value(last))
    return out


def _backward_fill(points: Sequence[Observation]) -> list[Observation]:
    out = []
    nxt: float | None = None
    for point in reversed(points):
        if point.value is not None:
            nxt = point.value
        out.append(point.with_value(nxt))
    out.reverse()
    return out


def fill(points: Sequence[Observation], policy: FillPolicy) -> Sequence[Observation]:
    """Apply ``policy``; NONE returns ``points`` itself.

    Leading gaps survive a forward fill and trailing gaps survive a backward
    fill.
    """
    if policy is FillPolicy.NONE:
        return points
    if policy is FillPolicy.FORWARD_FILL:
        return _forward_fill(points)
    return _backward_fill(points)
