"""
Query enums shared by the engine, the stores, and the CLI.

Values are the wire codes accepted from callers and echoed in the response
envelope (``freq``, ``transform``, ``fill``).

STDLIB ONLY - NO PYDANTIC.
"""

from __future__ import annotations

from enum import Enum


class Frequency(str, Enum):
    """
    Reporting frequency, ordered from finest to coarsest.

    ``NATIVE`` is a request-only placeholder that resolves to the series'
    native frequency before any processing. Comparison follows declaration
    order, not the string codes.
    """

    NATIVE = "native"
    DAILY = "D"
    WEEKLY = "W"
    MONTHLY = "M"
    QUARTERLY = "Q"
    ANNUAL = "A"

    @property
    def rank(self) -> int:
        return _FREQUENCY_ORDER.index(self)

    @property
    def periods_per_year(self) -> int:
        """Lag used for year-over-year comparisons at this frequency."""
        return _PERIODS_PER_YEAR[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Frequency):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Frequency):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Frequency):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Frequency):
            return NotImplemented
        return self.rank >= other.rank

    def __str__(self) -> str:
        return self.value


_FREQUENCY_ORDER = list(Frequency)

_PERIODS_PER_YEAR = {
    Frequency.NATIVE: 1,
    Frequency.DAILY: 365,
    Frequency.WEEKLY: 52,
    Frequency.MONTHLY: 12,
    Frequency.QUARTERLY: 4,
    Frequency.ANNUAL: 1,
}


class Transform(str, Enum):
    """Statistical transform applied after resampling."""

    AS_IS = "as_is"
    DIFF = "diff"
    PCT_CHANGE = "pct_change"
    MOM = "mom"
    YOY = "yoy"
    YTD = "ytd"

    def __str__(self) -> str:
        return self.value


class FillPolicy(str, Enum):
    """Missing-value policy applied after the transform."""

    NONE = "none"
    FORWARD_FILL = "ffill"
    BACKWARD_FILL = "bfill"

    def __str__(self) -> str:
        return self.value


class OutputFormat(str, Enum):
    """Serialization formats the boundary may request."""

    JSON = "json"
    CSV = "csv"


__all__ = ["Frequency", "Transform", "FillPolicy", "OutputFormat"]
