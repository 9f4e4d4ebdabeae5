"""
Per-request data model for the query engine.

Observations, revisions and series metadata are created from collaborator
responses for a single query and discarded once the response is built.
Nothing here is shared across requests.

STDLIB ONLY - NO PYDANTIC.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING

from tsengine.core.enums import Frequency

if TYPE_CHECKING:
    from tsengine.core.schemas import SeriesDataResponse


@dataclass(frozen=True, slots=True)
class Observation:
    """A dated value. ``value=None`` is a missing observation, not zero."""

    date: date
    value: float | None = None

    def with_value(self, value: float | None) -> Observation:
        return Observation(self.date, value)


@dataclass(frozen=True, slots=True)
class Revision:
    """A historical correction to the observation on ``date``.

    ``revision_time`` is when the correction was recorded; several revisions
    may exist for the same date.
    """

    date: date
    value: float | None
    revision_time: datetime


@dataclass(frozen=True, slots=True)
class SeriesMetadata:
    """Series attributes as owned by the metadata store. Read-only here."""

    series_id: str
    name: str
    native_frequency: Frequency
    unit: str | None = None
    geography: str | None = None
    source: str | None = None
    is_adjusted: bool = False
    coverage_start: date | None = None
    coverage_end: date | None = None
    last_modified: datetime | None = None

    def __post_init__(self) -> None:
        if self.native_frequency is Frequency.NATIVE:
            raise ValueError(f"Series {self.series_id} must declare a concrete native frequency")


@dataclass(frozen=True, slots=True)
class QueryResult:
    """Output of a single ``get_data`` call.

    Attributes:
        envelope: Response metadata plus the paged ``[date, value]`` tuples
        all_points: Full post-fill sequence, for re-serializing in another
            format without recomputation
        fingerprint: Quoted hex validator for conditional retrieval
        last_modified: The series' last-modified timestamp, if known
    """

    envelope: SeriesDataResponse
    all_points: tuple[Observation, ...]
    fingerprint: str
    last_modified: datetime | None = None


__all__ = ["Observation", "Revision", "SeriesMetadata", "QueryResult"]
