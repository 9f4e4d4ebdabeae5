"""
In-memory metadata and point store.

Used by tests and by embedders that already hold their series in process.
Current values and revision history are kept separately, the same split the
SQLite tables use, and point-in-time reads go through
:func:`~tsengine.engine.revisions.merge_as_of`.

Example:
    >>> store = InMemorySeriesStore()
    >>> store.add_series(SeriesMetadata("US.GDP.Q", "GDP", Frequency.QUARTERLY))
    >>> store.put_observations("US.GDP.Q", [Observation(date(2024, 3, 31), 100.0)])
    >>> store.fetch_range("US.GDP.Q", date(2024, 1, 1), date(2024, 12, 31))
    [Observation(date=datetime.date(2024, 3, 31), value=100.0)]
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from datetime import date, datetime

from tsengine.core.models import Observation, Revision, SeriesMetadata
from tsengine.engine.revisions import merge_as_of


class InMemorySeriesStore:
    """Dict-backed store implementing both collaborator protocols."""

    def __init__(self) -> None:
        self._series: dict[str, SeriesMetadata] = {}
        self._current: dict[str, dict[date, float | None]] = {}
        self._revisions: dict[str, list[Revision]] = {}
        self._lock = threading.Lock()

    # -- loading -------------------------------------------------------------

    def add_series(self, metadata: SeriesMetadata) -> None:
        with self._lock:
            self._series[metadata.series_id] = metadata
            self._current.setdefault(metadata.series_id, {})
            self._revisions.setdefault(metadata.series_id, [])

    def put_observations(self, series_id: str, observations: Iterable[Observation]) -> None:
        """Upsert current values; a later value for the same date replaces the earlier."""
        with self._lock:
            current = self._current.setdefault(series_id, {})
            for obs in observations:
                current[obs.date] = obs.value

    def add_revisions(self, series_id: str, revisions: Iterable[Revision]) -> None:
        with self._lock:
            self._revisions.setdefault(series_id, []).extend(revisions)

    # -- SeriesMetadataStore -------------------------------------------------

    def get(self, series_id: str) -> SeriesMetadata | None:
        with self._lock:
            return self._series.get(series_id)

    # -- PointStore ----------------------------------------------------------

    def fetch_range(self, series_id: str, start: date, end: date) -> list[Observation]:
        with self._lock:
            current = dict(self._current.get(series_id, {}))
        return [Observation(d, current[d]) for d in sorted(current) if start <= d <= end]

    def fetch_range_as_of(
        self, series_id: str, start: date, end: date, as_of: datetime
    ) -> list[Observation]:
        current = self.fetch_range(series_id, start, end)
        with self._lock:
            revisions = [r for r in self._revisions.get(series_id, []) if start <= r.date <= end]
        return merge_as_of(current, revisions, as_of)
