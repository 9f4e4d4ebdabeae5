"""
Collaborator contracts consumed by the query engine.

The orchestrator depends on the shape of these protocols, never on a
concrete store. ``tsengine.stores`` ships an in-memory and a SQLite
implementation; any object with matching methods works.

Architecture:
    ::

        protocols.py
        ├── SeriesMetadataStore : series id → SeriesMetadata | None
        ├── PointStore          : date range → ordered observations,
        │                         current or as of a cutoff
        └── Connection          : minimal sync DB-API shape for SQL stores

Guardrails:
    ❌ DON'T: Return unordered or duplicate-dated observations
    ✅ DO: Return observations ascending by date, one per date

    ❌ DON'T: Swallow store failures and return an empty list
    ✅ DO: Raise; the orchestrator turns it into UpstreamUnavailableError

Tags:
    protocol, store, collaborator, tsengine
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime
from typing import Any, Protocol, runtime_checkable

from tsengine.core.models import Observation, SeriesMetadata


@runtime_checkable
class SeriesMetadataStore(Protocol):
    """Resolves a series id to its metadata."""

    def get(self, series_id: str) -> SeriesMetadata | None:
        """Return the series metadata, or None if the series is unknown."""
        ...


@runtime_checkable
class PointStore(Protocol):
    """
    Resolves a date range to an ordered observation sequence.

    ``fetch_range_as_of`` applies point-in-time semantics: for each date the
    revision with the latest ``revision_time <= as_of`` wins; dates without
    such a revision fall back to the current value.
    """

    def fetch_range(self, series_id: str, start: date, end: date) -> Sequence[Observation]:
        """Current observations with ``start <= date <= end``, ascending."""
        ...

    def fetch_range_as_of(
        self, series_id: str, start: date, end: date, as_of: datetime
    ) -> Sequence[Observation]:
        """Observations as known at ``as_of``, ascending."""
        ...


@runtime_checkable
class Connection(Protocol):
    """
    Minimal SYNCHRONOUS connection interface for the SQL-backed store.

    Satisfied by :class:`tsengine.stores.sqlite_conn.SqliteConnection`.
    """

    def execute(self, sql: str, params: tuple = ()) -> Any:
        """Execute SQL statement with optional parameters."""
        ...

    def executemany(self, sql: str, params: list[tuple]) -> Any:
        """Execute SQL statement for multiple parameter sets."""
        ...

    def fetchone(self) -> Any:
        """Fetch one row from last query."""
        ...

    def fetchall(self) -> list:
        """Fetch all rows from last query."""
        ...

    def commit(self) -> None:
        """Commit current transaction."""
        ...

    def rollback(self) -> None:
        """Rollback current transaction."""
        ...


__all__ = ["SeriesMetadataStore", "PointStore", "Connection"]
