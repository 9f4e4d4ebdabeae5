"""
SQLite-backed metadata and point store.

Implements both :class:`~tsengine.core.protocols.SeriesMetadataStore` and
:class:`~tsengine.core.protocols.PointStore` over three tables:

    ::

        series               one row per series (native frequency as A/Q/M/W/D)
        series_data          latest value per (series_id, ts_date)
        series_data_history  superseded values with their revision_time

Point-in-time reads merge ``series_data`` (tagged with a NULL revision time)
and ``series_data_history`` rows revised at or before the cutoff, rank each
date's candidates by revision time descending with NULLs last, and keep rank
1. A date's current value therefore wins only when it has no qualifying
revision.

Schema contract:
    - ``ts_date`` holds ISO ``YYYY-MM-DD`` text.
    - ``revision_time`` holds the output of :func:`revision_time_text`,
      i.e. fixed-width UTC ``YYYY-MM-DDTHH:MM:SS.ffffff+00:00``. The as-of
      cutoff is rendered the same way and compared as text, which is
      chronological only under this form. Writers must use
      :func:`revision_time_text`; ``Z`` suffixes, other offsets, or dropped
      microseconds break the ordering.

Guardrails:
    - This store reads only. Loading observations is the ingestion
      pipeline's job; :meth:`initialize` only creates the schema.

Tags:
    sqlite, store, as-of, window-function, tsengine
"""

from __future__ import annotations

from contextlib import AbstractContextManager, nullcontext
from datetime import date, datetime

from tsengine.core.enums import Frequency
from tsengine.core.errors import SeriesEngineError
from tsengine.core.logging import get_logger
from tsengine.core.models import Observation, SeriesMetadata
from tsengine.core.protocols import Connection
from tsengine.core.timestamps import from_iso8601, to_iso8601
from tsengine.stores.sqlite_conn import SqliteConnection

logger = get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS series (
  series_id     VARCHAR(128) PRIMARY KEY,
  name          TEXT NOT NULL,
  frequency     CHAR(1) NOT NULL,
  unit          TEXT,
  geography     VARCHAR(16),
  source        TEXT,
  is_adjusted   BOOLEAN DEFAULT 0,
  start_date    DATE,
  end_date      DATE,
  last_update   TIMESTAMP
);

CREATE TABLE IF NOT EXISTS series_data (
  series_id     VARCHAR(128) NOT NULL,
  ts_date       DATE NOT NULL,
  value         DOUBLE PRECISION,
  PRIMARY KEY (series_id, ts_date),
  FOREIGN KEY (series_id) REFERENCES series(series_id)
);

CREATE TABLE IF NOT EXISTS series_data_history (
  series_id      VARCHAR(128) NOT NULL,
  ts_date        DATE NOT NULL,
  value          DOUBLE PRECISION,
  revision_time  TIMESTAMP NOT NULL,
  PRIMARY KEY (series_id, ts_date, revision_time),
  FOREIGN KEY (series_id) REFERENCES series(series_id)
);
"""

_SELECT_SERIES = """
SELECT series_id, name, frequency, unit, geography, source, is_adjusted,
       start_date, end_date, last_update
FROM series
WHERE series_id = ?
"""

_SELECT_RANGE = """
SELECT ts_date, value
FROM series_data
WHERE series_id = ? AND ts_date BETWEEN ? AND ?
ORDER BY ts_date
"""

_SELECT_RANGE_AS_OF = """
SELECT ts_date, value
FROM (
  SELECT ts_date, value,
         ROW_NUMBER() OVER (
           PARTITION BY ts_date
           ORDER BY revision_time DESC NULLS LAST
         ) AS rn
  FROM (
    SELECT ts_date, value, NULL AS revision_time
    FROM series_data
    WHERE series_id = ? AND ts_date BETWEEN ? AND ?
    UNION ALL
    SELECT ts_date, value, revision_time
    FROM series_data_history
    WHERE series_id = ? AND ts_date BETWEEN ? AND ? AND revision_time <= ?
  ) u
) x
WHERE rn = 1
ORDER BY ts_date
"""


def revision_time_text(moment: datetime) -> str:
    """Canonical ``revision_time`` text for ``series_data_history`` rows."""
    return to_iso8601(moment)


def _parse_date(raw: str | None) -> date | None:
    return date.fromisoformat(raw) if raw else None


def _to_observation(row) -> Observation:
    value = row["value"]
    return Observation(date.fromisoformat(row["ts_date"]), None if value is None else float(value))


class SqliteSeriesStore:
    """Metadata + point store on a :class:`SqliteConnection`."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    @classmethod
    def open(cls, path: str) -> SqliteSeriesStore:
        """Open (or create) the database at ``path``; ``":memory:"`` works too."""
        return cls(SqliteConnection(path))

    @property
    def connection(self) -> Connection:
        return self._conn

    def initialize(self) -> None:
        """Create the schema if it does not exist."""
        with self._lock():
            try:
                for statement in SCHEMA.split(";"):
                    if statement.strip():
                        self._conn.execute(statement)
            except Exception:
                self._conn.rollback()
                raise
            self._conn.commit()
        logger.info("sqlite_schema_initialized")

    def close(self) -> None:
        self._conn.close()

    # -- SeriesMetadataStore -----------------------------------------------

    def get(self, series_id: str) -> SeriesMetadata | None:
        with self._lock():
            self._conn.execute(_SELECT_SERIES, (series_id,))
            row = self._conn.fetchone()
        if row is None:
            return None

        code = str(row["frequency"]).strip().upper()
        try:
            frequency = Frequency(code)
        except ValueError:
            raise SeriesEngineError(
                f"Unsupported native frequency {code!r} for series {series_id}"
            ).with_context(series_id=series_id) from None
        if frequency is Frequency.NATIVE:
            raise SeriesEngineError(
                f"Unsupported native frequency {code!r} for series {series_id}"
            ).with_context(series_id=series_id)

        return SeriesMetadata(
            series_id=row["series_id"],
            name=row["name"],
            native_frequency=frequency,
            unit=row["unit"],
            geography=row["geography"],
            source=row["source"],
            is_adjusted=bool(row["is_adjusted"]),
            coverage_start=_parse_date(row["start_date"]),
            coverage_end=_parse_date(row["end_date"]),
            last_modified=from_iso8601(row["last_update"]),
        )

    # -- PointStore --------------------------------------------------------

    def fetch_range(self, series_id: str, start: date, end: date) -> list[Observation]:
        with self._lock():
            self._conn.execute(_SELECT_RANGE, (series_id, start.isoformat(), end.isoformat()))
            rows = self._conn.fetchall()
        return [_to_observation(row) for row in rows]

    def fetch_range_as_of(
        self, series_id: str, start: date, end: date, as_of: datetime
    ) -> list[Observation]:
        s, e = start.isoformat(), end.isoformat()
        with self._lock():
            self._conn.execute(
                _SELECT_RANGE_AS_OF, (series_id, s, e, series_id, s, e, revision_time_text(as_of))
            )
            rows = self._conn.fetchall()
        return [_to_observation(row) for row in rows]

    def _lock(self) -> AbstractContextManager:
        return getattr(self._conn, "lock", None) or nullcontext()
