"""
Tests for tsengine.stores.sqlite.

Each test gets a fresh database file in ``tmp_path`` seeded with the CPI
and as-of series (see conftest).
"""

from datetime import UTC, date, datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from tsengine.core.enums import Frequency
from tsengine.core.errors import SeriesEngineError
from tsengine.core.models import Observation
from tsengine.core.protocols import Connection, PointStore, SeriesMetadataStore
from tsengine.core.timestamps import end_of_day_utc
from tsengine.engine.orchestrator import QueryOrchestrator
from tsengine.stores.sqlite import SqliteSeriesStore, revision_time_text
from tsengine.stores.sqlite_conn import SqliteConnection


class TestSqliteConnection:
    """Connection protocol adapter."""

    def test_satisfies_protocol(self):
        """SqliteConnection is a Connection."""
        conn = SqliteConnection(":memory:")
        try:
            assert isinstance(conn, Connection)
        finally:
            conn.close()

    def test_execute_fetch(self):
        """execute + fetchall share one cursor; rows are name-addressable."""
        conn = SqliteConnection(":memory:")
        try:
            conn.execute("CREATE TABLE t (a INTEGER)")
            conn.executemany("INSERT INTO t (a) VALUES (?)", [(1,), (2,)])
            conn.commit()
            conn.execute("SELECT a FROM t ORDER BY a")
            assert [row["a"] for row in conn.fetchall()] == [1, 2]
        finally:
            conn.close()

    def test_rollback_discards_uncommitted(self):
        """rollback() drops writes made since the last commit."""
        conn = SqliteConnection(":memory:")
        try:
            conn.execute("CREATE TABLE t (a INTEGER)")
            conn.commit()
            conn.execute("INSERT INTO t (a) VALUES (1)")
            conn.rollback()
            conn.execute("SELECT COUNT(*) AS n FROM t")
            assert conn.fetchone()["n"] == 0
        finally:
            conn.close()


class TestSchema:
    """initialize() is idempotent."""

    def test_initialize_twice(self, tmp_path):
        """Creating the schema again is a no-op."""
        store = SqliteSeriesStore.open(str(tmp_path / "x.db"))
        try:
            store.initialize()
            store.initialize()
            assert store.get("ANY") is None
        finally:
            store.close()

    def test_failed_initialize_rolls_back(self):
        """A statement failure rolls back and re-raises without committing."""
        conn = MagicMock(spec=["execute", "commit", "rollback", "close"])
        conn.execute.side_effect = [None, RuntimeError("disk I/O error")]
        store = SqliteSeriesStore(conn)

        with pytest.raises(RuntimeError, match="disk I/O error"):
            store.initialize()

        conn.rollback.assert_called_once_with()
        conn.commit.assert_not_called()


class TestMetadata:
    """series table -> SeriesMetadata."""

    def test_satisfies_protocols(self, sqlite_store):
        """Both collaborator protocols."""
        assert isinstance(sqlite_store, SeriesMetadataStore)
        assert isinstance(sqlite_store, PointStore)

    def test_get(self, sqlite_store, cpi_series):
        """Round trip of every column."""
        assert sqlite_store.get("US.CPI.M") == cpi_series

    def test_get_unknown(self, sqlite_store):
        """Unknown id -> None."""
        assert sqlite_store.get("NOPE") is None

    def test_lowercase_frequency_code(self, sqlite_store):
        """Frequency codes are matched case-insensitively."""
        sqlite_store.connection.execute(
            "INSERT INTO series (series_id, name, frequency) VALUES ('LOWER', 'Lower', 'q')"
        )
        assert sqlite_store.get("LOWER").native_frequency is Frequency.QUARTERLY

    def test_bad_frequency_code(self, sqlite_store):
        """An unsupported frequency code is an engine error."""
        sqlite_store.connection.execute(
            "INSERT INTO series (series_id, name, frequency) VALUES ('BAD', 'Bad', 'X')"
        )
        with pytest.raises(SeriesEngineError):
            sqlite_store.get("BAD")


class TestPoints:
    """series_data and series_data_history reads."""

    def test_fetch_range(self, sqlite_store):
        """Inclusive text-date range, ascending."""
        out = sqlite_store.fetch_range("US.CPI.M", date(2020, 11, 30), date(2020, 12, 31))
        assert out == [Observation(date(2020, 11, 30), 122.0), Observation(date(2020, 12, 31), 123.0)]

    def test_null_values(self, sqlite_store):
        """NULL values become missing observations."""
        sqlite_store.connection.execute(
            "INSERT INTO series_data (series_id, ts_date, value) VALUES ('US.CPI.M', '2021-01-31', NULL)"
        )
        out = sqlite_store.fetch_range("US.CPI.M", date(2021, 1, 1), date(2021, 1, 31))
        assert out == [Observation(date(2021, 1, 31), None)]

    @pytest.mark.parametrize(
        ("as_of", "expected"),
        [
            (date(2020, 2, 1), 110.0),  # before any revision: current
            (date(2020, 2, 5), 102.0),  # same-day revision counts
            (date(2020, 2, 12), 105.0),
            (date(2020, 3, 1), 103.0),
        ],
    )
    def test_fetch_range_as_of(self, sqlite_store, as_of, expected):
        """Latest revision at or before the cutoff, else current."""
        out = sqlite_store.fetch_range_as_of(
            "TEST.ASOF", date(2020, 1, 1), date(2020, 2, 1), end_of_day_utc(as_of)
        )
        assert out == [Observation(date(2020, 1, 1), 100.0), Observation(date(2020, 2, 1), expected)]

    def test_cutoff_with_offset(self, sqlite_store):
        """Non-UTC cutoffs are normalized before comparison."""
        eastern = timezone(timedelta(hours=-5))
        # 2020-02-10 04:30 in UTC-5 is 09:30 UTC, after the 09:00 revision
        out = sqlite_store.fetch_range_as_of(
            "TEST.ASOF", date(2020, 2, 1), date(2020, 2, 1), datetime(2020, 2, 10, 4, 30, tzinfo=eastern)
        )
        assert out == [Observation(date(2020, 2, 1), 105.0)]


class TestOrchestratorOnSqlite:
    """End-to-end through the SQLite store."""

    def test_as_of_scenario(self, sqlite_store, settings):
        """Same answer as the in-memory merge."""
        envelope = QueryOrchestrator(sqlite_store, sqlite_store, settings=settings).get_data(
            "TEST.ASOF", start=date(2020, 1, 1), end=date(2020, 2, 1), as_of=date(2020, 2, 12)
        ).envelope
        assert envelope.points == [("2020-01-01", 100.0), ("2020-02-01", 105.0)]

    def test_matches_memory_store(self, sqlite_store, memory_store, settings):
        """Both stores produce identical fingerprints for the same data."""
        kwargs = {"frequency": "Q", "transform": "pct_change", "page": 1, "page_size": 3}
        a = QueryOrchestrator(sqlite_store, sqlite_store, settings=settings).get_data("US.CPI.M", **kwargs)
        b = QueryOrchestrator(memory_store, memory_store, settings=settings).get_data("US.CPI.M", **kwargs)
        assert a.fingerprint == b.fingerprint
        assert a.last_modified == datetime(2021, 3, 1, 12, 0, tzinfo=UTC)


class TestRevisionTimeText:
    """series_data_history.revision_time is canonical UTC text."""

    def test_fixed_width_utc(self):
        """Offsets are converted to UTC and microseconds are always present."""
        tokyo = timezone(timedelta(hours=9))
        assert revision_time_text(datetime(2020, 2, 12, 20, 0, tzinfo=tokyo)) == "2020-02-12T11:00:00.000000+00:00"
        assert revision_time_text(datetime(2020, 2, 12, 11, 0, 0, 5, tzinfo=UTC)) == "2020-02-12T11:00:00.000005+00:00"

    def test_offset_revision_ordered_by_instant(self, sqlite_store):
        """A revision written from a +09:00 time is visible only after its UTC instant."""
        tokyo = timezone(timedelta(hours=9))
        conn = sqlite_store.connection
        conn.execute(
            "INSERT INTO series_data_history (series_id, ts_date, value, revision_time) VALUES (?, ?, ?, ?)",
            ("TEST.ASOF", "2020-01-01", 99.0, revision_time_text(datetime(2020, 2, 12, 20, 0, tzinfo=tokyo))),
        )
        conn.commit()

        def value_at(cutoff: datetime) -> float | None:
            out = sqlite_store.fetch_range_as_of("TEST.ASOF", date(2020, 1, 1), date(2020, 1, 1), cutoff)
            return out[0].value

        assert value_at(datetime(2020, 2, 12, 10, 59, tzinfo=UTC)) == 100.0
        assert value_at(datetime(2020, 2, 12, 11, 0, tzinfo=UTC)) == 99.0
