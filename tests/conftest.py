"""
Shared pytest fixtures and configuration for tsengine tests.

This module provides:
- Settings and logging-context cleanup for test isolation
- Sample series (monthly CPI with revisions, quarterly GDP)
- Populated in-memory and SQLite stores

Usage:
    Fixtures are auto-discovered by pytest:

    def test_something(memory_store, cpi_series):
        ...
"""

import sys
from collections.abc import Generator
from datetime import UTC, date, datetime
from pathlib import Path

import pytest

# Ensure tsengine package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tsengine.core.enums import Frequency
from tsengine.core.logging import clear_context
from tsengine.core.models import Observation, Revision, SeriesMetadata
from tsengine.core.settings import EngineSettings, reset_settings
from tsengine.stores.memory import InMemorySeriesStore
from tsengine.stores.sqlite import SqliteSeriesStore, revision_time_text


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        # SQLite and CLI tests touch the filesystem
        if test_path.parts[0] in ("stores", "cli"):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings() -> Generator[None, None, None]:
    """Drop cached settings and bound log context around every test."""
    reset_settings()
    clear_context()
    yield
    reset_settings()
    clear_context()


@pytest.fixture
def settings() -> EngineSettings:
    """Settings with defaults, independent of the developer's environment."""
    return EngineSettings(_env_file=None)


# =============================================================================
# Sample Series
# =============================================================================

LAST_MODIFIED = datetime(2021, 3, 1, 12, 0, tzinfo=UTC)


def month_ends(year: int, count: int, start_month: int = 1) -> list[date]:
    """``count`` consecutive month-end dates starting at ``year-start_month``."""
    out = []
    y, m = year, start_month
    for _ in range(count):
        nxt = date(y + (m // 12), m % 12 + 1, 1)
        out.append(date.fromordinal(nxt.toordinal() - 1))
        y, m = nxt.year, nxt.month
    return out


def observations(dates: list[date], values: list[float | None]) -> list[Observation]:
    return [Observation(d, v) for d, v in zip(dates, values, strict=True)]


@pytest.fixture
def cpi_series() -> SeriesMetadata:
    """Monthly series covering 2019-01 .. 2020-12 (24 points)."""
    return SeriesMetadata(
        series_id="US.CPI.M",
        name="Consumer Price Index",
        native_frequency=Frequency.MONTHLY,
        unit="Index 1982-84=100",
        geography="US",
        source="BLS",
        is_adjusted=True,
        coverage_start=date(2019, 1, 31),
        coverage_end=date(2020, 12, 31),
        last_modified=LAST_MODIFIED,
    )


@pytest.fixture
def cpi_points() -> list[Observation]:
    dates = month_ends(2019, 24)
    return observations(dates, [100.0 + i for i in range(24)])


@pytest.fixture
def asof_series() -> SeriesMetadata:
    """Monthly series used by the point-in-time scenario."""
    return SeriesMetadata(
        series_id="TEST.ASOF",
        name="As-of test",
        native_frequency=Frequency.MONTHLY,
        coverage_start=date(2020, 1, 1),
        coverage_end=date(2020, 2, 1),
        last_modified=LAST_MODIFIED,
    )


@pytest.fixture
def asof_current() -> list[Observation]:
    return [Observation(date(2020, 1, 1), 100.0), Observation(date(2020, 2, 1), 110.0)]


@pytest.fixture
def asof_revisions() -> list[Revision]:
    return [
        Revision(date(2020, 2, 1), 102.0, datetime(2020, 2, 5, 9, 0, tzinfo=UTC)),
        Revision(date(2020, 2, 1), 105.0, datetime(2020, 2, 10, 9, 0, tzinfo=UTC)),
        Revision(date(2020, 2, 1), 103.0, datetime(2020, 2, 15, 9, 0, tzinfo=UTC)),
    ]


# =============================================================================
# Stores
# =============================================================================


@pytest.fixture
def memory_store(cpi_series, cpi_points, asof_series, asof_current, asof_revisions) -> InMemorySeriesStore:
    """In-memory store holding the CPI and as-of series."""
    store = InMemorySeriesStore()
    store.add_series(cpi_series)
    store.put_observations(cpi_series.series_id, cpi_points)
    store.add_series(asof_series)
    store.put_observations(asof_series.series_id, asof_current)
    store.add_revisions(asof_series.series_id, asof_revisions)
    return store


def seed_sqlite(store: SqliteSeriesStore, series: SeriesMetadata, points, revisions=()) -> None:
    """Insert a series, its current values and its history rows."""
    conn = store.connection
    conn.execute(
        "INSERT INTO series (series_id, name, frequency, unit, geography, source, is_adjusted,"
        " start_date, end_date, last_update) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        (
            series.series_id,
            series.name,
            series.native_frequency.value,
            series.unit,
            series.geography,
            series.source,
            int(series.is_adjusted),
            series.coverage_start.isoformat() if series.coverage_start else None,
            series.coverage_end.isoformat() if series.coverage_end else None,
            series.last_modified.isoformat(timespec="microseconds") if series.last_modified else None,
        ),
    )
    conn.executemany(
        "INSERT INTO series_data (series_id, ts_date, value) VALUES (?, ?, ?)",
        [(series.series_id, p.date.isoformat(), p.value) for p in points],
    )
    conn.executemany(
        "INSERT INTO series_data_history (series_id, ts_date, value, revision_time) VALUES (?, ?, ?, ?)",
        [
            (series.series_id, r.date.isoformat(), r.value, revision_time_text(r.revision_time))
            for r in revisions
        ],
    )
    conn.commit()


@pytest.fixture
def sqlite_store(
    tmp_path, cpi_series, cpi_points, asof_series, asof_current, asof_revisions
) -> Generator[SqliteSeriesStore, None, None]:
    """SQLite store in ``tmp_path`` holding the CPI and as-of series."""
    store = SqliteSeriesStore.open(str(tmp_path / "series.db"))
    store.initialize()
    seed_sqlite(store, cpi_series, cpi_points)
    seed_sqlite(store, asof_series, asof_current, asof_revisions)
    yield store
    store.close()


@pytest.fixture
def sqlite_db_path(sqlite_store, tmp_path) -> str:
    """Path of the seeded SQLite database (the fixture store stays open)."""
    return str(tmp_path / "series.db")
