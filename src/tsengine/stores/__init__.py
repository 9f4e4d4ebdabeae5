"""
tsengine.stores - concrete SeriesMetadataStore / PointStore implementations.

    memory.InMemorySeriesStore   dicts + merge_as_of
    sqlite.SqliteSeriesStore     series / series_data / series_data_history tables
"""

from tsengine.stores.memory import InMemorySeriesStore
from tsengine.stores.sqlite import SCHEMA, SqliteSeriesStore, revision_time_text
from tsengine.stores.sqlite_conn import SqliteConnection

__all__ = ["InMemorySeriesStore", "SqliteSeriesStore", "SqliteConnection", "SCHEMA", "revision_time_text"]
