"""
tsengine - point-in-time time-series query and transformation engine.

    >>> from tsengine import QueryOrchestrator, InMemorySeriesStore
    >>> store = InMemorySeriesStore()
    >>> orchestrator = QueryOrchestrator(store, store)
"""

__version__ = "0.1.0"

from tsengine.core import (  # noqa: E402
    FillPolicy,
    Frequency,
    Observation,
    QueryResult,
    Revision,
    SeriesEngineError,
    SeriesMetadata,
    Transform,
)
from tsengine.engine import QueryOrchestrator  # noqa: E402
from tsengine.stores import InMemorySeriesStore, SqliteSeriesStore  # noqa: E402

__all__ = [
    "__version__",
    "QueryOrchestrator",
    "InMemorySeriesStore",
    "SqliteSeriesStore",
    "Frequency",
    "Transform",
    "FillPolicy",
    "Observation",
    "Revision",
    "SeriesMetadata",
    "QueryResult",
    "SeriesEngineError",
]
