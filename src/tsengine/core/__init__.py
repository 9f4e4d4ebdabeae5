"""
tsengine.core - data model, enums, errors and ambient primitives.

Everything the engine stages and stores share lives here:

- enums:      Frequency, Transform, FillPolicy, OutputFormat
- models:     Observation, Revision, SeriesMetadata, QueryResult
- schemas:    SeriesDataResponse, SeriesResource (pydantic envelopes)
- errors:     SeriesEngineError hierarchy
- protocols:  SeriesMetadataStore, PointStore, Connection
- hashing:    compute_hash
- logging:    configure_logging, get_logger, LogContext
- settings:   EngineSettings, get_settings
"""

from tsengine.core.enums import FillPolicy, Frequency, OutputFormat, Transform
from tsengine.core.errors import (
    ErrorCategory,
    ErrorContext,
    IncompleteCoverageError,
    InvalidParameterError,
    InvalidRangeError,
    NotFoundError,
    SeriesEngineError,
    UpstreamUnavailableError,
    ValidationError,
    categorize_error,
    is_retryable,
)
from tsengine.core.models import Observation, QueryResult, Revision, SeriesMetadata
from tsengine.core.protocols import Connection, PointStore, SeriesMetadataStore
from tsengine.core.schemas import SeriesDataResponse, SeriesResource

__all__ = [
    # enums
    "Frequency",
    "Transform",
    "FillPolicy",
    "OutputFormat",
    # models
    "Observation",
    "Revision",
    "SeriesMetadata",
    "QueryResult",
    "SeriesDataResponse",
    "SeriesResource",
    # errors
    "ErrorCategory",
    "ErrorContext",
    "SeriesEngineError",
    "NotFoundError",
    "ValidationError",
    "InvalidParameterError",
    "InvalidRangeError",
    "IncompleteCoverageError",
    "UpstreamUnavailableError",
    "is_retryable",
    "categorize_error",
    # protocols
    "SeriesMetadataStore",
    "PointStore",
    "Connection",
]
