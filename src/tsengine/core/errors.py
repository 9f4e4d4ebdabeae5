"""
Structured error types for the time-series query engine.

Every failure the engine surfaces to its boundary layer is a typed
SeriesEngineError carrying a category, a retry flag, structured context, and
an optional chained cause. The boundary (an HTTP layer, the CLI) translates
these into its own wire format; the engine never produces one itself.

Manifesto:
    - **Typed taxonomy:** One class per failure kind the caller must tell apart
    - **Explicit retry semantics:** Only upstream failures are retryable
    - **Rich context:** Errors carry the series id and parameters involved
    - **Error chaining:** Collaborator exceptions are preserved as ``cause``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                      SeriesEngineError                           │
        │  (category, retryable, context, cause)                           │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  NotFoundError          InvalidParameterError                    │
        │  (NOT_FOUND)            (VALIDATION, error_code, more_info)      │
        │                                                                  │
        │  InvalidRangeError      IncompleteCoverageError                  │
        │  (VALIDATION)           (VALIDATION)                             │
        │                                                                  │
        │  UpstreamUnavailableError                                        │
        │  (UPSTREAM, retryable=True)                                      │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = NotFoundError("Series not found: US.GDP")
    >>> error.retryable
    False
    >>> error.with_context(series_id="US.GDP").context.series_id
    'US.GDP'

    >>> try:
    ...     raise ConnectionError("socket closed")
    ... except ConnectionError as e:
    ...     err = UpstreamUnavailableError("Point store unavailable", cause=e)
    >>> err.retryable
    True

Guardrails:
    ❌ DON'T: Substitute stale or partial data when a fetch fails
    ✅ DO: Raise UpstreamUnavailableError with ``cause=``

    ❌ DON'T: Mark validation errors retryable
    ✅ DO: Let ``default_retryable`` decide

Tags:
    error-handling, exception-hierarchy, retry-logic, tsengine
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Error categories used for routing and status mapping at the boundary.

    Attributes:
        NOT_FOUND: Unknown series
        VALIDATION: Bad parameters, ranges, or missing coverage bounds
        UPSTREAM: Collaborator fetch failed, timed out, or was cancelled
        INTERNAL: Bugs, unexpected state
        UNKNOWN: Uncategorized errors
    """

    NOT_FOUND = "NOT_FOUND"
    VALIDATION = "VALIDATION"
    UPSTREAM = "UPSTREAM"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an engine error.

    Only non-None fields are serialized by ``to_dict()``; anything without a
    dedicated field goes into ``metadata``.

    Attributes:
        series_id: Series the query targeted
        operation: Collaborator call or engine stage that failed
        parameter: Name of the offending request parameter
        metadata: Additional key-value pairs
    """

    series_id: str | None = None
    operation: str | None = None
    parameter: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["series_id", "operation", "parameter"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class SeriesEngineError(Exception):
    """
    Base exception for every error the engine raises.

    Subclasses set ``default_category`` and ``default_retryable``; callers may
    override either per instance.

    Examples:
        >>> error = SeriesEngineError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.to_dict()["retryable"]
        False
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> SeriesEngineError:
        """
        Add context to this error (fluent API).

        Usage:
            raise NotFoundError("Series not found").with_context(series_id="US.GDP")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# LOOKUP ERRORS
# =============================================================================


class NotFoundError(SeriesEngineError):
    """The requested series id is unknown to the metadata store."""

    default_category = ErrorCategory.NOT_FOUND
    default_retryable = False


# =============================================================================
# VALIDATION ERRORS (never retryable)
# =============================================================================


class ValidationError(SeriesEngineError):
    """Base for request problems detected before any point retrieval."""

    default_category = ErrorCategory.VALIDATION
    default_retryable = False


class InvalidParameterError(ValidationError):
    """
    A request parameter has a bad enum code or is out of bounds.

    ``error_code`` is a stable numeric code and ``more_info`` a documentation
    link, both passed through to the boundary's error payload.
    """

    def __init__(
        self,
        message: str,
        *,
        error_code: int | None = None,
        more_info: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.error_code = error_code
        self.more_info = more_info

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.error_code is not None:
            result["error_code"] = self.error_code
        if self.more_info is not None:
            result["more_info"] = self.more_info
        return result


class InvalidRangeError(ValidationError):
    """The resolved start date is after the resolved end date."""


class IncompleteCoverageError(ValidationError):
    """Neither explicit dates nor series coverage bounds resolve the range."""


# =============================================================================
# UPSTREAM ERRORS (retryable)
# =============================================================================


class UpstreamUnavailableError(SeriesEngineError):
    """A collaborator fetch failed, timed out, or was cancelled."""

    default_category = ErrorCategory.UPSTREAM
    default_retryable = True


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, SeriesEngineError):
        return error.retryable
    return isinstance(error, (ConnectionError, TimeoutError))


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, SeriesEngineError):
        return error.category
    if isinstance(error, (ConnectionError, TimeoutError)):
        return ErrorCategory.UPSTREAM
    if isinstance(error, ValueError):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
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
]
