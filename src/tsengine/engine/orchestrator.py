"""
Query orchestration: metadata → points → resample → transform → fill →
page → envelope → fingerprint.

QueryOrchestrator is the single operation the routing layer calls. It is a
pure function of collaborator state: it keeps no cache, shares nothing across
queries, and never writes to a store.

Manifesto:
    - **Validate first:** Parameter, paging and explicit-range errors are
      raised before any I/O and are never retryable
    - **Fail whole:** A failed, timed-out or cancelled fetch raises
      UpstreamUnavailableError; partial or stale data is never returned
    - **Fingerprint the full result:** The validator covers every point, not
      only the requested page

Architecture:
    ::

        get_data(series_id, start, end, as_of, freq, transform, fill, page, page_size)
          │
          ├─ validate parameters                 InvalidParameterError / InvalidRangeError
          ├─ metadata_store.get(series_id)       NotFoundError / UpstreamUnavailableError
          ├─ resolve [start, end]                IncompleteCoverageError / InvalidRangeError
          ├─ point_store.fetch_range[_as_of]     UpstreamUnavailableError
          ├─ resample(native → target)           target = native if freq is NATIVE
          ├─ apply_transform(target)
          ├─ fill(policy)
          ├─ paginate(page, page_size)
          ├─ SeriesDataResponse
          └─ build_fingerprint(full sequence)

Examples:
    >>> orchestrator = QueryOrchestrator(store, store)
    >>> result = orchestrator.get_data("US.CPI.M", frequency="Q", transform="yoy")
    >>> result.envelope.freq
    'Q'

Tags:
    orchestrator, query, time-series, as-of, tsengine
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Sequence
from datetime import date
from typing import Any

from tsengine.core.enums import FillPolicy, Frequency, Transform
from tsengine.core.errors import (
    IncompleteCoverageError,
    InvalidRangeError,
    NotFoundError,
    SeriesEngineError,
    UpstreamUnavailableError,
)
from tsengine.core.logging import LogContext, get_logger
from tsengine.core.models import Observation, QueryResult, SeriesMetadata
from tsengine.core.protocols import PointStore, SeriesMetadataStore
from tsengine.core.schemas import SeriesDataResponse, SeriesResource
from tsengine.core.settings import EngineSettings, get_settings
from tsengine.core.timestamps import end_of_day_utc
from tsengine.engine.filler import fill
from tsengine.engine.fingerprint import build_fingerprint
from tsengine.engine.pagination import Page, paginate
from tsengine.engine.params import (
    parse_fill_policy,
    parse_frequency,
    parse_transform,
    validate_page,
    validate_page_size,
    validate_series_id,
)
from tsengine.engine.resampler import resample
from tsengine.engine.transformer import apply_transform
from tsengine.execution.timeout import OperationCancelled, TimeoutExpired, run_with_timeout

logger = get_logger(__name__)


class QueryOrchestrator:
    """Composes the stores with the resample/transform/fill stages."""

    def __init__(
        self,
        metadata_store: SeriesMetadataStore,
        point_store: PointStore,
        *,
        settings: EngineSettings | None = None,
    ) -> None:
        self._metadata_store = metadata_store
        self._point_store = point_store
        self._settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def get_data(
        self,
        series_id: str,
        start: date | None = None,
        end: date | None = None,
        as_of: date | None = None,
        frequency: Frequency | str = Frequency.NATIVE,
        transform: Transform | str = Transform.AS_IS,
        fill_policy: FillPolicy | str = FillPolicy.NONE,
        page: int = 1,
        page_size: int | None = None,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> QueryResult:
        """Run one data query.

        Args:
            series_id: Series identifier
            start, end: Inclusive range; each defaults to the series coverage bound
            as_of: Return data as known at the end of this day (UTC)
            frequency: Target frequency, NATIVE for the series' own
            transform: Statistical transform
            fill_policy: Missing-value policy, applied after the transform
            page: 1-based page number
            page_size: Points per page (default from settings)
            timeout: Seconds allowed per collaborator call (default from settings)
            cancel: Set by the caller to abandon the query

        Raises:
            InvalidParameterError, InvalidRangeError: Bad request, before I/O
            NotFoundError: Unknown series
            IncompleteCoverageError: Range cannot be resolved
            UpstreamUnavailableError: A store call failed, timed out or was cancelled
        """
        validate_series_id(series_id)
        requested_freq = parse_frequency(frequency)
        transform = parse_transform(transform)
        fill_policy = parse_fill_policy(fill_policy)
        if page_size is None:
            page_size = self._settings.default_page_size
        validate_page(page)
        validate_page_size(page_size, self._settings.max_page_size)
        if start is not None and end is not None and start > end:
            raise self._invalid_range(series_id, start, end)
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        started = time.monotonic()
        with LogContext(series_id=series_id):
            logger.debug(
                "series_query_started", freq=requested_freq.value, transform=transform.value, page=page
            )
            series = self._load_series(series_id, timeout, cancel)
            eff_start, eff_end = self._resolve_range(series, start, end)

            points = self._fetch_points(series, eff_start, eff_end, as_of, timeout, cancel)

            native = series.native_frequency
            target = native if requested_freq is Frequency.NATIVE else requested_freq
            if target != native:
                points = resample(points, native, target)

            points = apply_transform(points, transform, target)
            points = fill(points, fill_policy)
            all_points = tuple(points)

            window = paginate(all_points, page, page_size)
            envelope = self._build_envelope(series, as_of, target, transform, fill_policy, all_points, window)
            fingerprint = build_fingerprint(
                series_id, eff_start, eff_end, as_of, target, transform, fill_policy,
                series.last_modified, all_points, page, page_size,
            )

            logger.info(
                "series_query_completed",
                freq=target.value,
                transform=transform.value,
                fill=fill_policy.value,
                as_of=as_of.isoformat() if as_of else None,
                total_points=window.total_items,
                page=page,
                duration_ms=round((time.monotonic() - started) * 1000, 2),
            )

        return QueryResult(
            envelope=envelope,
            all_points=all_points,
            fingerprint=fingerprint,
            last_modified=series.last_modified,
        )

    def describe_series(
        self,
        series_id: str,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> SeriesResource:
        """Metadata resource for one series."""
        validate_series_id(series_id)
        series = self._load_series(series_id, timeout, cancel)
        return SeriesResource(
            series_id=series.series_id,
            name=series.name,
            freq=series.native_frequency.value,
            unit=series.unit,
            geography=series.geography,
            source=series.source,
            is_adjusted=series.is_adjusted,
            start_date=series.coverage_start,
            end_date=series.coverage_end,
            last_update=series.last_modified,
        )

    # ------------------------------------------------------------------
    # Collaborator calls
    # ------------------------------------------------------------------

    def _call_upstream(
        self,
        operation: str,
        func: Callable[..., Any],
        args: tuple[Any, ...],
        timeout: float | None,
        cancel: threading.Event | None,
    ) -> Any:
        budget = timeout if timeout is not None else self._settings.upstream_timeout_seconds
        try:
            return run_with_timeout(func, budget, operation=operation, args=args, cancel=cancel)
        except SeriesEngineError:
            raise
        except (TimeoutExpired, OperationCancelled) as e:
            logger.warning("upstream_call_aborted", operation=operation, reason=str(e))
            raise UpstreamUnavailableError(f"{operation} did not complete: {e}", cause=e).with_context(
                operation=operation
            ) from e
        except Exception as e:
            logger.error("upstream_call_failed", operation=operation, error=str(e), exc_info=True)
            raise UpstreamUnavailableError(f"{operation} failed: {e}", cause=e).with_context(
                operation=operation
            ) from e

    def _load_series(
        self, series_id: str, timeout: float | None, cancel: threading.Event | None
    ) -> SeriesMetadata:
        series = self._call_upstream(
            "metadata.get", self._metadata_store.get, (series_id,), timeout, cancel
        )
        if series is None:
            raise NotFoundError(f"Series not found: {series_id}").with_context(series_id=series_id)
        return series

    def _fetch_points(
        self,
        series: SeriesMetadata,
        start: date,
        end: date,
        as_of: date | None,
        timeout: float | None,
        cancel: threading.Event | None,
    ) -> Sequence[Observation]:
        if as_of is not None:
            cutoff = end_of_day_utc(as_of)
            return self._call_upstream(
                "points.fetch_range_as_of",
                self._point_store.fetch_range_as_of,
                (series.series_id, start, end, cutoff),
                timeout,
                cancel,
            )
        return self._call_upstream(
            "points.fetch_range",
            self._point_store.fetch_range,
            (series.series_id, start, end),
            timeout,
            cancel,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_range(
        self, series: SeriesMetadata, start: date | None, end: date | None
    ) -> tuple[date, date]:
        eff_start = start if start is not None else series.coverage_start
        eff_end = end if end is not None else series.coverage_end
        if eff_start is None or eff_end is None:
            raise IncompleteCoverageError(
                f"Series {series.series_id} does not have coverage dates defined"
            ).with_context(series_id=series.series_id)
        if eff_start > eff_end:
            raise self._invalid_range(series.series_id, eff_start, eff_end)
        return eff_start, eff_end

    @staticmethod
    def _invalid_range(series_id: str, start: date, end: date) -> InvalidRangeError:
        error = InvalidRangeError("start must be before or equal to end")
        error.with_context(series_id=series_id, start=start.isoformat(), end=end.isoformat())
        return error

    @staticmethod
    def _build_envelope(
        series: SeriesMetadata,
        as_of: date | None,
        frequency: Frequency,
        transform: Transform,
        fill_policy: FillPolicy,
        all_points: Sequence[Observation],
        window: Page[Observation],
    ) -> SeriesDataResponse:
        metadata = {
            "country": series.geography,
            "source": series.source,
            "coverage_start": series.coverage_start.isoformat() if series.coverage_start else None,
            "coverage_end": series.coverage_end.isoformat() if series.coverage_end else None,
            "last_update": series.last_modified.isoformat() if series.last_modified else None,
            "is_adjusted": series.is_adjusted,
        }
        return SeriesDataResponse(
            series_id=series.series_id,
            name=series.name,
            freq=frequency.value,
            unit=series.unit,
            as_of=as_of,
            transform=transform.value,
            fill=fill_policy.value,
            start_date=all_points[0].date if all_points else None,
            end_date=all_points[-1].date if all_points else None,
            point_count=len(window.items),
            total_points=window.total_items,
            page=window.page,
            page_size=window.page_size,
            total_pages=window.total_pages,
            has_more=window.has_more,
            points=[(p.date.isoformat(), p.value) for p in window.items],
            metadata={k: v for k, v in metadata.items() if v is not None},
        )
