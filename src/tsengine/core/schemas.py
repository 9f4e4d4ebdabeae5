"""
Response envelope schemas.

Field names are a stable contract consumed by the routing layer; they are
serialized as-is (snake_case) in both the JSON body and the CLI output.

Envelope Conventions:
    - ``points`` holds only the requested page as ``[date_iso, value|null]``
    - ``start_date`` / ``end_date`` describe the full, unpaged sequence
    - ``metadata`` omits keys whose value is unknown
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field


class SeriesDataResponse(BaseModel):
    """Envelope returned for a data query."""

    series_id: str = Field(description="Series identifier")
    name: str = Field(description="Series display name")
    freq: str = Field(description="Resolved reporting frequency code (D/W/M/Q/A)")
    unit: str | None = Field(default=None, description="Unit of measure")
    as_of: date | None = Field(default=None, description="Historical as-of date, if requested")
    transform: str = Field(description="Applied transform code")
    fill: str = Field(description="Applied fill policy code")
    start_date: date | None = Field(default=None, description="First date of the full sequence")
    end_date: date | None = Field(default=None, description="Last date of the full sequence")
    point_count: int = Field(description="Number of points on this page")
    total_points: int = Field(description="Number of points across all pages")
    page: int = Field(description="1-based page number")
    page_size: int = Field(description="Requested page size")
    total_pages: int = Field(description="Total number of pages")
    has_more: bool = Field(description="True when later pages exist")
    points: list[tuple[str, float | None]] = Field(
        default_factory=list, description="Page of [date, value] pairs"
    )
    metadata: dict[str, Any] = Field(default_factory=dict, description="Series metadata, nulls dropped")


class SeriesResource(BaseModel):
    """Series metadata resource returned by ``describe_series``."""

    series_id: str
    name: str
    freq: str
    unit: str | None = None
    geography: str | None = None
    source: str | None = None
    is_adjusted: bool = False
    start_date: date | None = None
    end_date: date | None = None
    last_update: datetime | None = None


__all__ = ["SeriesDataResponse", "SeriesResource"]
