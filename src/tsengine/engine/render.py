"""Alternate serializations of a query result.

Both formats carry the requested page only: JSON renders the envelope and
CSV renders the envelope's ``points`` as ``date,value`` rows, with missing
values left empty. ``QueryResult.all_points`` stays available to callers
that need the unpaged sequence.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable

from tsengine.core.enums import OutputFormat
from tsengine.core.models import QueryResult

CSV_MEDIA_TYPE = "text/csv"
JSON_MEDIA_TYPE = "application/json"


def render_csv(points: Iterable[tuple[str, float | None]]) -> str:
    """``date,value`` header plus one row per ``(date_iso, value)`` pair."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["date", "value"])
    for day, value in points:
        writer.writerow([day, "" if value is None else repr(float(value))])
    return buffer.getvalue()


def render_json(result: QueryResult, *, indent: int | None = None) -> str:
    return result.envelope.model_dump_json(indent=indent)


def render(result: QueryResult, fmt: OutputFormat) -> tuple[str, str]:
    """Return ``(body, media_type)`` for ``fmt``."""
    if fmt is OutputFormat.CSV:
        return render_csv(result.envelope.points), CSV_MEDIA_TYPE
    return render_json(result), JSON_MEDIA_TYPE
