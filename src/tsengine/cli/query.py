"""
CLI: ``tsengine query`` and ``tsengine describe``.
"""

from __future__ import annotations

import json
from datetime import datetime

import typer

from tsengine.cli.utils import console, err_console, fail, print_dict, setup
from tsengine.core.enums import OutputFormat
from tsengine.core.errors import SeriesEngineError
from tsengine.engine.fingerprint import matches_validator
from tsengine.engine.orchestrator import QueryOrchestrator
from tsengine.engine.params import parse_format
from tsengine.engine.render import render

_DATE_FORMATS = ["%Y-%m-%d"]


def query(
    series_id: str = typer.Argument(..., help="Series identifier, e.g. US.CPI.M"),
    start: datetime | None = typer.Option(None, "--start", formats=_DATE_FORMATS, help="First date (inclusive)"),
    end: datetime | None = typer.Option(None, "--end", formats=_DATE_FORMATS, help="Last date (inclusive)"),
    as_of: datetime | None = typer.Option(None, "--as-of", formats=_DATE_FORMATS, help="As known at end of day (UTC)"),
    freq: str = typer.Option("native", "--freq", "-f", help="native, D, W, M, Q or A"),
    transform: str = typer.Option("as_is", "--transform", "-t", help="as_is, diff, pct_change, mom, yoy, ytd"),
    fill: str = typer.Option("none", "--fill", help="none, ffill or bfill"),
    page: int = typer.Option(1, "--page", help="1-based page number"),
    page_size: int | None = typer.Option(None, "--page-size", help="Points per page"),
    fmt: str = typer.Option("json", "--format", help="json or csv"),
    if_none_match: str | None = typer.Option(None, "--if-none-match", help="Skip the body when the fingerprint matches"),
    database: str | None = typer.Option(None, "--database", "-d", help="Database path"),
) -> None:
    """Query one series and print the result."""
    settings, store = setup(database)
    try:
        output_format = parse_format(fmt)
        result = QueryOrchestrator(store, store, settings=settings).get_data(
            series_id,
            start=start.date() if start else None,
            end=end.date() if end else None,
            as_of=as_of.date() if as_of else None,
            frequency=freq,
            transform=transform,
            fill_policy=fill,
            page=page,
            page_size=page_size,
        )
    except SeriesEngineError as e:
        fail(e)
    finally:
        store.close()

    if matches_validator(result.fingerprint, if_none_match):
        err_console.print(f"[dim]Not modified ({result.fingerprint})[/dim]")
        return

    body, _media_type = render(result, output_format)
    if output_format is OutputFormat.CSV:
        typer.echo(body, nl=False)
    else:
        console.print_json(body)


def describe(
    series_id: str = typer.Argument(..., help="Series identifier"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
    database: str | None = typer.Option(None, "--database", "-d", help="Database path"),
) -> None:
    """Show series metadata."""
    settings, store = setup(database)
    try:
        resource = QueryOrchestrator(store, store, settings=settings).describe_series(series_id)
    except SeriesEngineError as e:
        fail(e)
    finally:
        store.close()

    if json_out:
        console.print_json(resource.model_dump_json())
        return
    print_dict(json.loads(resource.model_dump_json()), title=f"Series {series_id}")
