"""
CLI utility helpers: consoles, store opening, error output.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console

from tsengine.core.errors import SeriesEngineError
from tsengine.core.logging import configure_logging
from tsengine.core.settings import EngineSettings, get_settings
from tsengine.stores.sqlite import SqliteSeriesStore

console = Console()
err_console = Console(stderr=True)


def setup(database: str | None = None) -> tuple[EngineSettings, SqliteSeriesStore]:
    """Configure logging from settings and open the SQLite store.

    ``database`` overrides ``TSENGINE_DATABASE_PATH``.
    """
    settings = get_settings()
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_format == "json",
        service=settings.service_name,
    )
    return settings, open_store(database or str(settings.database_path))


def open_store(database: str) -> SqliteSeriesStore:
    """Open the SQLite store, creating the parent directory of a file path."""
    if database == ":memory:":
        return SqliteSeriesStore.open(database)
    path = Path(database).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return SqliteSeriesStore.open(str(path))


def fail(error: SeriesEngineError) -> NoReturn:
    """Print an engine error to stderr and exit non-zero."""
    err_console.print(f"[bold red]Error[/bold red] ({error.category.value}): {error.message}")
    err_console.print_json(json.dumps(error.to_dict(), default=str))
    raise typer.Exit(code=1)


def print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {v}")
