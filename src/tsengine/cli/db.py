"""
CLI: ``tsengine db`` - database management commands.
"""

from __future__ import annotations

import typer

from tsengine.cli.utils import console, setup

app = typer.Typer(no_args_is_help=True)


@app.command()
def init(
    database: str | None = typer.Option(None, "--database", "-d", help="Database path"),
) -> None:
    """Initialise database schema (create tables)."""
    settings, store = setup(database)
    try:
        store.initialize()
    finally:
        store.close()
    console.print(f"[green]Schema ready[/green] at {database or settings.database_path}")
