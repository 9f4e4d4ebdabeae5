"""
Root Typer application for the tsengine CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from tsengine import __version__

app = Typer(
    name="tsengine",
    help="tsengine - point-in-time time-series queries.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tsengine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """tsengine CLI - query series, inspect metadata, manage the database."""


# ── Sub-command registration ─────────────────────────────────────────────

from tsengine.cli.db import app as db_app  # noqa: E402
from tsengine.cli.query import describe, query  # noqa: E402

app.command()(query)
app.command()(describe)
app.add_typer(db_app, name="db", help="Database operations.")


if __name__ == "__main__":
    app()
