"""tsengine command-line interface (typer + rich)."""
