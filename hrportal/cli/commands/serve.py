"""Serve command for the HR portal CLI."""

from __future__ import annotations

import typer
from rich.console import Console

from hrportal.cli.commands import configure_logging
from hrportal.config import Settings
from hrportal.exceptions import ConfigurationError

app = typer.Typer(help="Run the login endpoint")
console = Console()


@app.callback(invoke_without_command=True)
def serve(
    ctx: typer.Context,
    host: str = typer.Option(None, help="Interface to bind (default: HRPORTAL_HOST or 127.0.0.1)"),
    port: int = typer.Option(None, help="Port to listen on (default: HRPORTAL_PORT or 8787)"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
) -> None:
    """Start the login HTTP endpoint."""
    if ctx.invoked_subcommand is not None:
        return

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    configure_logging(log_level)

    from hrportal.server import serve as run_server

    try:
        run_server(settings, host=host, port=port)
    except OSError as e:
        console.print(f"[red]Could not start server: {e}[/red]")
        raise typer.Exit(1)
