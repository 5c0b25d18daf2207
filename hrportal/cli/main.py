"""Command-line entry point: run the login endpoint or log in against it."""

from __future__ import annotations

import typer

from .commands import auth, serve

app = typer.Typer(
    name="hrportal",
    help=(
        "HR tools portal login. 'serve' checks logins against the credential "
        "spreadsheet (GOOGLE_SHEETS_API_KEY, GOOGLE_SHEET_ID); 'auth' logs in "
        "to a running endpoint (HRPORTAL_URL) and keeps a 24-hour session."
    ),
    no_args_is_help=True,
)

app.add_typer(serve.app, name="serve")
app.add_typer(auth.app, name="auth")


def _print_version(value: bool) -> None:
    if value:
        from hrportal import __version__

        typer.echo(f"hrportal {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    show_version: bool = typer.Option(
        False,
        "--version",
        help="Print the hrportal version and exit.",
        callback=_print_version,
        is_eager=True,
    ),
) -> None:
    """Spreadsheet-backed login for the HR tools portal."""
    _ = show_version


@app.command()
def version() -> None:
    """Print the hrportal version."""
    _print_version(True)


if __name__ == "__main__":
    app()
