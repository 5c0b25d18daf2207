"""Authentication commands for the HR portal CLI."""

from __future__ import annotations

from datetime import datetime, timezone

import typer
from rich.console import Console

from hrportal.client import PortalClient
from hrportal.exceptions import APIError, HRPortalError
from hrportal.session import clear_session, load_session, save_session

app = typer.Typer(help="Log in to the portal")
console = Console()


def _format_ms(value: float) -> str:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


@app.command()
def login(
    username: str = typer.Option(None, "--username", "-u", help="Login name"),
    password: str = typer.Option(None, "--password", "-p", help="Password (prompted if omitted)"),
    url: str = typer.Option(None, "--url", help="Login endpoint (default: HRPORTAL_URL)"),
) -> None:
    """Check credentials against the portal and start a session."""
    existing = load_session()
    if existing:
        user = existing.get("user") or {}
        console.print(f"[yellow]Already logged in as {user.get('username', 'unknown')}.[/yellow]")
        console.print("Run [bold]hrportal auth logout[/bold] first to switch users.")
        raise typer.Exit(1)

    if username is None:
        username = typer.prompt("Username")
    if password is None:
        password = typer.prompt("Password", hide_input=True)

    username = username.strip()
    if not username or not password:
        console.print("[red]Please enter both username and password[/red]")
        raise typer.Exit(1)

    console.print("[dim]Authenticating...[/dim]")

    try:
        with PortalClient(url) as client:
            result = client.validate_login(username, password)
    except APIError as e:
        console.print(f"\n[red]{e.message}[/red]")
        raise typer.Exit(1)
    except HRPortalError as e:
        console.print(f"\n[red]{e}. Please try again.[/red]")
        raise typer.Exit(1)

    if not result.get("success") or not isinstance(result.get("user"), dict):
        console.print(f"\n[red]{result.get('error') or 'Invalid credentials'}[/red]")
        raise typer.Exit(1)

    save_session(result["user"])
    console.print(f"\n[green]{result.get('message', 'Login successful')}[/green]")


@app.command()
def logout() -> None:
    """End the current session."""
    if clear_session():
        console.print("[green]Successfully logged out.[/green]")
    else:
        console.print("[yellow]No active session.[/yellow]")


@app.command()
def status() -> None:
    """Show the current session."""
    session = load_session()

    if not session:
        console.print("[yellow]Not logged in.[/yellow]")
        console.print("Run [bold]hrportal auth login[/bold] to log in.")
        raise typer.Exit(1)

    user = session.get("user") or {}
    console.print("[green]Logged in[/green]")
    console.print(f"  User: {user.get('username', 'unknown')}")
    if user.get("loginTime"):
        console.print(f"  Login time: {user['loginTime']}")
    console.print(f"  Expires: {_format_ms(session['expires'])}")
