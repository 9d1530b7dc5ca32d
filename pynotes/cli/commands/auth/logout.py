"""Logout command for the pynotes CLI."""

import os

import typer
from rich.console import Console

from pynotes.cli.utils import auth
from pynotes.config import get_config_path

app = typer.Typer(help="Sign out")
console = Console()


@app.callback(invoke_without_command=True)
def main(
    remove_all: bool = typer.Option(
        False, help="Remove the session and the configuration file"
    ),
):
    """Remove the saved session and credentials."""
    try:
        username = auth.load_session().get("email")
        auth.remove_session_files(username)

        config_path = get_config_path()
        if remove_all and os.path.exists(config_path):
            os.remove(config_path)
            console.print("Removed all configuration files")

        console.print("[green]Logged out successfully[/green]")
    except OSError as exc:
        console.print(
            f"[bold red]Error:[/bold red] Could not completely remove session data: {exc}"
        )
        raise typer.Exit(1) from exc
