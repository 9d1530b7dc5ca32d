#!/usr/bin/env python
"""Command line interface for pynotes."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from pynotes.cli.commands import auth, notes

app = typer.Typer(help="Personal notes synchronized with Firebase")
console = Console()

# Add command groups
app.add_typer(auth.app, name="auth")
app.add_typer(notes.app, name="notes")


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logs"),
):
    """Manage your notes from the terminal."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
