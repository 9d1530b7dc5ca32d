"""Sign-up command for the pynotes CLI."""

import asyncio
from typing import Optional

import typer
from rich.console import Console

from pynotes.cli.utils import auth

app = typer.Typer(help="Create an account")
console = Console()


async def _sign_up(username: Optional[str], password: Optional[str]) -> str:
    backend = auth.build_backend(auth.get_notes_config())
    user = await auth.sign_up(backend, username, password)
    return user.email if user else ""


@app.callback(invoke_without_command=True)
def main(
    username: Optional[str] = typer.Option(None, help="Account email"),
    password: Optional[str] = typer.Option(None, help="Account password"),
):
    """Create an account and sign in."""
    email = asyncio.run(_sign_up(username, password))
    console.print(f"Account created. Logged in as [bold]{email}[/bold]")
