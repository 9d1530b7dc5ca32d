"""Login command for the pynotes CLI."""

import asyncio
from typing import Optional

import typer
from rich.console import Console

from pynotes.cli.utils import auth

app = typer.Typer(help="Sign in with email and password")
console = Console()


async def _login(username: Optional[str], password: Optional[str]) -> str:
    backend = auth.build_backend(auth.get_notes_config())
    user = await auth.login(backend, username, password)
    return user.email if user else ""


@app.callback(invoke_without_command=True)
def main(
    username: Optional[str] = typer.Option(None, help="Account email"),
    password: Optional[str] = typer.Option(None, help="Account password"),
    save_config: bool = typer.Option(
        False, help="Save the email to the config file"
    ),
):
    """Sign in."""
    email = asyncio.run(_login(username, password))

    if save_config and email:
        config = auth.load_config()
        config["username"] = email
        auth.save_config(config)

    console.print(f"Successfully logged in as [bold]{email}[/bold]")
