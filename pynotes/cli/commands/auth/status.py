"""Status command for the pynotes CLI."""

import asyncio

import typer
from rich.console import Console

from pynotes.cli.utils import auth

app = typer.Typer(help="Check authentication status")
console = Console()


async def _restore() -> bool:
    backend = auth.build_backend(auth.get_notes_config())
    return await auth.restore_session(backend)


@app.callback(invoke_without_command=True)
def main():
    """Check authentication status."""
    saved = auth.load_session()
    if not saved.get("refresh_token"):
        console.print("[yellow]Not logged in[/yellow]")
        return

    if asyncio.run(_restore()):
        console.print(
            f"[green]Logged in as:[/green] [bold]{saved.get('email') or saved.get('uid')}[/bold]"
        )
    else:
        console.print("[yellow]Session exists but authentication failed[/yellow]")
        console.print("Please log in again")
