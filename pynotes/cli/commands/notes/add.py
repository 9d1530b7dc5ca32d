"""Add command for notes."""

import asyncio

import typer
from rich.console import Console

from pynotes.cli.utils import auth
from pynotes.result import Result
from pynotes.services.notes import NotesSyncController

app = typer.Typer(help="Add a note")
console = Console()


async def _add(text: str) -> Result:
    backend = await auth.get_signed_in_backend()
    user = backend.current_user
    store = auth.build_store(auth.get_notes_config(), backend)
    async with NotesSyncController(store) as notes:
        return await notes.add_note(text, user.uid)


@app.callback(invoke_without_command=True)
def main(text: str = typer.Argument(..., help="Note text")):
    """Add a new note."""
    result = asyncio.run(_add(text))
    if not result:
        console.print(f"[bold red]Error:[/bold red] {result.message}")
        raise typer.Exit(1)
    console.print("[green]Note added successfully![/green]")
