"""Edit command for notes."""

import asyncio

import typer
from rich.console import Console

from pynotes.cli.utils import auth
from pynotes.result import Result
from pynotes.services.notes import NotesSyncController

app = typer.Typer(help="Replace the text of a note")
console = Console()


async def _edit(note_id: str, text: str) -> Result:
    backend = await auth.get_signed_in_backend()
    user = backend.current_user
    store = auth.build_store(auth.get_notes_config(), backend)
    async with NotesSyncController(store) as notes:
        return await notes.update_note(note_id, text, user.uid)


@app.callback(invoke_without_command=True)
def main(
    note_id: str = typer.Argument(..., help="ID of the note"),
    text: str = typer.Argument(..., help="New note text"),
):
    """Update a note."""
    result = asyncio.run(_edit(note_id, text))
    if not result:
        console.print(f"[bold red]Error:[/bold red] {result.message}")
        raise typer.Exit(1)
    console.print("[green]Note updated successfully![/green]")
