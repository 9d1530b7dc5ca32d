"""Delete command for notes."""

import asyncio

import typer
from rich.console import Console

from pynotes.cli.utils import auth
from pynotes.result import Result
from pynotes.services.notes import NotesSyncController

app = typer.Typer(help="Delete a note")
console = Console()


async def _delete(note_id: str) -> Result:
    backend = await auth.get_signed_in_backend()
    user = backend.current_user
    store = auth.build_store(auth.get_notes_config(), backend)
    async with NotesSyncController(store) as notes:
        return await notes.delete_note(note_id, user.uid)


@app.callback(invoke_without_command=True)
def main(
    note_id: str = typer.Argument(..., help="ID of the note"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Delete a note."""
    if not yes and not typer.confirm("Are you sure you want to delete this note?"):
        console.print("Cancelled")
        return
    result = asyncio.run(_delete(note_id))
    if not result:
        console.print(f"[bold red]Error:[/bold red] {result.message}")
        raise typer.Exit(1)
    console.print("[green]Note deleted successfully![/green]")
