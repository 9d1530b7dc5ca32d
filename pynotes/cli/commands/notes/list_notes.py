"""List command for notes."""

import asyncio
from typing import Tuple

import typer
from rich.console import Console

from pynotes.cli.utils import auth
from pynotes.cli.utils.render import notes_table
from pynotes.result import Result
from pynotes.services.notes import NotesSyncController, NotesViewState

app = typer.Typer(help="List your notes, newest first")
console = Console()


async def _fetch() -> Tuple[Result, NotesViewState]:
    backend = await auth.get_signed_in_backend()
    user = backend.current_user
    store = auth.build_store(auth.get_notes_config(), backend)
    async with NotesSyncController(store) as notes:
        result = await notes.fetch_notes(user.uid)
        return result, notes.view


@app.callback(invoke_without_command=True)
def main():
    """List all notes."""
    result, view = asyncio.run(_fetch())
    if not result:
        console.print(f"[bold red]Error:[/bold red] {result.message}")
        raise typer.Exit(1)
    if not view.has_notes:
        console.print("No notes found")
        return
    console.print(notes_table(view.notes))
