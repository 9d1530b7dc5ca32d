"""Watch command: live view of your notes."""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.live import Live

from pynotes.app import NotesApp
from pynotes.cli.utils import auth
from pynotes.cli.utils.render import view_renderable
from pynotes.services.auth import SessionController
from pynotes.services.notes import NotesSyncController

app = typer.Typer(help="Show your notes and keep them up to date")
console = Console()


async def _watch(duration: Optional[float]) -> None:
    backend = await auth.get_signed_in_backend()
    notes = NotesSyncController(auth.build_store(auth.get_notes_config(), backend))
    async with NotesApp(SessionController(backend), notes):
        with Live(view_renderable(notes.view), console=console) as live:
            notes.add_listener(lambda: live.update(view_renderable(notes.view)))
            if duration is None:
                await asyncio.Event().wait()
            else:
                await asyncio.sleep(duration)


@app.callback(invoke_without_command=True)
def main(
    duration: Optional[float] = typer.Option(
        None, help="Stop after this many seconds (default: until Ctrl+C)"
    ),
):
    """Watch notes live."""
    try:
        asyncio.run(_watch(duration))
    except KeyboardInterrupt:
        console.print("Stopped")
