"""Rendering helpers for notes output."""

from datetime import datetime
from typing import Iterable

from rich.table import Table

from pynotes.services.notes import Note, NotesViewState


def _fmt(dt: datetime) -> str:
    return dt.astimezone().strftime("%Y-%m-%d %H:%M")


def notes_table(notes: Iterable[Note], title: str = "Your Notes") -> Table:
    table = Table("ID", "Note", "Updated", "Created", title=title)
    for note in notes:
        table.add_row(note.id, note.text, _fmt(note.updated_at), _fmt(note.created_at))
    return table


def view_renderable(view: NotesViewState):
    """What `notes watch` shows for a given controller state."""
    if view.is_loading and not view.has_notes:
        return "[dim]Loading notes...[/dim]"
    if view.error_message and not view.has_notes:
        return f"[bold red]Error:[/bold red] {view.error_message}"
    if not view.has_notes:
        return "No notes yet. Add one with `pynotes notes add`."
    title = "Your Notes"
    if view.error_message:
        title += f" (stale: {view.error_message})"
    return notes_table(view.notes, title=title)
