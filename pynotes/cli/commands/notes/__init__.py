"""Notes commands for the pynotes CLI."""

import typer

from . import add, delete, edit, list_notes, watch

app = typer.Typer(help="Notes commands")
app.add_typer(list_notes.app, name="list")
app.add_typer(add.app, name="add")
app.add_typer(edit.app, name="edit")
app.add_typer(delete.app, name="delete")
app.add_typer(watch.app, name="watch")
