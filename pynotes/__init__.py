"""Personal notes client synchronized with Firebase."""

from pynotes.app import NotesApp
from pynotes.config import NotesConfig
from pynotes.services.auth import SessionController, User
from pynotes.services.notes import Note, NotesSyncController

__version__ = "0.1.0"

__all__ = [
    "NotesApp",
    "NotesConfig",
    "Note",
    "NotesSyncController",
    "SessionController",
    "User",
]
