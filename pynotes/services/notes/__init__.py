"""Public API for the Notes service."""

from .client import (
    FirestoreNotesClient,
    NoteNotFound,
    NotesApiError,
    NotesAuthError,
    NotesError,
    NotesRateLimited,
)
from .models import Note
from .remote import FirestoreNoteStore
from .store import MemoryNoteStore, NoteStore
from .subscription import Subscription
from .sync import NotesSyncController, NotesViewState, SyncState

__all__ = [
    "NotesSyncController",
    "NotesViewState",
    "SyncState",
    "Subscription",
    "Note",
    "NoteStore",
    "MemoryNoteStore",
    "FirestoreNoteStore",
    "FirestoreNotesClient",
    "NotesError",
    "NotesAuthError",
    "NotesRateLimited",
    "NotesApiError",
    "NoteNotFound",
]
