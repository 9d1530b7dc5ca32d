"""Public exports for Notes service data models."""

from __future__ import annotations

from .dto import Note
from .record import NoteRecord

__all__ = [
    "Note",
    "NoteRecord",
]
