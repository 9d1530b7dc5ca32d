"""High-level Notes data transfer objects."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from .record import NoteRecord


def _normalize(dt: datetime) -> datetime:
    # UTC, millisecond precision: the store keeps nothing finer
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


@dataclass(frozen=True)
class Note:
    """A single note owned by one user.

    ``id`` is empty until the store assigns one on creation.
    """

    id: str
    text: str
    created_at: datetime
    updated_at: datetime
    owner_id: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "created_at", _normalize(self.created_at))
        object.__setattr__(self, "updated_at", _normalize(self.updated_at))
        if self.updated_at < self.created_at:
            raise ValueError(
                f"Note {self.id!r}: updated_at {self.updated_at} precedes "
                f"created_at {self.created_at}"
            )

    def to_wire(self) -> Dict[str, Any]:
        """Encode to the persisted record (the id is not part of it)."""
        return NoteRecord(
            text=self.text,
            user_id=self.owner_id,
            created_at=self.created_at,
            updated_at=self.updated_at,
        ).to_wire()

    @classmethod
    def from_wire(cls, data: Mapping[str, Any], note_id: str) -> "Note":
        """Decode a persisted record stored under ``note_id``."""
        record = NoteRecord.model_validate(dict(data))
        return cls(
            id=note_id,
            text=record.text,
            created_at=record.created_at,
            updated_at=record.updated_at,
            owner_id=record.user_id,
        )
