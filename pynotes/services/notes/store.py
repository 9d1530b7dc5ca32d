"""
The store collaborator consumed by the sync controller.

NoteStore is the seam; MemoryNoteStore is an in-process implementation with
real live queries (tests, local runs). FirestoreNoteStore lives in
``remote.py``.

Live queries yield complete snapshots ordered by updatedAt descending. Ties
keep the store's natural order, which callers must treat as unspecified.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Callable, Dict, List, Optional, Protocol

from pynotes.events import Broadcast

from .client import NoteNotFound
from .models import Note

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def next_update_time(previous: datetime, now: datetime) -> datetime:
    """``now`` unless the clock has not moved past ``previous`` (ms precision)."""
    floor = previous + timedelta(milliseconds=1)
    return now if now >= floor else floor


class NoteStore(Protocol):
    """Asynchronous note store scoped by owner id."""

    async def create_note(self, text: str, owner_id: str) -> str:
        """Create a note; the store assigns id and both timestamps."""
        ...

    async def get_note(self, note_id: str) -> Note: ...

    async def update_note(self, note_id: str, text: str) -> None:
        """Replace text and bump updatedAt. createdAt and owner are kept."""
        ...

    async def delete_note(self, note_id: str) -> None: ...

    async def list_notes(self, owner_id: str) -> List[Note]: ...

    def watch(self, owner_id: str) -> AsyncIterator[List[Note]]:
        """Live query: the current result set, then one snapshot per change."""
        ...


class MemoryNoteStore:
    """In-memory NoteStore holding records in their persisted layout."""

    def __init__(
        self,
        *,
        clock: Clock = utc_now,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._clock = clock
        self._new_id = id_factory or (lambda: uuid.uuid4().hex[:20])
        # insertion order is the tie-break for equal updatedAt
        self._records: Dict[str, Dict] = {}
        self._feeds: Dict[str, Broadcast[List[Note]]] = {}

    def watcher_count(self, owner_id: Optional[str] = None) -> int:
        """Number of open live queries, optionally for one owner."""
        if owner_id is not None:
            feed = self._feeds.get(owner_id)
            return feed.subscriber_count if feed else 0
        return sum(feed.subscriber_count for feed in self._feeds.values())

    async def create_note(self, text: str, owner_id: str) -> str:
        now = self._clock()
        note_id = self._new_id()
        note = Note(
            id=note_id, text=text, created_at=now, updated_at=now, owner_id=owner_id
        )
        self._records[note_id] = note.to_wire()
        LOGGER.debug("Created note %s for owner %s", note_id, owner_id)
        self._publish(owner_id)
        return note_id

    async def get_note(self, note_id: str) -> Note:
        record = self._records.get(note_id)
        if record is None:
            raise NoteNotFound(f"Note not found: {note_id}")
        return Note.from_wire(record, note_id)

    async def update_note(self, note_id: str, text: str) -> None:
        current = await self.get_note(note_id)
        updated = replace(
            current,
            text=text,
            updated_at=next_update_time(current.updated_at, self._clock()),
        )
        self._records[note_id] = updated.to_wire()
        LOGGER.debug("Updated note %s", note_id)
        self._publish(current.owner_id)

    async def delete_note(self, note_id: str) -> None:
        record = self._records.pop(note_id, None)
        if record is None:
            raise NoteNotFound(f"Note not found: {note_id}")
        LOGGER.debug("Deleted note %s", note_id)
        self._publish(record["userId"])

    async def list_notes(self, owner_id: str) -> List[Note]:
        return self._query(owner_id)

    async def watch(self, owner_id: str) -> AsyncIterator[List[Note]]:
        feed = self._feeds.setdefault(owner_id, Broadcast())
        receiver = feed.subscribe()
        LOGGER.debug("Live query opened for owner %s", owner_id)
        try:
            yield self._query(owner_id)
            async for snapshot in receiver:
                yield snapshot
        finally:
            receiver.close()
            if feed.subscriber_count == 0 and self._feeds.get(owner_id) is feed:
                del self._feeds[owner_id]
            LOGGER.debug("Live query closed for owner %s", owner_id)

    def _query(self, owner_id: str) -> List[Note]:
        notes = [
            Note.from_wire(record, note_id)
            for note_id, record in self._records.items()
            if record["userId"] == owner_id
        ]
        # sorted() is stable, so ties keep insertion order
        return sorted(notes, key=lambda n: n.updated_at, reverse=True)

    def _publish(self, owner_id: str) -> None:
        feed = self._feeds.get(owner_id)
        if feed is not None:
            feed.publish(self._query(owner_id))
