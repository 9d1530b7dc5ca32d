"""
Firestore-backed NoteStore.

Blocking REST calls run in worker threads. The live query polls runQuery and
emits a snapshot only when the ordered result set changed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, List, Optional

from pydantic import ValidationError

from .client import FirestoreNotesClient, NotesApiError
from .models import Note
from .models.firestore import FSDocument, encode_fields, owner_query
from .models.record import to_millis
from .store import Clock, next_update_time, utc_now

LOGGER = logging.getLogger(__name__)


def _note_from_document(doc: FSDocument) -> Note:
    try:
        return Note.from_wire(doc.to_python(), doc.document_id)
    except (ValidationError, ValueError) as exc:
        LOGGER.error("Malformed note document %s: %s", doc.name, exc)
        raise NotesApiError(f"Malformed note document: {doc.document_id}") from exc


class FirestoreNoteStore:
    """NoteStore over the Firestore REST API."""

    def __init__(
        self,
        client: FirestoreNotesClient,
        *,
        poll_interval: float = 2.0,
        clock: Clock = utc_now,
    ):
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self._client = client
        self._poll_interval = poll_interval
        self._clock = clock

    @property
    def raw(self) -> FirestoreNotesClient:
        """Escape hatch to the underlying REST client."""
        return self._client

    async def create_note(self, text: str, owner_id: str) -> str:
        now = self._clock()
        record = Note(
            id="", text=text, created_at=now, updated_at=now, owner_id=owner_id
        ).to_wire()
        doc = await asyncio.to_thread(self._client.create, encode_fields(record))
        LOGGER.info("Created note %s", doc.document_id)
        return doc.document_id

    async def get_note(self, note_id: str) -> Note:
        doc = await asyncio.to_thread(self._client.get, note_id)
        return _note_from_document(doc)

    async def update_note(self, note_id: str, text: str) -> None:
        current = await self.get_note(note_id)
        updated_at = next_update_time(current.updated_at, self._clock())
        await asyncio.to_thread(
            self._client.patch,
            note_id,
            encode_fields({"text": text, "updatedAt": to_millis(updated_at)}),
        )
        LOGGER.info("Updated note %s", note_id)

    async def delete_note(self, note_id: str) -> None:
        await asyncio.to_thread(self._client.delete, note_id)
        LOGGER.info("Deleted note %s", note_id)

    async def list_notes(self, owner_id: str) -> List[Note]:
        docs = await asyncio.to_thread(
            self._client.run_query, owner_query(self._client.collection, owner_id)
        )
        return [_note_from_document(doc) for doc in docs]

    async def watch(self, owner_id: str) -> AsyncIterator[List[Note]]:
        last: Optional[List[Note]] = None
        LOGGER.debug(
            "Polling live query for owner %s every %.2fs", owner_id, self._poll_interval
        )
        while True:
            notes = await self.list_notes(owner_id)
            if notes != last:
                last = notes
                yield list(notes)
            await asyncio.sleep(self._poll_interval)
