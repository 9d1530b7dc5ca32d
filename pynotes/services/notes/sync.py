"""
Notes synchronization controller.

Owns the current view of one user's notes and the single live query that
feeds it:

  IDLE --start_listening--> LOADING --snapshot--> LIVE
  LOADING/LIVE --stream error--> ERROR --start_listening--> LOADING
  any --clear()--> IDLE

CRUD intents go straight to the store and never touch the view; the next
snapshot of the live query reflects them. The view is ordered by updatedAt
descending as delivered by the store, ties unspecified.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Set, Tuple

from pynotes.events import ChangeNotifier
from pynotes.exceptions import EmptyNoteError, NoteError, StoreFailureError
from pynotes.result import Result
from pynotes.validators import validate_note_text

from .models import Note
from .store import NoteStore
from .subscription import Subscription

LOGGER = logging.getLogger(__name__)


class SyncState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LIVE = "live"
    ERROR = "error"


@dataclass(frozen=True)
class NotesViewState:
    """Read-only snapshot handed to presentation."""

    notes: Tuple[Note, ...] = ()
    state: SyncState = SyncState.IDLE
    is_loading: bool = False
    error_message: str = ""
    owner_id: Optional[str] = None

    @property
    def has_notes(self) -> bool:
        return bool(self.notes)


class NotesSyncController(ChangeNotifier):
    """
    Keeps an in-memory view of one owner's notes in step with the store.

    Listeners registered with ``add_listener`` fire after every observable
    change; read ``view`` (or the individual properties) from the callback.
    """

    def __init__(self, store: NoteStore):
        super().__init__()
        self._store = store
        self._notes: Tuple[Note, ...] = ()
        self._state = SyncState.IDLE
        self._is_loading = False
        self._error: Optional[NoteError] = None
        self._owner_id: Optional[str] = None
        self._subscription: Optional[Subscription] = None
        # canceled by clear() and possibly still shutting down
        self._stopping: Set[Subscription] = set()
        self._lock = asyncio.Lock()
        self._closed = False

    async def __aenter__(self) -> "NotesSyncController":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ----------------------------- Read side ---------------------------------

    @property
    def notes(self) -> Tuple[Note, ...]:
        return self._notes

    @property
    def has_notes(self) -> bool:
        return bool(self._notes)

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> Optional[NoteError]:
        return self._error

    @property
    def error_message(self) -> str:
        return str(self._error) if self._error is not None else ""

    @property
    def owner_id(self) -> Optional[str]:
        return self._owner_id

    @property
    def is_listening(self) -> bool:
        return self._subscription is not None and self._subscription.active

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def view(self) -> NotesViewState:
        return NotesViewState(
            notes=self._notes,
            state=self._state,
            is_loading=self._is_loading,
            error_message=self.error_message,
            owner_id=self._owner_id,
        )

    # ---------------------------- Subscription -------------------------------

    async def start_listening(self, owner_id: str) -> None:
        """
        Replace the live query with one for ``owner_id``.

        Calls are serialized. The old subscription is canceled and the new one
        installed without yielding to the event loop in between; the call then
        waits for the old stream to shut down. It does not wait for the first
        snapshot.
        """
        if not owner_id:
            raise ValueError("owner_id must be a non-empty string")
        async with self._lock:
            if self._closed:
                raise RuntimeError("NotesSyncController is closed")
            previous = self._subscription
            if previous is not None:
                previous.cancel()
            if owner_id != self._owner_id:
                self._notes = ()
            self._owner_id = owner_id
            self._state = SyncState.LOADING
            self._is_loading = True
            self._error = None
            try:
                stream = self._store.watch(owner_id)
            except Exception as exc:
                self._subscription = None
                self._state = SyncState.ERROR
                self._is_loading = False
                self._error = StoreFailureError(f"Failed to load notes: {exc}", exc)
                LOGGER.warning("Could not open live query for %s: %s", owner_id, exc)
            else:
                self._subscription = Subscription(
                    owner_id, stream, self._on_snapshot, self._on_error
                )
                LOGGER.info("Listening to notes of %s", owner_id)
            self.notify_listeners()
            if previous is not None:
                await previous.wait_closed()

    def _on_snapshot(self, subscription: Subscription, notes: List[Note]) -> None:
        if subscription is not self._subscription or subscription.canceled:
            LOGGER.debug("Discarding snapshot from stale %r", subscription)
            return
        self._notes = tuple(notes)
        self._state = SyncState.LIVE
        self._is_loading = False
        self._error = None
        LOGGER.debug("Snapshot for %s: %d notes", subscription.owner_id, len(notes))
        self.notify_listeners()

    def _on_error(self, subscription: Subscription, exc: Exception) -> None:
        if subscription is not self._subscription or subscription.canceled:
            LOGGER.debug("Discarding error from stale %r: %s", subscription, exc)
            return
        self._subscription = None
        self._retire(subscription)
        self._state = SyncState.ERROR
        self._is_loading = False
        self._error = StoreFailureError(f"Failed to load notes: {exc}", exc)
        LOGGER.warning("Live query for %s failed: %s", subscription.owner_id, exc)
        self.notify_listeners()

    def clear(self) -> None:
        """Cancel the live query and reset to an empty IDLE view."""
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.cancel()
            self._retire(subscription)
        self._notes = ()
        self._state = SyncState.IDLE
        self._is_loading = False
        self._error = None
        self._owner_id = None
        LOGGER.debug("Notes view cleared")
        self.notify_listeners()

    def _retire(self, subscription: Subscription) -> None:
        # close() waits for these to finish shutting down
        self._stopping = {s for s in self._stopping if not s.done}
        self._stopping.add(subscription)

    def clear_error(self) -> None:
        if self._error is None:
            return
        self._error = None
        self.notify_listeners()

    async def close(self) -> None:
        """Clear and wait for the live query task to finish. Idempotent."""
        if self._closed:
            return
        self.clear()
        self._closed = True
        stopping, self._stopping = self._stopping, set()
        for subscription in stopping:
            await subscription.wait_closed()

    # ------------------------------ Intents ----------------------------------

    async def fetch_notes(self, owner_id: str) -> Result:
        """One-shot load for when a live query is not wanted or available."""
        self._is_loading = True
        self._error = None
        self.notify_listeners()
        try:
            notes = await self._store.list_notes(owner_id)
        except Exception as exc:
            self._is_loading = False
            return self._fail(StoreFailureError(f"Failed to fetch notes: {exc}", exc))
        self._is_loading = False
        if self._subscription is not None and self._subscription.owner_id != owner_id:
            LOGGER.warning(
                "Ignoring fetched notes of %s while listening to %s",
                owner_id,
                self._subscription.owner_id,
            )
            self.notify_listeners()
            return Result.success()
        self._owner_id = owner_id
        self._notes = tuple(notes)
        self.notify_listeners()
        return Result.success()

    async def add_note(self, text: str, owner_id: str) -> Result:
        invalid = validate_note_text(text)
        if invalid:
            return self._fail(EmptyNoteError(invalid))
        self.clear_error()
        try:
            note_id = await self._store.create_note(text, owner_id)
        except Exception as exc:
            return self._fail(StoreFailureError(f"Failed to add note: {exc}", exc))
        LOGGER.info("Added note %s for %s", note_id, owner_id)
        return Result.success()

    async def update_note(self, note_id: str, text: str, owner_id: str) -> Result:
        invalid = validate_note_text(text)
        if invalid:
            return self._fail(EmptyNoteError(invalid))
        self.clear_error()
        try:
            await self._store.update_note(note_id, text)
        except Exception as exc:
            return self._fail(StoreFailureError(f"Failed to update note: {exc}", exc))
        LOGGER.info("Updated note %s for %s", note_id, owner_id)
        return Result.success()

    async def delete_note(self, note_id: str, owner_id: str) -> Result:
        self.clear_error()
        try:
            await self._store.delete_note(note_id)
        except Exception as exc:
            return self._fail(StoreFailureError(f"Failed to delete note: {exc}", exc))
        LOGGER.info("Deleted note %s for %s", note_id, owner_id)
        return Result.success()

    def _fail(self, error: NoteError) -> Result:
        self._error = error
        LOGGER.warning("%s", error)
        self.notify_listeners()
        return Result.failure(error)
