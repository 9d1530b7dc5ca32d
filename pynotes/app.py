"""
Wires the session controller to the notes controller.

Signing in starts the live query for that user; signing out (or losing the
session) clears the view so nothing from the previous user stays in memory.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from pynotes.events import Receiver
from pynotes.services.auth import SessionController, User
from pynotes.services.notes import NotesSyncController

LOGGER = logging.getLogger(__name__)


class NotesApp:
    """Owns both controllers and their lifecycle."""

    def __init__(self, session: SessionController, notes: NotesSyncController):
        self.session = session
        self.notes = notes
        self._receiver: Optional[Receiver[Optional[User]]] = None
        self._task: Optional[asyncio.Task] = None

    async def __aenter__(self) -> "NotesApp":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def start(self) -> None:
        if self._task is not None:
            return
        # subscribe before reading current_user so no transition is missed
        self._receiver = self.session.changes.subscribe()
        await self.session.start()
        await self._on_user(self.session.current_user)
        self._task = asyncio.get_running_loop().create_task(
            self._follow(self._receiver), name="notes-app-session"
        )

    async def close(self) -> None:
        task, self._task = self._task, None
        if self._receiver is not None:
            self._receiver.close()
            self._receiver = None
        if task is not None:
            task.cancel()
            await asyncio.wait({task})
        await self.notes.close()
        await self.session.close()

    async def _follow(self, receiver: Receiver[Optional[User]]) -> None:
        async for user in receiver:
            await self._on_user(user)

    async def _on_user(self, user: Optional[User]) -> None:
        if user is None:
            # a one-shot fetch leaves notes in memory while IDLE
            LOGGER.debug("Session ended, clearing notes")
            self.notes.clear()
            return
        if self.notes.owner_id == user.uid and self.notes.is_listening:
            return
        await self.notes.start_listening(user.uid)
