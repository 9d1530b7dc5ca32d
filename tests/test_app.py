"""End-to-end wiring of session and notes over in-memory collaborators."""

import unittest

from pynotes import NotesApp
from pynotes.services.auth import MemoryAuthBackend, SessionController
from pynotes.services.notes import MemoryNoteStore, NotesSyncController, SyncState
from tests.helpers import FakeClock, wait_for


class NotesAppTest(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.backend = MemoryAuthBackend()
        self.alice = self.backend.add_account("alice@example.com", "secret1")
        self.bob = self.backend.add_account("bob@example.com", "secret2")
        self.store = MemoryNoteStore(clock=FakeClock())
        await self.store.create_note("alice's note", self.alice.uid)
        await self.store.create_note("bob's note", self.bob.uid)
        self.app = NotesApp(
            SessionController(self.backend), NotesSyncController(self.store)
        )
        await self.app.start()

    async def asyncTearDown(self):
        await self.app.close()
        self.assertEqual(self.store.watcher_count(), 0)

    def _live_for(self, uid):
        notes = self.app.notes
        return notes.state is SyncState.LIVE and notes.owner_id == uid

    async def test_sign_in_starts_live_query(self):
        await self.app.session.sign_in("alice@example.com", "secret1")
        await wait_for(self.app.notes, lambda: self._live_for(self.alice.uid))
        self.assertEqual([n.text for n in self.app.notes.notes], ["alice's note"])

    async def test_sign_out_clears_notes(self):
        await self.app.session.sign_in("alice@example.com", "secret1")
        await wait_for(self.app.notes, lambda: self._live_for(self.alice.uid))
        await self.app.session.sign_out()
        await wait_for(self.app.notes, lambda: self.app.notes.state is SyncState.IDLE)
        self.assertEqual(self.app.notes.notes, ())
        self.assertFalse(self.app.notes.is_listening)

    async def test_next_user_sees_only_their_notes(self):
        await self.app.session.sign_in("alice@example.com", "secret1")
        await wait_for(self.app.notes, lambda: self._live_for(self.alice.uid))
        await self.app.session.sign_out()
        await wait_for(self.app.notes, lambda: self.app.notes.state is SyncState.IDLE)

        await self.app.session.sign_in("bob@example.com", "secret2")
        await wait_for(self.app.notes, lambda: self._live_for(self.bob.uid))
        self.assertEqual(
            {n.owner_id for n in self.app.notes.notes}, {self.bob.uid}
        )

    async def test_sign_out_clears_fetched_notes(self):
        await self.app.session.sign_in("alice@example.com", "secret1")
        await wait_for(self.app.notes, lambda: self._live_for(self.alice.uid))
        self.app.notes.clear()
        await self.app.notes.fetch_notes(self.alice.uid)
        self.assertIs(self.app.notes.state, SyncState.IDLE)
        self.assertTrue(self.app.notes.has_notes)

        await self.app.session.sign_out()
        await wait_for(self.app.notes, lambda: not self.app.notes.has_notes)
        self.assertIsNone(self.app.notes.owner_id)

    async def test_session_expiry_clears_notes(self):
        await self.app.session.sign_in("bob@example.com", "secret2")
        await wait_for(self.app.notes, lambda: self._live_for(self.bob.uid))
        self.backend.expire_session()
        await wait_for(self.app.notes, lambda: not self.app.notes.has_notes)
        self.assertIsNone(self.app.notes.owner_id)


if __name__ == "__main__":
    unittest.main()
