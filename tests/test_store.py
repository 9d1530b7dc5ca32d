"""Tests for the in-memory note store and its live queries."""

import unittest
from datetime import timedelta

from pynotes.services.notes import MemoryNoteStore, NoteNotFound
from pynotes.services.notes.store import next_update_time
from tests.helpers import T0, FakeClock


class MemoryNoteStoreTest(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.store = MemoryNoteStore(clock=self.clock)

    async def test_create_assigns_id_and_equal_timestamps(self):
        note_id = await self.store.create_note("Buy milk", "u1")
        note = await self.store.get_note(note_id)
        self.assertTrue(note_id)
        self.assertEqual(note.id, note_id)
        self.assertEqual(note.owner_id, "u1")
        self.assertEqual(note.created_at, T0)
        self.assertEqual(note.created_at, note.updated_at)

    async def test_list_is_scoped_and_newest_first(self):
        first = await self.store.create_note("first", "u1")
        self.clock.tick(seconds=1)
        second = await self.store.create_note("second", "u1")
        await self.store.create_note("other", "u2")
        notes = await self.store.list_notes("u1")
        self.assertEqual([n.id for n in notes], [second, first])

    async def test_update_keeps_created_and_bumps_updated(self):
        note_id = await self.store.create_note("draft", "u1")
        # clock has not moved: updatedAt must still increase
        await self.store.update_note(note_id, "final")
        note = await self.store.get_note(note_id)
        self.assertEqual(note.text, "final")
        self.assertEqual(note.created_at, T0)
        self.assertGreater(note.updated_at, note.created_at)
        self.assertEqual(note.owner_id, "u1")

    async def test_missing_notes_raise(self):
        with self.assertRaises(NoteNotFound):
            await self.store.get_note("nope")
        with self.assertRaises(NoteNotFound):
            await self.store.update_note("nope", "x")
        with self.assertRaises(NoteNotFound):
            await self.store.delete_note("nope")

    async def test_watch_yields_current_then_changes(self):
        await self.store.create_note("existing", "u1")
        stream = self.store.watch("u1")
        initial = await stream.__anext__()
        self.assertEqual([n.text for n in initial], ["existing"])
        self.assertEqual(self.store.watcher_count("u1"), 1)

        self.clock.tick(seconds=1)
        await self.store.create_note("new", "u1")
        changed = await stream.__anext__()
        self.assertEqual([n.text for n in changed], ["new", "existing"])

        await stream.aclose()
        self.assertEqual(self.store.watcher_count(), 0)

    async def test_watch_ignores_other_owners(self):
        stream = self.store.watch("u1")
        self.assertEqual(await stream.__anext__(), [])
        await self.store.create_note("not yours", "u2")
        note_id = await self.store.create_note("yours", "u1")
        snapshot = await stream.__anext__()
        self.assertEqual([n.id for n in snapshot], [note_id])
        await stream.aclose()


class NextUpdateTimeTest(unittest.TestCase):
    def test_uses_clock_when_it_moved(self):
        later = T0 + timedelta(seconds=3)
        self.assertEqual(next_update_time(T0, later), later)

    def test_forces_strict_increase(self):
        self.assertEqual(next_update_time(T0, T0), T0 + timedelta(milliseconds=1))
        self.assertEqual(
            next_update_time(T0, T0 - timedelta(hours=1)),
            T0 + timedelta(milliseconds=1),
        )


if __name__ == "__main__":
    unittest.main()
