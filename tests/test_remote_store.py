"""Tests for FirestoreNoteStore over a mocked REST client."""

import unittest
from unittest.mock import MagicMock

from pynotes.services.notes import FirestoreNoteStore, NotesApiError
from pynotes.services.notes.models.firestore import FSDocument
from tests.helpers import T0, FakeClock

T0_MS = 1704110400000


def _doc(note_id, text="hello", owner="u1", created=T0_MS, updated=T0_MS):
    return FSDocument.model_validate(
        {
            "name": f"projects/demo/databases/(default)/documents/notes/{note_id}",
            "fields": {
                "text": {"stringValue": text},
                "userId": {"stringValue": owner},
                "createdAt": {"integerValue": str(created)},
                "updatedAt": {"integerValue": str(updated)},
            },
        }
    )


class FirestoreNoteStoreTest(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.client = MagicMock()
        self.client.collection = "notes"
        self.clock = FakeClock()
        self.store = FirestoreNoteStore(
            self.client, poll_interval=0.001, clock=self.clock
        )

    def test_rejects_non_positive_poll_interval(self):
        with self.assertRaises(ValueError):
            FirestoreNoteStore(self.client, poll_interval=0)

    async def test_create_uses_one_clock_reading(self):
        self.client.create.return_value = _doc("new-id")
        note_id = await self.store.create_note("Buy milk", "u1")
        self.assertEqual(note_id, "new-id")
        fields = self.client.create.call_args.args[0]
        self.assertEqual(
            fields,
            {
                "text": {"stringValue": "Buy milk"},
                "userId": {"stringValue": "u1"},
                "createdAt": {"integerValue": str(T0_MS)},
                "updatedAt": {"integerValue": str(T0_MS)},
            },
        )

    async def test_get_decodes_document(self):
        self.client.get.return_value = _doc("n1", updated=T0_MS + 5000)
        note = await self.store.get_note("n1")
        self.assertEqual(note.id, "n1")
        self.assertEqual(note.created_at, T0)
        self.assertEqual(note.owner_id, "u1")

    async def test_update_patches_text_and_strictly_later_time(self):
        self.client.get.return_value = _doc("n1")
        await self.store.update_note("n1", "edited")
        note_id, fields = self.client.patch.call_args.args
        self.assertEqual(note_id, "n1")
        self.assertEqual(
            fields,
            {
                "text": {"stringValue": "edited"},
                "updatedAt": {"integerValue": str(T0_MS + 1)},
            },
        )

    async def test_update_uses_clock_when_later(self):
        self.client.get.return_value = _doc("n1")
        self.clock.tick(seconds=10)
        await self.store.update_note("n1", "edited")
        fields = self.client.patch.call_args.args[1]
        self.assertEqual(fields["updatedAt"], {"integerValue": str(T0_MS + 10000)})

    async def test_delete(self):
        await self.store.delete_note("n1")
        self.client.delete.assert_called_once_with("n1")

    async def test_list_runs_owner_query(self):
        self.client.run_query.return_value = [_doc("b"), _doc("a")]
        notes = await self.store.list_notes("u1")
        self.assertEqual([n.id for n in notes], ["b", "a"])
        request = self.client.run_query.call_args.args[0]
        where = request.structuredQuery.where.fieldFilter
        self.assertEqual(where.value.value, "u1")

    async def test_malformed_document_is_api_error(self):
        bad = FSDocument.model_validate(
            {
                "name": "projects/demo/databases/(default)/documents/notes/x",
                "fields": {"text": {"stringValue": "no owner"}},
            }
        )
        self.client.run_query.return_value = [bad]
        with self.assertRaises(NotesApiError):
            await self.store.list_notes("u1")

    async def test_watch_emits_only_on_change(self):
        first = [_doc("a")]
        second = [_doc("b", updated=T0_MS + 1), _doc("a")]
        results = [first, first, first, second]

        def run_query(_request):
            return results.pop(0) if len(results) > 1 else results[0]

        self.client.run_query.side_effect = run_query
        stream = self.store.watch("u1")
        snapshot = await stream.__anext__()
        self.assertEqual([n.id for n in snapshot], ["a"])
        snapshot = await stream.__anext__()
        self.assertEqual([n.id for n in snapshot], ["b", "a"])
        await stream.aclose()
        self.assertGreaterEqual(self.client.run_query.call_count, 4)

    async def test_watch_propagates_errors(self):
        self.client.run_query.side_effect = NotesApiError("HTTP 500: boom")
        stream = self.store.watch("u1")
        with self.assertRaises(NotesApiError):
            await stream.__anext__()


if __name__ == "__main__":
    unittest.main()
