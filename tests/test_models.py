"""Tests for the note entity and its wire representation."""

import unittest
from datetime import datetime, timedelta, timezone

from pydantic import ValidationError

from pynotes.services.notes import Note
from pynotes.services.notes.models import NoteRecord
from tests.helpers import T0, make_note

T0_MS = 1704110400000


class NoteWireTest(unittest.TestCase):
    def test_to_wire_layout(self):
        note = make_note(updated=T0 + timedelta(seconds=5))
        self.assertEqual(
            note.to_wire(),
            {
                "text": "hello",
                "userId": "u1",
                "createdAt": T0_MS,
                "updatedAt": T0_MS + 5000,
            },
        )

    def test_round_trip(self):
        note = make_note(
            note_id="abc123",
            text="Buy milk",
            updated=T0 + timedelta(days=2, milliseconds=7),
        )
        self.assertEqual(Note.from_wire(note.to_wire(), note.id), note)

    def test_from_wire_accepts_int64_strings(self):
        note = Note.from_wire(
            {
                "text": "x",
                "userId": "u1",
                "createdAt": str(T0_MS),
                "updatedAt": str(T0_MS),
            },
            "id1",
        )
        self.assertEqual(note.created_at, T0)
        self.assertEqual(note.id, "id1")

    def test_from_wire_rejects_missing_fields(self):
        with self.assertRaises(ValidationError):
            Note.from_wire({"text": "x", "createdAt": T0_MS}, "id1")

    def test_record_rejects_updated_before_created(self):
        with self.assertRaises(ValidationError):
            NoteRecord.model_validate(
                {
                    "text": "x",
                    "userId": "u1",
                    "createdAt": T0_MS,
                    "updatedAt": T0_MS - 1,
                }
            )

    def test_unknown_keys_are_ignored(self):
        note = Note.from_wire(
            {
                "text": "x",
                "userId": "u1",
                "createdAt": T0_MS,
                "updatedAt": T0_MS,
                "pinned": True,
            },
            "n1",
        )
        self.assertEqual(note.text, "x")
        self.assertNotIn("pinned", note.to_wire())


class NoteInvariantTest(unittest.TestCase):
    def test_updated_before_created_raises(self):
        with self.assertRaises(ValueError):
            make_note(updated=T0 - timedelta(seconds=1))

    def test_timestamps_normalized_to_utc_millis(self):
        naive = datetime(2024, 1, 1, 12, 0, 0, 123456)
        note = make_note(created=naive)
        self.assertEqual(note.created_at.tzinfo, timezone.utc)
        self.assertEqual(note.created_at.microsecond, 123000)

    def test_frozen(self):
        note = make_note()
        with self.assertRaises(AttributeError):
            note.text = "changed"


if __name__ == "__main__":
    unittest.main()
