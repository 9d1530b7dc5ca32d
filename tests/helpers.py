"""Shared fixtures for the test suite."""

import asyncio
from datetime import datetime, timedelta, timezone

from pynotes.events import ChangeNotifier
from pynotes.services.notes import Note

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock; advances only when told to."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def tick(self, **delta) -> datetime:
        self.now += timedelta(**delta)
        return self.now


def make_note(owner_id="u1", text="hello", note_id="n1", created=T0, updated=None):
    return Note(
        id=note_id,
        text=text,
        created_at=created,
        updated_at=updated or created,
        owner_id=owner_id,
    )


async def wait_for(notifier: ChangeNotifier, predicate, timeout: float = 1.0):
    """Wait until ``predicate()`` holds, re-checking on every notification."""
    loop = asyncio.get_running_loop()
    done = loop.create_future()

    def check():
        if not done.done() and predicate():
            done.set_result(None)

    remove = notifier.add_listener(check)
    try:
        check()
        await asyncio.wait_for(done, timeout)
    finally:
        remove()
