"""Cancelable handle around one live query."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Callable, List

from .models import Note

LOGGER = logging.getLogger(__name__)


class Subscription:
    """
    Drains a store live query in a background task and forwards each
    snapshot or the terminal error to the owner's callbacks.

    Once ``cancel()`` has been called nothing else is delivered, even if the
    store produced a value before the task observed the cancellation.
    """

    def __init__(
        self,
        owner_id: str,
        stream: AsyncIterator[List[Note]],
        on_snapshot: Callable[["Subscription", List[Note]], None],
        on_error: Callable[["Subscription", Exception], None],
    ):
        self.owner_id = owner_id
        self._stream = stream
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self._canceled = False
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=f"notes-live-query:{owner_id}"
        )

    def __repr__(self) -> str:
        return f"<Subscription owner={self.owner_id!r} active={self.active}>"

    @property
    def canceled(self) -> bool:
        return self._canceled

    @property
    def active(self) -> bool:
        return not self._canceled and not self._task.done()

    @property
    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> None:
        """Stop delivery. Safe to call any number of times."""
        if self._canceled:
            return
        self._canceled = True
        self._task.cancel()
        LOGGER.debug("Subscription for %s canceled", self.owner_id)

    async def wait_closed(self) -> None:
        """Wait until the background task and the store stream have finished."""
        await asyncio.wait({self._task})

    async def _run(self) -> None:
        try:
            async for snapshot in self._stream:
                if self._canceled:
                    LOGGER.debug("Dropping late snapshot for %s", self.owner_id)
                    return
                self._on_snapshot(self, snapshot)
            LOGGER.debug("Live query for %s ended", self.owner_id)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if self._canceled:
                LOGGER.debug("Dropping late error for %s: %s", self.owner_id, exc)
                return
            self._on_error(self, exc)
        finally:
            aclose = getattr(self._stream, "aclose", None)
            if aclose is not None:
                await aclose()
