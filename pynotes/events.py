"""
Change notification primitives shared by the controllers.

Two seams are provided:
  - ChangeNotifier: synchronous observer list. Presentation registers a
    callback and re-reads the controller's state when it fires.
  - Broadcast: asynchronous fan-out of values. Every receiver holds a single
    latest-value slot, so a slow consumer sees the newest value instead of a
    backlog.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Callable, Generic, List, Set, TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[], None]

_EMPTY = object()


class ChangeNotifier:
    """
    Observer list with non re-entrant notification.

    A notify requested while listeners are running is coalesced into one more
    pass once the current pass finishes.
    """

    def __init__(self) -> None:
        self._listeners: List[Listener] = []
        self._notifying = False
        self._pending = False

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that removes it again."""
        self._listeners.append(listener)

        def remove() -> None:
            self.remove_listener(listener)

        return remove

    def remove_listener(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            LOGGER.debug("Listener %r was not registered", listener)

    @property
    def has_listeners(self) -> bool:
        return bool(self._listeners)

    def notify_listeners(self) -> None:
        if self._notifying:
            self._pending = True
            return
        self._notifying = True
        try:
            while True:
                self._pending = False
                for listener in list(self._listeners):
                    try:
                        listener()
                    except Exception:
                        LOGGER.exception("Listener %r raised during notify", listener)
                if not self._pending:
                    return
        finally:
            self._notifying = False


class Receiver(AsyncIterator[T]):
    """One subscriber of a Broadcast. Iterate it with ``async for``."""

    def __init__(self, broadcast: "Broadcast[T]") -> None:
        self._broadcast = broadcast
        self._value: object = _EMPTY
        self._event = asyncio.Event()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _offer(self, value: T) -> None:
        # replaces an unconsumed value
        self._value = value
        self._event.set()

    def _end(self) -> None:
        self._closed = True
        self._event.set()

    def close(self) -> None:
        """Stop receiving. Pending values are dropped."""
        self._value = _EMPTY
        self._end()
        self._broadcast._detach(self)

    def __aiter__(self) -> "Receiver[T]":
        return self

    async def __anext__(self) -> T:
        while True:
            if self._value is not _EMPTY:
                value = self._value
                self._value = _EMPTY
                self._event.clear()
                return value  # type: ignore[return-value]
            if self._closed:
                raise StopAsyncIteration
            self._event.clear()
            await self._event.wait()


class Broadcast(Generic[T]):
    """Publish a value to every current receiver."""

    def __init__(self) -> None:
        self._receivers: Set[Receiver[T]] = set()
        self._latest: object = _EMPTY
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        return len(self._receivers)

    def subscribe(self, *, replay_latest: bool = False) -> Receiver[T]:
        """
        Create a receiver. With ``replay_latest`` the last published value, if
        any, is delivered first.
        """
        receiver: Receiver[T] = Receiver(self)
        if self._closed:
            receiver._end()
            return receiver
        if replay_latest and self._latest is not _EMPTY:
            receiver._offer(self._latest)  # type: ignore[arg-type]
        self._receivers.add(receiver)
        return receiver

    def publish(self, value: T) -> None:
        if self._closed:
            raise RuntimeError("Broadcast is closed")
        self._latest = value
        for receiver in list(self._receivers):
            receiver._offer(value)

    def close(self) -> None:
        """End every receiver after it drains its pending value."""
        if self._closed:
            return
        self._closed = True
        receivers, self._receivers = self._receivers, set()
        for receiver in receivers:
            receiver._end()

    def _detach(self, receiver: Receiver[T]) -> None:
        self._receivers.discard(receiver)
