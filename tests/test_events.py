"""Tests for change notification primitives."""

import asyncio
import unittest

from pynotes.events import Broadcast, ChangeNotifier


class ChangeNotifierTest(unittest.TestCase):
    def test_add_and_remove_listener(self):
        notifier = ChangeNotifier()
        calls = []
        remove = notifier.add_listener(lambda: calls.append(1))
        notifier.notify_listeners()
        remove()
        notifier.notify_listeners()
        self.assertEqual(calls, [1])
        self.assertFalse(notifier.has_listeners)

    def test_failing_listener_does_not_stop_others(self):
        notifier = ChangeNotifier()
        calls = []

        def boom():
            raise RuntimeError("boom")

        notifier.add_listener(boom)
        notifier.add_listener(lambda: calls.append("second"))
        with self.assertLogs("pynotes.events", level="ERROR"):
            notifier.notify_listeners()
        self.assertEqual(calls, ["second"])

    def test_notify_from_listener_is_coalesced(self):
        notifier = ChangeNotifier()
        depth = []
        calls = []

        def listener():
            calls.append(len(depth))
            if len(calls) == 1:
                depth.append(1)
                notifier.notify_listeners()
                notifier.notify_listeners()
                depth.pop()

        notifier.add_listener(listener)
        notifier.notify_listeners()
        # one extra pass, never nested
        self.assertEqual(calls, [0, 0])


class BroadcastTest(unittest.IsolatedAsyncioTestCase):
    async def test_receiver_sees_latest_value_only(self):
        broadcast = Broadcast()
        receiver = broadcast.subscribe()
        broadcast.publish(1)
        broadcast.publish(2)
        self.assertEqual(await receiver.__anext__(), 2)

    async def test_fan_out(self):
        broadcast = Broadcast()
        first, second = broadcast.subscribe(), broadcast.subscribe()
        broadcast.publish("x")
        self.assertEqual(await first.__anext__(), "x")
        self.assertEqual(await second.__anext__(), "x")

    async def test_waiting_receiver_is_woken(self):
        broadcast = Broadcast()
        receiver = broadcast.subscribe()
        pending = asyncio.ensure_future(receiver.__anext__())
        await asyncio.sleep(0)
        self.assertFalse(pending.done())
        broadcast.publish("late")
        self.assertEqual(await asyncio.wait_for(pending, 1), "late")

    async def test_close_ends_iteration_after_pending_value(self):
        broadcast = Broadcast()
        receiver = broadcast.subscribe()
        broadcast.publish("last")
        broadcast.close()
        self.assertEqual([value async for value in receiver], ["last"])
        self.assertEqual(broadcast.subscriber_count, 0)
        with self.assertRaises(RuntimeError):
            broadcast.publish("again")

    async def test_receiver_close_detaches(self):
        broadcast = Broadcast()
        receiver = broadcast.subscribe()
        broadcast.publish("dropped")
        receiver.close()
        self.assertEqual(broadcast.subscriber_count, 0)
        self.assertEqual([value async for value in receiver], [])

    async def test_replay_latest(self):
        broadcast = Broadcast()
        broadcast.publish("before")
        self.assertEqual(
            await broadcast.subscribe(replay_latest=True).__anext__(), "before"
        )
        receiver = broadcast.subscribe()
        broadcast.publish("after")
        self.assertEqual(await receiver.__anext__(), "after")


if __name__ == "__main__":
    unittest.main()
