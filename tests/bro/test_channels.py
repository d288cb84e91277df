"""
Unit tests for RecordChannel and EventHook
"""
from unittest.mock import Mock

from bro.channels import RecordChannel
from bro.events import EventHook
from bro.records import FileRecord


class TestEventHook:

    def test_handlers_fire_in_subscription_order(self):
        hook = EventHook("update")
        calls = []
        hook.subscribe(lambda value: calls.append(("first", value)))
        hook.subscribe(lambda value: calls.append(("second", value)))

        assert hook.emit(1) == 2
        assert calls == [("first", 1), ("second", 1)]

    def test_unsubscribe(self):
        hook = EventHook("update")
        handler = Mock()
        unsubscribe = hook.subscribe(handler)

        unsubscribe()
        unsubscribe()

        assert hook.emit("x") == 0
        handler.assert_not_called()

    def test_handler_may_unsubscribe_while_firing(self):
        hook = EventHook("update")
        other = Mock()
        unsubscribers = []

        def once(value):
            unsubscribers[0]()

        unsubscribers.append(hook.subscribe(once))
        hook.subscribe(other)

        assert hook.emit("x") == 2
        assert len(hook) == 1
        other.assert_called_once_with("x")


class TestRecordChannel:

    def test_push_buffers_and_notifies(self):
        channel = RecordChannel()
        listener = Mock()
        channel.on_data.subscribe(listener)
        record = FileRecord(path="/src/a.js", base="/src")

        channel.push(record)

        listener.assert_called_once_with(record)
        assert channel.records == [record]
        assert len(channel) == 1

    def test_drain_empties_buffer(self):
        channel = RecordChannel()
        record = FileRecord(path="/src/a.js", base="/src")
        channel.push(record)

        assert list(channel) == [record]
        assert channel.drain() == []

    def test_end_is_counted(self):
        channel = RecordChannel()
        on_end = Mock()
        channel.on_end.subscribe(on_end)

        channel.end()
        channel.end()

        assert channel.ended
        assert channel.end_count == 2
        assert on_end.call_count == 2

    def test_unhandled_errors_stay_pending(self):
        channel = RecordChannel()
        first, second = RuntimeError("a"), RuntimeError("b")

        channel.emit_error(first)
        channel.emit_error(second)

        assert channel.take_error() is first
        assert channel.take_error() is second
        assert channel.take_error() is None

    def test_handled_errors_are_not_pending(self):
        channel = RecordChannel()
        listener = Mock()
        channel.on_error.subscribe(listener)
        error = RuntimeError("a")

        channel.emit_error(error)

        listener.assert_called_once_with(error)
        assert channel.take_error() is None
