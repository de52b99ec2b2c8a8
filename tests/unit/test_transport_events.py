"""Tests for transport event registration and dispatch."""

import threading
import time

from newsbridge.models import IncomingMessage
from newsbridge.transport.base import EventDispatcher, EventKind


class TestEventDispatcher:
    def test_handlers_fire_in_registration_order(self):
        dispatcher = EventDispatcher()
        calls = []
        dispatcher.register(EventKind.MESSAGE, lambda m: calls.append(("first", m)), name="first")
        dispatcher.register(EventKind.MESSAGE, lambda m: calls.append(("second", m)), name="second")

        dispatcher.emit(EventKind.MESSAGE, "hello")

        assert calls == [("first", "hello"), ("second", "hello")]
        assert dispatcher.handler_names(EventKind.MESSAGE) == ["first", "second"]

    def test_failing_handler_does_not_stop_others(self):
        dispatcher = EventDispatcher()
        calls = []

        def broken():
            raise RuntimeError("handler bug")

        dispatcher.register(EventKind.READY, broken)
        dispatcher.register(EventKind.READY, lambda: calls.append("ran"))

        dispatcher.emit(EventKind.READY)

        assert calls == ["ran"]

    def test_kinds_are_independent(self):
        dispatcher = EventDispatcher()
        calls = []
        dispatcher.register(EventKind.QR_CODE, calls.append)

        dispatcher.emit(EventKind.MESSAGE, "ignored")
        dispatcher.emit(EventKind.QR_CODE, "qr-data")

        assert calls == ["qr-data"]

    def test_events_of_same_kind_are_serialized(self):
        dispatcher = EventDispatcher()
        active = []
        overlaps = []

        def slow_handler(message):
            active.append(message)
            if len(active) > 1:
                overlaps.append(list(active))
            time.sleep(0.05)
            active.remove(message)

        dispatcher.register(EventKind.MESSAGE, slow_handler)
        threads = [
            threading.Thread(target=dispatcher.emit, args=(EventKind.MESSAGE, f"m{i}"))
            for i in range(4)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert overlaps == []


class TestMessagingTransport:
    def test_named_registration(self, fake_transport):
        received = []
        fake_transport.on_message(received.append, name="collector")

        message = IncomingMessage(chat_id="123@s.whatsapp.net", body="!help")
        fake_transport._events.emit(EventKind.MESSAGE, message)

        assert received == [message]
        assert fake_transport._events.handler_names(EventKind.MESSAGE) == ["collector"]

    def test_qr_and_ready_handlers(self, fake_transport):
        seen = []
        fake_transport.on_qr_code(lambda qr: seen.append(("qr", qr)))
        fake_transport.on_ready(lambda: seen.append(("ready", None)))

        fake_transport._events.emit(EventKind.QR_CODE, "2@abc")
        fake_transport._events.emit(EventKind.READY)

        assert seen == [("qr", "2@abc"), ("ready", None)]
