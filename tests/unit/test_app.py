"""Tests for bridge wiring between transport, commands and poller."""

import asyncio
from unittest.mock import MagicMock, patch

import pytest

from newsbridge.app import NewsBridge
from newsbridge.models import IncomingMessage, Media, TickResult
from newsbridge.transport.base import EventKind
from newsbridge.web.status import CONNECTED_HTML, WAITING_HTML


class TestNewsBridge:
    @pytest.fixture
    def bridge(self, test_config, fake_transport):
        return NewsBridge(test_config, transport=fake_transport)

    def test_registers_transport_handlers(self, bridge, fake_transport):
        events = fake_transport._events
        assert events.handler_names(EventKind.QR_CODE) == ["status.qr"]
        assert events.handler_names(EventKind.READY) == ["status.ready"]
        assert events.handler_names(EventKind.MESSAGE) == ["commands.route"]

    def test_qr_then_ready_updates_status(self, bridge, fake_transport):
        assert bridge.status.render() == WAITING_HTML

        fake_transport._events.emit(EventKind.QR_CODE, "2@qr-payload")
        assert bridge.status.qr_url is not None

        fake_transport._events.emit(EventKind.READY)
        assert bridge.status.render() == CONNECTED_HTML

    def test_subscribe_via_message(self, bridge, fake_transport):
        message = IncomingMessage(chat_id="111@s.whatsapp.net", body="!notify")

        fake_transport._events.emit(EventKind.MESSAGE, message)

        assert "111@s.whatsapp.net" in bridge.registry
        assert len(fake_transport.sent) == 1
        chat_id, content, caption = fake_transport.sent[0]
        assert chat_id == "111@s.whatsapp.net"
        assert "alerts" in content
        assert caption is None

    def test_unknown_message_sends_nothing(self, bridge, fake_transport):
        fake_transport._events.emit(EventKind.MESSAGE, IncomingMessage(chat_id="1", body="hi"))

        assert fake_transport.sent == []

    def test_reply_with_media(self, bridge, fake_transport, sample_article):
        media = Media(data=b"img", mimetype="image/jpeg")
        with patch.object(bridge._news, "article_by_id", return_value=sample_article), \
                patch.object(bridge._media, "try_fetch", return_value=media):
            fake_transport._events.emit(
                EventKind.MESSAGE, IncomingMessage(chat_id="1", body="!read A100")
            )

        chat_id, content, caption = fake_transport.sent[0]
        assert content == media
        assert sample_article.headline in caption

    def test_reply_failure_is_contained(self, bridge, fake_transport):
        fake_transport.failing.add("1")

        fake_transport._events.emit(EventKind.MESSAGE, IncomingMessage(chat_id="1", body="!help"))

        assert fake_transport.sent == []

    def test_tick_runs_poller(self, bridge):
        bridge._poller = MagicMock()
        bridge._poller.poll.return_value = TickResult.NO_NEW_ARTICLE

        asyncio.run(bridge._tick())
        asyncio.run(bridge._tick())

        assert bridge._poller.poll.call_count == 2
        assert bridge._tick_count == 2

    def test_tick_error_does_not_propagate(self, bridge):
        bridge._poller = MagicMock()
        bridge._poller.poll.side_effect = RuntimeError("unexpected")

        asyncio.run(bridge._tick())

        assert bridge._tick_count == 1

    def test_poll_loop_stops_when_shutdown_requested(self, bridge):
        bridge._running = False
        bridge._poller = MagicMock()

        asyncio.run(bridge._poll_loop())

        bridge._poller.poll.assert_not_called()

    def test_shutdown_disconnects_transport(self, bridge, fake_transport):
        fake_transport.connected = True

        bridge._shutdown()

        assert fake_transport.connected is False
