"""WhatsApp Web transport built on neonize (QR login, sqlite session store)."""

from typing import Optional, Union

import structlog
from neonize.client import NewClient
from neonize.events import ConnectedEv, MessageEv
from neonize.utils import build_jid
from neonize.utils.jid import Jid2String

from newsbridge.config import AppConfig
from newsbridge.models import ChatId, IncomingMessage, Media
from newsbridge.transport.base import DeliveryError, EventKind, MessagingTransport

logger = structlog.get_logger(__name__)

DEFAULT_SERVER = "s.whatsapp.net"


def chat_id_to_jid(chat_id: ChatId):
    """Convert 'user@server' (or a bare number) into a neonize JID."""
    user, _, server = chat_id.partition("@")
    return build_jid(user, server or DEFAULT_SERVER)


class NeonizeTransport(MessagingTransport):
    """Bridges neonize client callbacks onto the transport event interface."""

    def __init__(self, config: AppConfig):
        super().__init__()
        self._client = NewClient(config.transport.session_db)
        self._client.qr(self._on_qr)
        self._client.event(ConnectedEv)(self._on_connected)
        self._client.event(MessageEv)(self._on_message)

    def connect(self) -> None:
        logger.info("transport.connecting", provider="neonize")
        self._client.connect()

    def disconnect(self) -> None:
        logger.info("transport.disconnecting", provider="neonize")
        self._client.disconnect()

    def send_message(
        self,
        chat_id: ChatId,
        content: Union[str, Media],
        caption: Optional[str] = None,
    ) -> None:
        try:
            jid = chat_id_to_jid(chat_id)
            if isinstance(content, Media):
                if content.mimetype.startswith("image/"):
                    message = self._client.build_image_message(content.data, caption=caption)
                    self._client.send_message(jid, message)
                else:
                    logger.warning(
                        "transport.media_unsupported",
                        chat_id=chat_id,
                        mimetype=content.mimetype,
                    )
                    self._client.send_message(jid, caption or "")
            else:
                self._client.send_message(jid, content)
        except Exception as e:
            raise DeliveryError(f"Failed to send to {chat_id}: {e}") from e

    def _on_qr(self, client: NewClient, data: bytes) -> None:
        payload = data.decode() if isinstance(data, bytes) else str(data)
        self._events.emit(EventKind.QR_CODE, payload)

    def _on_connected(self, client: NewClient, event: ConnectedEv) -> None:
        self._events.emit(EventKind.READY)

    def _on_message(self, client: NewClient, event: MessageEv) -> None:
        source = event.Info.MessageSource
        if source.IsFromMe:
            return
        body = event.Message.conversation or event.Message.extendedTextMessage.text
        if not body:
            return
        self._events.emit(
            EventKind.MESSAGE,
            IncomingMessage(chat_id=Jid2String(source.Chat), body=body),
        )
