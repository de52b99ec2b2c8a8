"""Abstract messaging transport and its event-subscription interface."""

import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Optional, Union

import structlog

from newsbridge.models import ChatId, IncomingMessage, Media

logger = structlog.get_logger(__name__)

QrHandler = Callable[[str], Any]
ReadyHandler = Callable[[], Any]
MessageHandler = Callable[[IncomingMessage], Any]


class DeliveryError(Exception):
    """Raised by a transport when a message could not be sent to a chat."""


class EventKind(str, Enum):
    QR_CODE = "qr"
    READY = "ready"
    MESSAGE = "message"


class EventDispatcher:
    """Named handler registration with ordered, per-kind serialized delivery.

    Handlers for one kind fire in registration order, and an event is not
    dispatched until every handler of the previous event of the same kind
    has returned. A failing handler is logged and does not stop the others.
    """

    def __init__(self):
        self._handlers: dict[EventKind, list[tuple[str, Callable]]] = {kind: [] for kind in EventKind}
        self._locks = {kind: threading.Lock() for kind in EventKind}
        self._registration_lock = threading.Lock()

    def register(self, kind: EventKind, handler: Callable, name: Optional[str] = None) -> None:
        handler_name = name or getattr(handler, "__qualname__", repr(handler))
        with self._registration_lock:
            self._handlers[kind].append((handler_name, handler))
        logger.debug("transport.handler_registered", event=kind.value, handler=handler_name)

    def emit(self, kind: EventKind, *args) -> None:
        with self._registration_lock:
            handlers = list(self._handlers[kind])

        with self._locks[kind]:
            for name, handler in handlers:
                try:
                    handler(*args)
                except Exception as e:
                    logger.error(
                        "transport.handler_failed",
                        event=kind.value,
                        handler=name,
                        error=str(e),
                        exc_info=True,
                    )

    def handler_names(self, kind: EventKind) -> list[str]:
        with self._registration_lock:
            return [name for name, _ in self._handlers[kind]]


class MessagingTransport(ABC):
    """Interface for a chat transport (login, inbound events, outbound messages)."""

    def __init__(self):
        self._events = EventDispatcher()

    def on_qr_code(self, handler: QrHandler, name: Optional[str] = None) -> None:
        """Register a handler called with the raw QR payload to be scanned."""
        self._events.register(EventKind.QR_CODE, handler, name)

    def on_ready(self, handler: ReadyHandler, name: Optional[str] = None) -> None:
        """Register a handler called once the session is authenticated."""
        self._events.register(EventKind.READY, handler, name)

    def on_message(self, handler: MessageHandler, name: Optional[str] = None) -> None:
        """Register a handler called for every inbound text message."""
        self._events.register(EventKind.MESSAGE, handler, name)

    @abstractmethod
    def connect(self) -> None:
        """Start the session. Blocks until the transport disconnects."""
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """Stop the session."""
        ...

    @abstractmethod
    def send_message(
        self,
        chat_id: ChatId,
        content: Union[str, Media],
        caption: Optional[str] = None,
    ) -> None:
        """Send text or media to a chat. Raises DeliveryError on failure."""
        ...
