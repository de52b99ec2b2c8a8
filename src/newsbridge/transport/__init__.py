"""Messaging transports."""

from newsbridge.transport.base import (
    DeliveryError,
    EventDispatcher,
    EventKind,
    MessagingTransport,
)
from newsbridge.transport.media import MediaFetchError, MediaFetcher

__all__ = [
    "DeliveryError",
    "EventDispatcher",
    "EventKind",
    "MessagingTransport",
    "MediaFetchError",
    "MediaFetcher",
]
