"""In-memory registry of chats subscribed to new-article notifications."""

import threading

import structlog

from newsbridge.models import ChatId

logger = structlog.get_logger(__name__)


class SubscriptionRegistry:
    """Set of subscribed chat ids. Lives for the process lifetime, starts empty."""

    def __init__(self):
        self._chats: set[ChatId] = set()
        self._lock = threading.Lock()

    def subscribe(self, chat_id: ChatId) -> bool:
        """Add a chat. Returns True if it was not already subscribed."""
        with self._lock:
            added = chat_id not in self._chats
            self._chats.add(chat_id)
            total = len(self._chats)
        if added:
            logger.info("subscriptions.added", chat_id=chat_id, total=total)
        return added

    def unsubscribe(self, chat_id: ChatId) -> bool:
        """Remove a chat. Returns True if it was subscribed."""
        with self._lock:
            removed = chat_id in self._chats
            self._chats.discard(chat_id)
            total = len(self._chats)
        if removed:
            logger.info("subscriptions.removed", chat_id=chat_id, total=total)
        return removed

    def is_empty(self) -> bool:
        with self._lock:
            return not self._chats

    def list_all(self) -> frozenset[ChatId]:
        """Snapshot of current subscribers, unaffected by later changes."""
        with self._lock:
            return frozenset(self._chats)

    def __len__(self) -> int:
        with self._lock:
            return len(self._chats)

    def __contains__(self, chat_id: object) -> bool:
        with self._lock:
            return chat_id in self._chats
