"""Map inbound chat text to bot commands and build the reply."""

from typing import Callable, Optional

import structlog

from newsbridge import formatting
from newsbridge.config import NewsApiConfig
from newsbridge.models import ChatId, Reply
from newsbridge.news.client import NewsClient, NewsClientError
from newsbridge.subscriptions.registry import SubscriptionRegistry
from newsbridge.transport.media import MediaFetcher

logger = structlog.get_logger(__name__)

NEWS_ERROR_TEXT = "❌ Error fetching news."
BREAKING_ERROR_TEXT = "❌ Error fetching breaking news."
SEARCH_ERROR_TEXT = "❌ Error searching news."
ARTICLE_ERROR_TEXT = "❌ Error fetching article."

SUBSCRIBED_TEXT = "✅ You will now receive new-article alerts. Send !stop to unsubscribe."
ALREADY_SUBSCRIBED_TEXT = "ℹ️ You are already subscribed. Send !stop to unsubscribe."
UNSUBSCRIBED_TEXT = "🔕 New-article alerts stopped. Send !notify to subscribe again."
NOT_SUBSCRIBED_TEXT = "ℹ️ You were not subscribed. Send !notify to subscribe."
SEARCH_USAGE_TEXT = "Usage: !search <text>"
READ_USAGE_TEXT = "Usage: !read <id>"

SEARCH_PREFIX = "!search"
READ_PREFIX = "!read"


class CommandRouter:
    """Dispatches one message to a command handler.

    Text is matched after trimming and case-folding. Arguments of ``!search``
    and ``!read`` keep their original case. Unknown text yields no reply.
    """

    def __init__(
        self,
        news_client: NewsClient,
        registry: SubscriptionRegistry,
        media_fetcher: MediaFetcher,
        config: NewsApiConfig,
    ):
        self._news = news_client
        self._registry = registry
        self._media = media_fetcher
        self._list_limit = config.list_limit
        self._search_limit = config.search_limit
        self._exact: dict[str, Callable[[ChatId], Reply]] = {
            "!notify": self._subscribe,
            "!start": self._subscribe,
            "!stop": self._unsubscribe,
            "!latest": self._latest,
            "!breaking": self._breaking,
            "!help": self._help,
        }

    def handle(self, chat_id: ChatId, raw_text: str) -> Optional[Reply]:
        text = (raw_text or "").strip()
        command = text.casefold()

        handler = self._exact.get(command)
        if handler is not None:
            logger.info("command.received", chat_id=chat_id, command=command)
            return handler(chat_id)

        argument = _prefixed_argument(text, SEARCH_PREFIX)
        if argument is not None:
            logger.info("command.received", chat_id=chat_id, command=SEARCH_PREFIX)
            return self._search(argument)

        argument = _prefixed_argument(text, READ_PREFIX)
        if argument is not None:
            logger.info("command.received", chat_id=chat_id, command=READ_PREFIX)
            return self._read(argument)

        return None

    def _subscribe(self, chat_id: ChatId) -> Reply:
        added = self._registry.subscribe(chat_id)
        return Reply(text=SUBSCRIBED_TEXT if added else ALREADY_SUBSCRIBED_TEXT)

    def _unsubscribe(self, chat_id: ChatId) -> Reply:
        removed = self._registry.unsubscribe(chat_id)
        return Reply(text=UNSUBSCRIBED_TEXT if removed else NOT_SUBSCRIBED_TEXT)

    def _help(self, chat_id: ChatId) -> Reply:
        return Reply(text=formatting.HELP_TEXT)

    def _latest(self, chat_id: ChatId) -> Reply:
        try:
            articles = self._news.latest(limit=self._list_limit)
        except NewsClientError as e:
            logger.error("command.failed", command="!latest", error=str(e))
            return Reply(text=NEWS_ERROR_TEXT)
        return Reply(text=formatting.format_latest(articles[: self._list_limit]))

    def _breaking(self, chat_id: ChatId) -> Reply:
        try:
            articles = self._news.breaking(limit=self._list_limit)
        except NewsClientError as e:
            logger.error("command.failed", command="!breaking", error=str(e))
            return Reply(text=BREAKING_ERROR_TEXT)
        return Reply(text=formatting.format_breaking(articles[: self._list_limit]))

    def _search(self, query: str) -> Reply:
        if not query:
            return Reply(text=SEARCH_USAGE_TEXT)
        try:
            articles = self._news.search(query)
        except NewsClientError as e:
            logger.error("command.failed", command=SEARCH_PREFIX, query=query, error=str(e))
            return Reply(text=SEARCH_ERROR_TEXT)
        return Reply(text=formatting.format_search_results(query, articles[: self._search_limit]))

    def _read(self, article_id: str) -> Reply:
        if not article_id:
            return Reply(text=READ_USAGE_TEXT)
        try:
            article = self._news.article_by_id(article_id)
        except NewsClientError as e:
            logger.error("command.failed", command=READ_PREFIX, article_id=article_id, error=str(e))
            return Reply(text=ARTICLE_ERROR_TEXT)
        media = self._media.try_fetch(article.thumbnail_url)
        return Reply(text=formatting.format_article(article), media=media)


def _prefixed_argument(text: str, prefix: str) -> Optional[str]:
    """Return the argument after ``prefix`` or None if the command is something else.

    ``!search`` alone yields an empty argument; ``!searching`` is not a match.
    """
    parts = text.split(maxsplit=1)
    if not parts or parts[0].casefold() != prefix:
        return None
    return parts[1].strip() if len(parts) > 1 else ""
