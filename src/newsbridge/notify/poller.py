"""Poll-and-diff detection of newly published articles."""

import threading
from enum import Enum

import structlog

from newsbridge.config import PollerConfig
from newsbridge.formatting import format_notification
from newsbridge.models import ArticleId, Notification, TickResult
from newsbridge.news.client import NewsClient, NewsClientError
from newsbridge.notify.broadcaster import Broadcaster
from newsbridge.subscriptions.registry import SubscriptionRegistry
from newsbridge.transport.media import MediaFetcher

logger = structlog.get_logger(__name__)


class PollerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class NewsPoller:
    """Remembers the newest article id and broadcasts each newer one once.

    The id is advanced before the full article is fetched and delivered, so
    a failure after detection drops that notification instead of repeating
    it on the next tick. Every id recorded by the probe, a baseline or a
    detection is kept in a bounded seen set, so an article that returns to
    the top of the feed is never announced twice.
    """

    def __init__(
        self,
        news_client: NewsClient,
        registry: SubscriptionRegistry,
        broadcaster: Broadcaster,
        media_fetcher: MediaFetcher,
        config: PollerConfig,
    ):
        self._news = news_client
        self._registry = registry
        self._broadcaster = broadcaster
        self._media = media_fetcher
        self._config = config
        self._last_seen_id: ArticleId | None = None
        # Insertion-ordered so pruning drops the oldest ids first
        self._seen_ids: dict[ArticleId, None] = {}
        self._max_seen_ids = 10_000
        self._state = PollerState.UNINITIALIZED
        self._tick_lock = threading.Lock()

    @property
    def last_seen_article_id(self) -> ArticleId | None:
        return self._last_seen_id

    @property
    def state(self) -> PollerState:
        return self._state

    def get_seen_ids(self) -> set[ArticleId]:
        """Return ids already recorded or announced."""
        return set(self._seen_ids)

    def initialize(self) -> None:
        """Record the current newest article id without notifying anyone."""
        with self._tick_lock:
            self._probe()

    def reinitialize(self) -> None:
        """Forget the remembered id and run the startup probe again.

        The seen set is kept, so a re-init never re-announces old articles.
        """
        with self._tick_lock:
            self._last_seen_id = None
            self._state = PollerState.UNINITIALIZED
            self._probe()

    def _probe(self) -> None:
        try:
            articles = self._news.latest(limit=1)
        except NewsClientError as e:
            logger.error("poller.probe_failed", error=str(e))
            return

        if articles:
            self._last_seen_id = articles[0].id
            self._mark_seen(articles[0].id)
        self._state = PollerState.READY
        logger.info("poller.initialized", last_seen_article_id=self._last_seen_id)

    def poll(self) -> TickResult:
        """Run one tick. Overlapping calls return immediately."""
        if not self._tick_lock.acquire(blocking=False):
            logger.warning("poller.tick_skipped", reason="previous tick still running")
            return TickResult.SKIPPED_OVERLAP
        try:
            result = self._tick()
        finally:
            self._tick_lock.release()

        logger.debug("poller.tick_complete", result=result.value, last_seen_article_id=self._last_seen_id)
        return result

    def _tick(self) -> TickResult:
        if self._registry.is_empty():
            return TickResult.SKIPPED_NO_SUBSCRIBERS

        try:
            latest = self._news.latest(limit=1)
        except NewsClientError as e:
            logger.error("poller.fetch_failed", error=str(e))
            return TickResult.FETCH_FAILED

        if not latest or latest[0].id == self._last_seen_id:
            return TickResult.NO_NEW_ARTICLE

        new_id = latest[0].id
        if new_id in self._seen_ids:
            logger.debug("poller.already_seen", article_id=new_id, last_seen_article_id=self._last_seen_id)
            return TickResult.NO_NEW_ARTICLE

        if self._state is PollerState.UNINITIALIZED and not self._config.notify_after_failed_probe:
            self._last_seen_id = new_id
            self._mark_seen(new_id)
            self._state = PollerState.READY
            logger.info("poller.baseline_recorded", article_id=new_id)
            return TickResult.BASELINE_RECORDED

        previous_id = self._last_seen_id
        self._last_seen_id = new_id
        self._mark_seen(new_id)
        self._state = PollerState.READY
        logger.info("poller.new_article", article_id=new_id, previous_id=previous_id)

        try:
            article = self._news.article_by_id(new_id)
        except NewsClientError as e:
            logger.error("poller.details_failed", article_id=new_id, error=str(e))
            return TickResult.DETAILS_FAILED

        media = self._media.try_fetch(article.thumbnail_url)
        notification = Notification(
            text=format_notification(article, self._config.excerpt_chars),
            media=media,
        )
        self._broadcaster.broadcast(notification)
        return TickResult.NOTIFIED

    def _mark_seen(self, article_id: ArticleId) -> None:
        self._seen_ids[article_id] = None
        self._prune_seen_ids()

    def _prune_seen_ids(self) -> None:
        """Keep seen_ids bounded by dropping the oldest half when full."""
        if len(self._seen_ids) > self._max_seen_ids:
            to_remove = len(self._seen_ids) - (self._max_seen_ids // 2)
            for article_id in list(self._seen_ids)[:to_remove]:
                del self._seen_ids[article_id]
