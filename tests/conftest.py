"""Shared test fixtures."""

from unittest.mock import MagicMock

import pytest

from newsbridge.config import AppConfig
from newsbridge.models import Article
from newsbridge.news.client import NewsClient
from newsbridge.subscriptions.registry import SubscriptionRegistry
from newsbridge.transport.base import DeliveryError, MessagingTransport
from newsbridge.transport.media import MediaFetcher


class FakeTransport(MessagingTransport):
    """In-memory transport that records sends and fails for chosen chats."""

    def __init__(self):
        super().__init__()
        self.sent: list[tuple] = []
        self.failing: set[str] = set()
        self.connected = False

    def connect(self) -> None:
        self.connected = True

    def disconnect(self) -> None:
        self.connected = False

    def send_message(self, chat_id, content, caption=None) -> None:
        if chat_id in self.failing:
            raise DeliveryError(f"cannot reach {chat_id}")
        self.sent.append((chat_id, content, caption))

    def recipients(self) -> set[str]:
        return {chat_id for chat_id, _, _ in self.sent}


@pytest.fixture
def test_config() -> AppConfig:
    """Provide a test configuration with safe defaults."""
    return AppConfig(
        news_api={
            "base_url": "https://news.example.com/api",
            "timeout_seconds": 5,
            "list_limit": 5,
            "search_limit": 3,
        },
        poller={
            "interval_minutes": 10,
            "notify_after_failed_probe": False,
            "excerpt_chars": 120,
        },
        server={"host": "127.0.0.1", "port": 3000},
        logging={
            "level": "DEBUG",
            "app_log": "/tmp/test_newsbridge.log",
            "delivery_log": "/tmp/test_deliveries.log",
        },
    )


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def registry() -> SubscriptionRegistry:
    return SubscriptionRegistry()


@pytest.fixture
def news_client() -> MagicMock:
    return MagicMock(spec=NewsClient)


@pytest.fixture
def media_fetcher() -> MagicMock:
    fetcher = MagicMock(spec=MediaFetcher)
    fetcher.try_fetch.return_value = None
    return fetcher


def _build_article(article_id="A100", headline=None, **kwargs) -> Article:
    return Article(
        id=article_id,
        headline=headline or f"Headline {article_id}",
        url=kwargs.pop("url", f"https://news.example.com/{article_id}"),
        **kwargs,
    )


@pytest.fixture
def make_article():
    """Factory for articles with predictable headline and url."""
    return _build_article


@pytest.fixture
def sample_article() -> Article:
    """Provide a realistic sample article."""
    return Article(
        id="A100",
        headline="Heavy rain expected across the Western Province",
        url="https://news.example.com/article/A100",
        published_date="2026-10-18 08:30",
        full_text="The Department of Meteorology has issued a warning for heavy showers above 100mm in several districts.",
        thumbnail_url="https://cdn.example.com/A100.jpg",
    )
