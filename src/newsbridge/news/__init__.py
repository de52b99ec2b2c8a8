"""News API access."""

from newsbridge.news.client import NewsClient, NewsClientError, NewsFetchError, NewsParseError

__all__ = [
    "NewsClient",
    "NewsClientError",
    "NewsFetchError",
    "NewsParseError",
]
