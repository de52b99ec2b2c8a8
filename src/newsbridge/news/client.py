"""HTTP client for the remote news API."""

from urllib.parse import quote

import requests
import structlog
from pydantic import ValidationError

from newsbridge.config import NewsApiConfig
from newsbridge.models import Article, ArticleId

logger = structlog.get_logger(__name__)


class NewsClientError(Exception):
    """Base class for news API failures."""


class NewsFetchError(NewsClientError):
    """Raised when the news API is unreachable, times out, or returns non-2xx."""


class NewsParseError(NewsClientError):
    """Raised when the news API returns a body of unexpected shape."""


class NewsClient:
    """Thin wrapper over the four read-only news API endpoints.

    Every response is an envelope ``{"data": ...}``. List endpoints carry an
    array of articles, single-article endpoints carry one object.
    """

    def __init__(self, config: NewsApiConfig, session: requests.Session | None = None):
        self._base_url = config.base_url
        self._timeout = config.timeout_seconds
        self._session = session or requests.Session()

    def breaking(self, limit: int = 5) -> list[Article]:
        return self._get_list("/breaking-news", {"limit": limit})

    def latest(self, limit: int = 5) -> list[Article]:
        return self._get_list("/latest-news", {"limit": limit})

    def search(self, query: str) -> list[Article]:
        return self._get_list("/search", {"q": query})

    def article_by_id(self, article_id: ArticleId) -> Article:
        path = f"/article/{quote(str(article_id), safe='')}"
        data = self._get_data(path)
        if not isinstance(data, dict):
            raise NewsParseError(f"Expected article object from {path}, got {type(data).__name__}")
        try:
            return Article.model_validate(data)
        except ValidationError as e:
            raise NewsParseError(f"Malformed article from {path}: {e}") from e

    def close(self) -> None:
        self._session.close()

    def _get_list(self, path: str, params: dict) -> list[Article]:
        data = self._get_data(path, params)
        if not isinstance(data, list):
            raise NewsParseError(f"Expected article list from {path}, got {type(data).__name__}")
        try:
            return [Article.model_validate(raw) for raw in data]
        except ValidationError as e:
            raise NewsParseError(f"Malformed article in {path}: {e}") from e

    def _get_data(self, path: str, params: dict | None = None):
        """GET a path and unwrap the ``data`` envelope."""
        url = f"{self._base_url}{path}"
        logger.debug("news.request", path=path, params=params)
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("news.fetch_failed", path=path, error=str(e))
            raise NewsFetchError(f"Request to {path} failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            logger.warning("news.parse_failed", path=path, error=str(e))
            raise NewsParseError(f"Response from {path} is not JSON: {e}") from e

        if not isinstance(body, dict) or "data" not in body:
            logger.warning("news.parse_failed", path=path, error="missing data envelope")
            raise NewsParseError(f"Response from {path} has no 'data' field")

        return body["data"]
