"""Download remote media (article thumbnails) into sendable attachments."""

import posixpath
from urllib.parse import urlparse

import requests
import structlog

from newsbridge.models import Media

logger = structlog.get_logger(__name__)

DEFAULT_MIMETYPE = "application/octet-stream"


class MediaFetchError(Exception):
    """Raised when a media URL cannot be downloaded."""


class MediaFetcher:
    """Fetches a URL and wraps the body as Media."""

    def __init__(self, timeout_seconds: float = 15.0, session: requests.Session | None = None):
        self._timeout = timeout_seconds
        self._session = session or requests.Session()

    def fetch(self, url: str) -> Media:
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise MediaFetchError(f"Failed to download {url}: {e}") from e

        if not response.content:
            raise MediaFetchError(f"Empty body from {url}")

        content_type = response.headers.get("Content-Type", DEFAULT_MIMETYPE)
        mimetype = content_type.split(";")[0].strip() or DEFAULT_MIMETYPE
        filename = posixpath.basename(urlparse(url).path) or None

        logger.debug("media.fetched", url=url, mimetype=mimetype, size=len(response.content))
        return Media(data=response.content, mimetype=mimetype, filename=filename)

    def try_fetch(self, url: str | None) -> Media | None:
        """Like fetch(), but returns None instead of raising."""
        if not url:
            return None
        try:
            return self.fetch(url)
        except MediaFetchError as e:
            logger.warning("media.fetch_failed", url=url, error=str(e))
            return None

    def close(self) -> None:
        self._session.close()
