"""HTTP page fetching for the content extractors."""

import logging
from typing import NamedTuple

import requests

logger = logging.getLogger(__name__)


class FetchedPage(NamedTuple):
    """Body of a fetched page and the URL it finally resolved to."""

    url: str
    text: str


class PageFetcher:
    """Fetches provider pages, following redirects (short links).

    Every failure (timeout, connection error, non-2xx status) is logged and
    reported as ``None`` so callers can fall through to the next strategy.
    """

    def __init__(
        self,
        timeout: float = 5.0,
        user_agent: str | None = None,
        session: requests.Session | None = None,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        if user_agent:
            self.session.headers.update({"User-Agent": user_agent})
        self.session.headers.update({"Accept-Language": "en-US,en;q=0.5"})

    def fetch(self, url: str) -> FetchedPage | None:
        """Fetch a page.

        Args:
            url: Page to fetch

        Returns:
            FetchedPage or None if the page is unavailable
        """
        if not url or not url.strip():
            return None

        try:
            response = self.session.get(url, timeout=self.timeout, allow_redirects=True)
            response.raise_for_status()
        except requests.exceptions.Timeout:
            logger.warning(f"Timed out fetching {url} after {self.timeout}s")
            return None
        except requests.exceptions.RequestException as e:
            logger.warning(f"Failed to fetch {url}: {e}")
            return None

        logger.debug(f"Fetched {url} ({len(response.text)} chars)")
        return FetchedPage(url=response.url or url, text=response.text)
