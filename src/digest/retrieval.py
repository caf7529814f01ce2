"""News retrieval collaborators."""

from typing import Protocol
from urllib.parse import quote_plus

import feedparser  # type: ignore[import-untyped]
import httpx
import structlog

from src.ranker.models import Item


logger = structlog.get_logger()

GOOGLE_NEWS_SEARCH_URL = "https://news.google.com/rss/search"


class NewsRetriever(Protocol):
    """Fetches raw candidate items for a search string."""

    def fetch(self, query: str, max_items: int) -> list[Item]:
        """Fetch up to ``max_items`` items for ``query``."""
        ...


class GoogleNewsRetriever:
    """Retrieves items from the Google News RSS search feed.

    Failures never propagate: HTTP errors, transport errors and unusable
    feeds are logged and produce an empty list.
    """

    def __init__(
        self,
        region: str = "US:en",
        timeout: float = 10.0,
        user_agent: str = "Mozilla/5.0 (compatible; SignalFeedBot/1.0)",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the retriever.

        Args:
            region: Google News edition, e.g. ``US:en``.
            timeout: Request timeout in seconds.
            user_agent: User-Agent header sent with requests.
            transport: Optional httpx transport (tests use MockTransport).
        """
        self._region = region
        self._timeout = timeout
        self._user_agent = user_agent
        self._transport = transport
        self._log = logger.bind(component="retrieval", provider="google_news")

    def build_url(self, query: str) -> str:
        """Build the RSS search URL for a query.

        Args:
            query: Search string.

        Returns:
            Feed URL.
        """
        country, _, language = self._region.partition(":")
        language = language or "en"
        return (
            f"{GOOGLE_NEWS_SEARCH_URL}?q={quote_plus(query)}"
            f"&hl={language}-{country}&gl={country}&ceid={country}:{language}"
        )

    def fetch(self, query: str, max_items: int = 30) -> list[Item]:
        """Fetch items for a search string.

        Args:
            query: Search string.
            max_items: Maximum number of items returned.

        Returns:
            Items in feed order.
        """
        url = self.build_url(query)
        log = self._log.bind(query=query)

        try:
            with httpx.Client(
                timeout=self._timeout,
                follow_redirects=True,
                headers={"User-Agent": self._user_agent},
                transport=self._transport,
            ) as client:
                response = client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            log.warning("retrieval_failed", status_code=e.response.status_code)
            return []
        except httpx.HTTPError as e:
            log.warning("retrieval_failed", error=str(e))
            return []

        feed = feedparser.parse(response.content)
        if feed.bozo and not feed.entries:
            log.warning("feed_parse_failed", bozo_exception=str(feed.bozo_exception))
            return []

        items = self._parse_entries(feed.entries, max_items)
        log.info("retrieval_complete", items=len(items))
        return items

    @staticmethod
    def _parse_entries(
        entries: list[feedparser.FeedParserDict], max_items: int
    ) -> list[Item]:
        """Map feed entries to items, skipping entries without title or link.

        Args:
            entries: Feedparser entries.
            max_items: Maximum number of items.

        Returns:
            Parsed items.
        """
        items: list[Item] = []
        for entry in entries:
            if len(items) >= max_items:
                break

            title = (entry.get("title") or "").strip()
            link = (entry.get("link") or "").strip()
            if not title or not link:
                continue

            source = entry.get("source") or {}
            source_title = (source.get("title") or "").strip() or None
            published = (entry.get("published") or "").strip() or None

            items.append(
                Item(title=title, url=link, source=source_title, pub_date=published)
            )
        return items
