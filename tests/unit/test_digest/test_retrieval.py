"""Unit tests for Google News retrieval."""

import httpx

from src.digest.retrieval import GoogleNewsRetriever


RSS_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>fed rates - Google News</title>
    <item>
      <title>Fed raises rates</title>
      <link>https://news.google.com/articles/1</link>
      <pubDate>Mon, 12 Jun 2017 22:00:00 GMT</pubDate>
      <source url="https://www.reuters.com">Reuters</source>
    </item>
    <item>
      <title></title>
      <link>https://news.google.com/articles/skip</link>
    </item>
    <item>
      <title>Markets react</title>
      <link>https://news.google.com/articles/2</link>
    </item>
    <item>
      <title>Third story</title>
      <link>https://news.google.com/articles/3</link>
    </item>
  </channel>
</rss>
"""


def _make_retriever(handler: httpx.MockTransport) -> GoogleNewsRetriever:
    """Create a retriever using a mock transport."""
    return GoogleNewsRetriever(region="US:en", timeout=1.0, transport=handler)


class TestBuildUrl:
    """Tests for search URL construction."""

    def test_us_edition(self) -> None:
        """Query is encoded and edition parameters are set."""
        retriever = GoogleNewsRetriever(region="US:en")
        url = retriever.build_url("fed rates (markets OR stocks)")
        assert url == (
            "https://news.google.com/rss/search"
            "?q=fed+rates+%28markets+OR+stocks%29"
            "&hl=en-US&gl=US&ceid=US:en"
        )

    def test_other_edition(self) -> None:
        """Non-US editions use their own country and language."""
        url = GoogleNewsRetriever(region="DE:de").build_url("zinsen")
        assert url.endswith("&hl=de-DE&gl=DE&ceid=DE:de")


class TestFetch:
    """Tests for GoogleNewsRetriever.fetch."""

    def test_parses_entries(self) -> None:
        """Entries map to items; entries without a title are skipped."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, content=RSS_FEED)

        items = _make_retriever(httpx.MockTransport(handler)).fetch("fed rates", 10)

        assert [i.title for i in items] == [
            "Fed raises rates",
            "Markets react",
            "Third story",
        ]
        assert items[0].url == "https://news.google.com/articles/1"
        assert items[0].source == "Reuters"
        assert items[0].pub_date == "Mon, 12 Jun 2017 22:00:00 GMT"
        assert items[1].source is None
        assert items[1].pub_date is None
        assert requests[0].url.params["q"] == "fed rates"
        assert "SignalFeedBot" in requests[0].headers["User-Agent"]

    def test_max_items(self) -> None:
        """At most max_items items are returned."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, content=RSS_FEED)
        )
        items = _make_retriever(transport).fetch("fed rates", 2)
        assert len(items) == 2

    def test_http_error_returns_empty(self) -> None:
        """Error status codes give an empty list."""
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        assert _make_retriever(transport).fetch("fed rates", 10) == []

    def test_transport_error_returns_empty(self) -> None:
        """Connection failures give an empty list."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        assert _make_retriever(httpx.MockTransport(handler)).fetch("fed", 10) == []

    def test_garbage_feed_returns_empty(self) -> None:
        """Unparseable bodies give an empty list."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, content=b"<html><body>nope")
        )
        assert _make_retriever(transport).fetch("fed", 10) == []
