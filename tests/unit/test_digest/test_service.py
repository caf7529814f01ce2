"""Unit tests for the digest service."""

import threading
from datetime import timedelta
from unittest.mock import MagicMock

from src.digest.models import TopicDigest
from src.digest.service import DigestService
from src.ranker.models import Item
from src.ranker.profiles import Preferences
from src.settings import AppSettings
from tests.helpers.time import FIXED_NOW


def _make_items(topic: str, count: int = 3) -> list[Item]:
    """Create test items for a topic."""
    return [
        Item(
            title=f"{topic} story {i}",
            url=f"https://site{i}.com/{topic.replace(' ', '-')}",
            source=f"site{i}.com",
            pub_date=FIXED_NOW - timedelta(hours=i + 1),
        )
        for i in range(count)
    ]


class FakeRetriever:
    """Retriever returning canned items per search string."""

    def __init__(self, items: dict[str, list[Item]] | None = None) -> None:
        self.items = items or {}
        self.queries: list[str] = []
        self._lock = threading.Lock()

    def fetch(self, query: str, max_items: int) -> list[Item]:
        with self._lock:
            self.queries.append(query)
        if query == "explode":
            msg = "upstream exploded"
            raise RuntimeError(msg)
        return self.items.get(query, _make_items(query))[:max_items]


def _make_service(
    retriever: FakeRetriever | None = None,
    max_workers: int = 4,
) -> DigestService:
    """Create a DigestService pinned to FIXED_NOW."""
    return DigestService(
        retriever=retriever or FakeRetriever(),
        settings=AppSettings(max_workers=max_workers, links_to_show=2),
        now=FIXED_NOW,
    )


class TestSearch:
    """Tests for DigestService.search."""

    def test_one_panel_per_topic_in_order(self) -> None:
        """Panels follow the query's topic order."""
        response = _make_service().search("fed rates, nvidia and oil")

        assert response.query == "fed rates, nvidia and oil"
        assert [p.title for p in response.panels] == ["fed rates", "nvidia", "oil"]

    def test_sequential_matches_parallel(self) -> None:
        """A single worker produces the same panels."""
        parallel = _make_service(max_workers=4).search("fed, oil, gold")
        sequential = _make_service(max_workers=1).search("fed, oil, gold")
        assert parallel.panels == sequential.panels

    def test_empty_query(self) -> None:
        """A blank query produces no panels."""
        assert _make_service().search("  ").panels == []

    def test_panel_contents(self) -> None:
        """Panels carry items, digest text and metadata."""
        panel = _make_service().search("fed").panels[0]

        assert panel.type == "topic"
        assert len(panel.items) == 2
        assert panel.items[0].title == "fed story 0"
        assert panel.items[0].time_ago == "1h ago"
        assert panel.items[0].pub_date is not None
        assert panel.items[0].score is not None
        assert panel.insights
        assert panel.meta.profile == "default"
        assert panel.meta.recent_window_hours == 48
        assert panel.meta.profile_fallback is False
        assert panel.meta.used_llm is False

    def test_no_items(self) -> None:
        """Topics without results get a placeholder panel."""
        retriever = FakeRetriever({"quiet": []})
        panel = _make_service(retriever).search("quiet").panels[0]

        assert panel.items == []
        assert panel.summary_md == 'No recent news found for "quiet".'

    def test_failing_topic_yields_error_panel(self) -> None:
        """One failing topic does not affect the others."""
        response = _make_service().search("fed, explode, oil")

        assert [p.title for p in response.panels] == ["fed", "explode", "oil"]
        error_panel = response.panels[1]
        assert error_panel.summary_md == "Error: upstream exploded"
        assert error_panel.items == []
        assert error_panel.meta.recent_window_hours == 72
        assert response.panels[0].items
        assert response.panels[2].items


class TestProfilesAndPreferences:
    """Tests for profile and preference handling."""

    def test_profile_enhances_query(self) -> None:
        """Focused profiles add keywords to the retrieval query."""
        retriever = FakeRetriever()
        _make_service(retriever).search("rates", profile_name="finance")
        assert retriever.queries == ["rates (markets OR stocks)"]

    def test_default_profile_from_preferences(self) -> None:
        """Preferences choose the profile when none is requested."""
        prefs = Preferences.model_validate({"defaultProfile": "ai"})
        panel = _make_service().search("models", preferences=prefs).panels[0]
        assert panel.meta.profile == "ai"
        assert panel.meta.recent_window_hours == 72

    def test_explicit_profile_wins(self) -> None:
        """An explicit profile beats the preferred default."""
        prefs = Preferences.model_validate({"defaultProfile": "ai"})
        panel = (
            _make_service()
            .search("rates", profile_name="finance", preferences=prefs)
            .panels[0]
        )
        assert panel.meta.profile == "finance"

    def test_links_to_show_preference(self) -> None:
        """Display preferences change the number of links shown."""
        prefs = Preferences.model_validate({"display": {"linksToShow": 3}})
        panel = _make_service().search("fed", preferences=prefs).panels[0]
        assert len(panel.items) == 3

    def test_window_preference(self) -> None:
        """The time window preference is reported in panel metadata."""
        prefs = Preferences.model_validate({"search": {"timeWindowHours": 6}})
        panel = _make_service().search("fed", preferences=prefs).panels[0]
        assert panel.meta.recent_window_hours == 6

    def test_summarizer_receives_shortlist(self) -> None:
        """The summarizer gets ranked items and the effective window."""
        summarizer = MagicMock()
        summarizer.summarize.return_value = TopicDigest(
            summary_md="custom", used_llm=True
        )
        service = DigestService(
            retriever=FakeRetriever(),
            summarizer=summarizer,
            settings=AppSettings(max_workers=1),
            now=FIXED_NOW,
        )

        panel = service.search("fed").panels[0]

        items, topic, hours = summarizer.summarize.call_args.args
        assert topic == "fed"
        assert hours == 48
        assert [i.title for i in items] == [
            "fed story 0",
            "fed story 1",
            "fed story 2",
        ]
        assert panel.summary_md == "custom"
        assert panel.meta.used_llm is True


class TestSerialization:
    """Tests for response serialization."""

    def test_camel_case_dump(self) -> None:
        """Responses dump with camelCase keys."""
        payload = _make_service().search("fed").model_dump(mode="json", by_alias=True)
        panel = payload["panels"][0]

        assert "summaryMd" in panel
        assert "profileFallback" in panel["meta"]
        assert "recentWindowHours" in panel["meta"]
        assert "timeAgo" in panel["items"][0]
