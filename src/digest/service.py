"""Multi-topic digest service.

Splits a free-text query into topics, retrieves candidates for each topic,
runs the ranking pipeline, and asks a summarizer for a digest. Topics are
independent and run in parallel; a failure in one topic yields an error
panel for that topic only.
"""

import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime

import structlog

from src.digest.models import (
    PanelItem,
    PanelMeta,
    SearchResponse,
    TopicDigest,
    TopicPanel,
)
from src.digest.retrieval import NewsRetriever
from src.digest.summarizer import DigestSummarizer, HeadlineSummarizer
from src.digest.time import time_ago
from src.digest.topics import enhance_search_query, split_topics
from src.ranker.constants import DEFAULT_PREFILTER_WINDOW_HOURS
from src.ranker.models import ScoredItem
from src.ranker.pipeline import TopicPipeline
from src.ranker.profiles import Preferences, ProfileName
from src.settings import AppSettings


logger = structlog.get_logger()


class DigestService:
    """Builds topic panels for a search query."""

    def __init__(
        self,
        retriever: NewsRetriever,
        summarizer: DigestSummarizer | None = None,
        settings: AppSettings | None = None,
        now: datetime | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            retriever: Source of candidate items.
            summarizer: Digest builder (defaults to HeadlineSummarizer).
            settings: Application settings (defaults to environment).
            now: Fixed reference time; the current time per request if None.
        """
        self._retriever = retriever
        self._summarizer = summarizer or HeadlineSummarizer()
        self._settings = settings or AppSettings()
        self._now = now

    def search(
        self,
        query: str,
        profile_name: str | None = None,
        preferences: Preferences | None = None,
    ) -> SearchResponse:
        """Build one panel per topic of the query.

        Args:
            query: Free-text query, topics separated by commas or "and".
            profile_name: Requested profile; falls back to the preferred
                default profile, then to ``default``.
            preferences: Optional user preferences.

        Returns:
            SearchResponse with panels in topic order.
        """
        run_id = str(uuid.uuid4())
        now = self._now or datetime.now(UTC)
        requested = profile_name or (preferences.default_profile if preferences else None)
        name = ProfileName.parse(requested)
        topics = split_topics(query, self._settings.max_topics)

        log = logger.bind(component="digest", run_id=run_id, profile=name.value)
        log.info(
            "search_started",
            query=query,
            topics=len(topics),
            has_preferences=preferences is not None,
        )

        workers = min(self._settings.max_workers, len(topics))
        if workers <= 1:
            panels = [
                self._safe_build_panel(t, name, preferences, now, run_id) for t in topics
            ]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [
                    executor.submit(
                        self._safe_build_panel, t, name, preferences, now, run_id
                    )
                    for t in topics
                ]
                panels = [f.result() for f in futures]

        log.info("search_complete", panels=len(panels))
        return SearchResponse(query=query, panels=panels)

    def _safe_build_panel(
        self,
        topic: str,
        name: ProfileName,
        preferences: Preferences | None,
        now: datetime,
        run_id: str,
    ) -> TopicPanel:
        """Build a panel, turning any failure into an error panel."""
        try:
            return self._build_panel(topic, name, preferences, now, run_id)
        except Exception as e:  # noqa: BLE001
            logger.error(
                "topic_panel_failed",
                component="digest",
                run_id=run_id,
                topic=topic,
                error=str(e),
                exc_info=True,
            )
            return TopicPanel(
                title=topic,
                summary_md=f"Error: {str(e) or 'Failed to fetch'}",
                meta=PanelMeta(
                    recent_window_hours=DEFAULT_PREFILTER_WINDOW_HOURS,
                    profile=name.value,
                ),
            )

    def _build_panel(
        self,
        topic: str,
        name: ProfileName,
        preferences: Preferences | None,
        now: datetime,
        run_id: str,
    ) -> TopicPanel:
        """Retrieve, rank and summarize one topic.

        Args:
            topic: Topic text.
            name: Resolved profile name.
            preferences: Optional user preferences.
            now: Reference time.
            run_id: Request identifier for logging.

        Returns:
            TopicPanel for the topic.
        """
        pipeline = TopicPipeline.for_profile(
            name,
            preferences,
            now=now,
            max_links=self._settings.max_links,
            run_id=run_id,
        )
        hours = pipeline.effective_window_hours

        search_query = enhance_search_query(topic, name, pipeline.focus)
        items = self._retriever.fetch(search_query, self._settings.max_links)

        if not items:
            return TopicPanel(
                title=topic,
                summary_md=f'No recent news found for "{topic}".',
                meta=PanelMeta(recent_window_hours=hours, profile=name.value),
            )

        result = pipeline.run(items, topic)
        shortlist = result.items[: self._settings.summary_items]
        digest: TopicDigest = self._summarizer.summarize(shortlist, topic, hours)

        shown = result.ranked_items[: self._links_to_show(preferences)]
        return TopicPanel(
            title=topic,
            summary_md=digest.summary_md,
            insights=digest.insights,
            takeaways=digest.takeaways,
            actions=digest.actions,
            watch=digest.watch,
            tags=digest.tags,
            items=[self._panel_item(s, now) for s in shown],
            meta=PanelMeta(
                used_llm=digest.used_llm,
                recent_window_hours=hours,
                profile=name.value,
                profile_fallback=result.profile_fallback,
            ),
        )

    def _links_to_show(self, preferences: Preferences | None) -> int:
        if preferences is not None:
            preferred = preferences.display.links_to_show
            if preferred is not None and preferred > 0:
                return preferred
        return self._settings.links_to_show

    @staticmethod
    def _panel_item(scored: ScoredItem, now: datetime) -> PanelItem:
        item = scored.item
        pub_date = item.pub_date
        if isinstance(pub_date, datetime):
            pub_date = pub_date.isoformat()
        return PanelItem(
            title=item.title,
            url=item.url,
            source=item.source,
            pub_date=pub_date,
            time_ago=time_ago(item.pub_date, now),
            score=round(scored.score, 4),
        )
