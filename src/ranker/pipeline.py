"""Topic ranking pipeline orchestrator."""

import time
from collections.abc import Sequence
from datetime import UTC, datetime

import structlog

from src.ranker.constants import DEFAULT_MAX_LINKS, DEFAULT_PREFILTER_WINDOW_HOURS
from src.ranker.dedupe import collapse_near_duplicates
from src.ranker.diversity import cap_per_domain, sort_by_score
from src.ranker.focus import RankFocus, hard_filter, resolve_focus, soft_boost
from src.ranker.focus_policy import FocusDecision, select_focus_mode
from src.ranker.metrics import PipelineMetrics
from src.ranker.models import FocusedItem, FocusMode, Item, PipelineResult
from src.ranker.profiles import (
    Preferences,
    ProfileName,
    ProfileOverrides,
    RankProfile,
    resolve_profile,
)
from src.ranker.recency import prefilter_recent
from src.ranker.scorer import RelevanceScorer


logger = structlog.get_logger()


class TopicPipeline:
    """Ranks one topic's candidate items into a short, diverse list.

    Stages, in order:
        - recency prefilter (with minimum-count fallback)
        - focus selection: hard filter, soft boost, or nothing
        - relevance scoring and stable descending sort
        - per-domain diversity cap
        - near-duplicate collapse (shortlist of at most 20)

    A pipeline holds no state between runs; each ``run`` call collects its
    own metrics.
    """

    def __init__(  # noqa: PLR0913
        self,
        profile: RankProfile,
        focus: RankFocus,
        profile_name: ProfileName | str = ProfileName.DEFAULT,
        now: datetime | None = None,
        max_links: int = DEFAULT_MAX_LINKS,
        run_id: str = "",
    ) -> None:
        """Initialize the pipeline.

        Args:
            profile: Resolved ranking profile (overrides already applied).
            focus: Focus for the profile.
            profile_name: Profile name, used by the focus selection policy.
            now: Reference time for recency (defaults to the current time).
            max_links: Retrieval cap applied by the prefilter.
            run_id: Run identifier for logging.
        """
        self._profile = profile
        self._focus = focus
        self._profile_name = (
            profile_name
            if isinstance(profile_name, ProfileName)
            else ProfileName.parse(profile_name)
        )
        self._now = now or datetime.now(UTC)
        self._max_links = max_links
        self._run_id = run_id
        self._log = logger.bind(
            component="ranker",
            run_id=run_id,
            profile=self._profile_name.value,
        )

    @classmethod
    def for_profile(
        cls,
        profile_name: str | None,
        preferences: Preferences | None = None,
        now: datetime | None = None,
        max_links: int = DEFAULT_MAX_LINKS,
        run_id: str = "",
    ) -> "TopicPipeline":
        """Build a pipeline from a profile name and user preferences.

        Args:
            profile_name: Requested profile; unknown names use default.
            preferences: Optional user preferences carrying overrides.
            now: Reference time.
            max_links: Retrieval cap.
            run_id: Run identifier for logging.

        Returns:
            Configured TopicPipeline.
        """
        name = ProfileName.parse(profile_name)
        profile = resolve_profile(name, ProfileOverrides.from_preferences(preferences))
        return cls(
            profile=profile,
            focus=resolve_focus(name),
            profile_name=name,
            now=now,
            max_links=max_links,
            run_id=run_id,
        )

    @property
    def profile(self) -> RankProfile:
        """Resolved ranking profile."""
        return self._profile

    @property
    def focus(self) -> RankFocus:
        """Focus for the profile."""
        return self._focus

    @property
    def effective_window_hours(self) -> int:
        """Recency window used by the prefilter."""
        return self._profile.window_hours or DEFAULT_PREFILTER_WINDOW_HOURS

    def run(self, items: Sequence[Item], topic: str) -> PipelineResult:
        """Rank items for a topic.

        This is the main entry point for the pipeline.

        Args:
            items: Candidate items from retrieval.
            topic: Topic text used for text scoring.

        Returns:
            PipelineResult with the shortlist and the fallback flag.
        """
        start = time.perf_counter()
        metrics = PipelineMetrics()
        log = self._log.bind(topic=topic)

        log.info("pipeline_started", items_in=len(items))

        # Phase 1: Recency prefilter
        prefiltered = prefilter_recent(
            items,
            window_hours=self.effective_window_hours,
            max_links=self._max_links,
            now=self._now,
        )
        pool = prefiltered.items
        metrics.record_prefilter(len(items), prefiltered.recent_count, len(pool))
        metrics.recency_fallback = prefiltered.used_fallback

        # Phase 2: Focus selection
        decision, focused = self._apply_focus(pool)
        metrics.record_focus(decision.hard_hits, len(focused))

        log.info(
            "focus_mode_selected",
            pool=len(pool),
            recent=prefiltered.recent_count,
            hard_hits=decision.hard_hits,
            focus_mode=decision.mode.value,
            reason=decision.reason,
            profile_fallback=decision.profile_fallback,
        )

        # Phase 3: Score and sort
        start_score = time.perf_counter()
        scorer = RelevanceScorer(
            query=topic,
            profile=self._profile,
            now=self._now,
            run_id=self._run_id,
        )
        ordered = sort_by_score(scorer.score_items(focused))
        metrics.scoring_duration_ms = (time.perf_counter() - start_score) * 1000

        # Phase 4: Diversity cap
        capped = cap_per_domain(ordered, self._profile.per_domain_cap)

        # Phase 5: Near-duplicate collapse
        shortlist = collapse_near_duplicates(
            capped, enabled=self._profile.dedupe_near_dupes
        )

        metrics.record_drops(len(ordered) - len(capped), len(capped) - len(shortlist))
        metrics.items_out = len(shortlist)
        metrics.total_duration_ms = (time.perf_counter() - start) * 1000

        log.info(
            "pipeline_complete",
            items_in=len(items),
            items_out=len(shortlist),
            profile_fallback=decision.profile_fallback,
            window_hours=self.effective_window_hours,
        )

        return PipelineResult(
            topic=topic,
            profile_name=self._profile_name.value,
            ranked_items=tuple(shortlist),
            profile_fallback=decision.profile_fallback,
            effective_window_hours=self.effective_window_hours,
            focus_mode=decision.mode,
            hard_hits=decision.hard_hits,
            metrics=metrics,
        )

    def _apply_focus(
        self, pool: list[Item]
    ) -> tuple[FocusDecision, list[Item] | list[FocusedItem]]:
        """Apply the focus selection policy to a pool.

        Args:
            pool: Prefiltered items.

        Returns:
            Tuple of (decision, working pool).
        """
        if not pool:
            return FocusDecision(FocusMode.UNFILTERED, 0, "empty_pool"), []

        hard_hits = hard_filter(pool, self._focus)
        decision = select_focus_mode(len(hard_hits), self._profile_name)

        if decision.mode is FocusMode.HARD_FILTERED:
            return decision, hard_hits
        if decision.mode is FocusMode.SOFT_BOOSTED:
            return decision, soft_boost(pool, self._focus)
        return decision, pool


def rank_topic_pure(  # noqa: PLR0913
    items: Sequence[Item],
    topic: str,
    profile: RankProfile,
    focus: RankFocus,
    profile_name: ProfileName | str = ProfileName.DEFAULT,
    now: datetime | None = None,
    max_links: int = DEFAULT_MAX_LINKS,
    run_id: str = "pure",
) -> PipelineResult:
    """Pure function API for ranking one topic.

    Args:
        items: Candidate items.
        topic: Topic text.
        profile: Resolved ranking profile.
        focus: Profile focus.
        profile_name: Profile name for the focus selection policy.
        now: Reference time.
        max_links: Retrieval cap.
        run_id: Run identifier.

    Returns:
        PipelineResult with the shortlist.
    """
    pipeline = TopicPipeline(
        profile=profile,
        focus=focus,
        profile_name=profile_name,
        now=now,
        max_links=max_links,
        run_id=run_id,
    )
    return pipeline.run(items, topic)
