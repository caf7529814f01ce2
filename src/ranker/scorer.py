"""Relevance scoring for topic items."""

import math
from collections.abc import Sequence
from datetime import UTC, datetime

import structlog

from src.ranker.constants import BM25_K1, DEFAULT_SCORING_WINDOW_HOURS
from src.ranker.domains import normalized_domain
from src.ranker.models import FocusedItem, Item, ScoreComponents, ScoredItem
from src.ranker.profiles import RankProfile
from src.ranker.recency import age_hours


logger = structlog.get_logger()


def query_terms(query: str) -> list[str]:
    """Split a query into lowercase whitespace-separated terms."""
    return query.lower().split()


def bm25_text_score(title: str, terms: Sequence[str]) -> float:
    """Compute a simplified BM25 score of a title against query terms.

    Each term contributes ``tf * (k1 + 1) / (tf + k1)`` with ``k1 = 1.2``,
    where ``tf`` is the number of literal occurrences of the term in the
    lowercase title. There is no length normalization or IDF.

    Args:
        title: Item title.
        terms: Lowercase query terms.

    Returns:
        Unweighted text score.
    """
    text = title.lower()
    score = 0.0
    for term in terms:
        tf = text.count(term)
        if tf > 0:
            score += (tf * (BM25_K1 + 1)) / (tf + BM25_K1)
    return score


class RelevanceScorer:
    """Computes composite relevance scores for a topic.

    Scoring formula:
        score = text_score + recency_score + source_prior_score + focus_bonus

    Where:
        - text_score: BM25-style title match times the profile bm25_weight
        - recency_score: recency_alpha * exp(-age / window), 0 outside window
        - source_prior_score: profile bonus for the item's domain
        - focus_bonus: soft boost bonus attached before scoring
    """

    def __init__(
        self,
        query: str,
        profile: RankProfile,
        now: datetime | None = None,
        run_id: str = "",
    ) -> None:
        """Initialize the scorer.

        Args:
            query: Topic text the items are scored against.
            profile: Resolved ranking profile.
            now: Reference time for recency.
            run_id: Run identifier for logging.
        """
        self._terms = query_terms(query)
        self._profile = profile
        self._now = now or datetime.now(UTC)
        self._window_hours = profile.window_hours or DEFAULT_SCORING_WINDOW_HOURS
        self._log = logger.bind(
            component="ranker",
            subcomponent="scorer",
            run_id=run_id,
        )

    @property
    def window_hours(self) -> int:
        """Recency window used for decay."""
        return self._window_hours

    def score_item(
        self, item: Item | FocusedItem, position: int = 0
    ) -> ScoredItem:
        """Compute score for a single item.

        Args:
            item: Item to score, optionally carrying a focus bonus.
            position: Index of the item in the scorer input.

        Returns:
            ScoredItem with computed components.
        """
        if isinstance(item, FocusedItem):
            base, focus_bonus = item.item, item.focus_bonus
        else:
            base, focus_bonus = item, 0.0

        text_score = self._compute_text_score(base)
        recency_score = self._compute_recency_score(base)
        source_prior_score = self._compute_source_prior(base)

        components = ScoreComponents(
            text_score=text_score,
            recency_score=recency_score,
            source_prior_score=source_prior_score,
            focus_bonus=focus_bonus,
            total_score=text_score + recency_score + source_prior_score + focus_bonus,
        )
        return ScoredItem(item=base, components=components, position=position)

    def score_items(self, items: Sequence[Item | FocusedItem]) -> list[ScoredItem]:
        """Score multiple items, preserving input order.

        Args:
            items: Items to score.

        Returns:
            ScoredItems in input order (not sorted).
        """
        scored = [self.score_item(item, i) for i, item in enumerate(items)]

        self._log.debug(
            "scoring_complete",
            items_scored=len(scored),
            min_score=min((s.score for s in scored), default=0.0),
            max_score=max((s.score for s in scored), default=0.0),
        )

        return scored

    def _compute_text_score(self, item: Item) -> float:
        return bm25_text_score(item.title or "", self._terms) * self._profile.bm25_weight

    def _compute_recency_score(self, item: Item) -> float:
        """Compute recency decay score.

        Uses exponential decay: alpha * e^(-age_hours / window_hours).
        Future-dated items count as published now.

        Args:
            item: Item to score.

        Returns:
            Recency score component (0.0 to recency_alpha).
        """
        alpha = self._profile.recency_alpha
        if alpha == 0:
            return 0.0

        age = age_hours(item.pub_date, self._now)
        if age is None or age > self._window_hours:
            return 0.0

        # Future-dated items score as published now, capping this component at alpha.
        return alpha * math.exp(-max(age, 0.0) / self._window_hours)

    def _compute_source_prior(self, item: Item) -> float:
        return self._profile.source_prior.get(normalized_domain(item.url), 0.0)


def score_items(
    items: Sequence[Item | FocusedItem],
    query: str,
    profile: RankProfile,
    now: datetime | None = None,
) -> list[ScoredItem]:
    """Pure function API for scoring items.

    Args:
        items: Items to score.
        query: Topic text.
        profile: Ranking profile.
        now: Reference time.

    Returns:
        ScoredItems in input order.
    """
    return RelevanceScorer(query=query, profile=profile, now=now).score_items(items)
