"""Data models for the topic ranker."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field

from src.data_model import ClientPayloadModel
from src.ranker.metrics import PipelineMetrics


class Item(ClientPayloadModel):
    """A candidate news item as received from the retrieval collaborator.

    Attributes:
        title: Headline text.
        url: Article URL.
        source: Publisher name reported by the feed, if any.
        pub_date: Publish time, either parsed or as the raw feed string.
    """

    title: str = ""
    url: str
    source: str | None = None
    pub_date: datetime | str | None = Field(default=None, alias="pubDate")


@dataclass(frozen=True)
class FocusedItem:
    """An item annotated by the soft booster.

    Attributes:
        item: The underlying item.
        focus_bonus: Bonus for matching the profile focus (0.0 to 0.60).
    """

    item: Item
    focus_bonus: float = 0.0


@dataclass(frozen=True)
class ScoreComponents:
    """Breakdown of an item's score into components.

    Attributes:
        text_score: BM25-style title match, weighted by the profile.
        recency_score: Exponential recency decay contribution.
        source_prior_score: Profile bonus for the item's domain.
        focus_bonus: Soft boost bonus attached before scoring.
        total_score: Sum of all components.
    """

    text_score: float
    recency_score: float
    source_prior_score: float
    focus_bonus: float = 0.0
    total_score: float = 0.0

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary for serialization.

        Returns:
            Dictionary of component name to value.
        """
        return {
            "text_score": self.text_score,
            "recency_score": self.recency_score,
            "source_prior_score": self.source_prior_score,
            "focus_bonus": self.focus_bonus,
            "total_score": self.total_score,
        }


@dataclass(frozen=True)
class ScoredItem:
    """An item with its computed score.

    Attributes:
        item: The item being scored.
        components: Score breakdown by component.
        position: Index of the item in the scorer input, used as the
            tie-breaker when sorting equal scores.
    """

    item: Item
    components: ScoreComponents
    position: int = 0

    @property
    def score(self) -> float:
        """Total score."""
        return self.components.total_score

    @property
    def focus_bonus(self) -> float:
        """Focus bonus attached by the soft booster."""
        return self.components.focus_bonus

    def to_dict(self) -> dict[str, Any]:
        """Serialize as the item payload plus its score fields."""
        payload = self.item.model_dump(mode="json", by_alias=True)
        payload["score"] = round(self.score, 6)
        payload["focusBonus"] = self.focus_bonus
        return payload


class FocusMode(str, Enum):
    """How the profile focus was applied to a topic's pool.

    - HARD_FILTERED: only items matching the focus were kept
    - SOFT_BOOSTED: every item kept, matching items received a bonus
    - UNFILTERED: focus not applied
    """

    HARD_FILTERED = "HARD_FILTERED"
    SOFT_BOOSTED = "SOFT_BOOSTED"
    UNFILTERED = "UNFILTERED"


@dataclass(frozen=True)
class PipelineResult:
    """Complete result of one topic's pipeline run.

    Attributes:
        topic: Topic text the items were ranked against.
        profile_name: Resolved profile name.
        ranked_items: Final shortlist, best first (at most 20).
        profile_fallback: Whether the soft boost branch was taken.
        effective_window_hours: Recency window used by the prefilter.
        focus_mode: Branch chosen by the focus selection policy.
        hard_hits: Number of items the hard focus filter matched.
        metrics: Per-run stage counts and durations.
    """

    topic: str
    profile_name: str
    ranked_items: tuple[ScoredItem, ...]
    profile_fallback: bool
    effective_window_hours: int
    focus_mode: FocusMode = FocusMode.UNFILTERED
    hard_hits: int = 0
    metrics: PipelineMetrics = field(default_factory=PipelineMetrics)

    @property
    def items(self) -> list[Item]:
        """Shortlisted items without score annotations."""
        return [s.item for s in self.ranked_items]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "topic": self.topic,
            "profile": self.profile_name,
            "rankedItems": [s.to_dict() for s in self.ranked_items],
            "profileFallback": self.profile_fallback,
            "effectiveWindowHours": self.effective_window_hours,
            "focusMode": self.focus_mode.value,
            "hardHits": self.hard_hits,
            "metrics": self.metrics.to_dict(),
        }
