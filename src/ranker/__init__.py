"""Topic ranking and focus pipeline.

This module turns a raw candidate list for one topic into a short,
relevance-ranked, domain-diversified shortlist. It applies a recency
prefilter, a profile focus (hard filter with soft-boost fallback),
relevance scoring, a per-domain cap, and near-duplicate collapsing.
"""

from src.ranker.focus import RankFocus, hard_filter, resolve_focus, soft_boost
from src.ranker.focus_policy import FocusDecision, select_focus_mode
from src.ranker.models import (
    FocusedItem,
    FocusMode,
    Item,
    PipelineResult,
    ScoreComponents,
    ScoredItem,
)
from src.ranker.pipeline import TopicPipeline, rank_topic_pure
from src.ranker.profiles import (
    Preferences,
    ProfileName,
    ProfileOverrides,
    RankProfile,
    resolve_profile,
)


__all__ = [
    "FocusDecision",
    "FocusMode",
    "FocusedItem",
    "Item",
    "PipelineResult",
    "Preferences",
    "ProfileName",
    "ProfileOverrides",
    "RankFocus",
    "RankProfile",
    "ScoreComponents",
    "ScoredItem",
    "TopicPipeline",
    "hard_filter",
    "rank_topic_pure",
    "resolve_focus",
    "resolve_profile",
    "select_focus_mode",
    "soft_boost",
]
