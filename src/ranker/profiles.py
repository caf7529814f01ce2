"""Ranking profiles, user preferences, and profile resolution.

A profile is a named bundle of scoring weights and thresholds tuned for a
topic category. User preferences may override three of its fields for a
single request; each override is validated on its own and silently
ignored when it is absent, zero, or out of range.
"""

from enum import Enum
from typing import Annotated

import structlog
from pydantic import Field

from src.data_model import ClientPayloadModel, StrictBaseModel


logger = structlog.get_logger()

# Override inputs are kept as sent; resolve_profile rejects unusable ones.
OverrideValue = int | float | str | bool | None


class ProfileName(str, Enum):
    """Known ranking profile names."""

    DEFAULT = "default"
    TECHNOLOGY = "technology"
    FINANCE = "finance"
    AI = "ai"
    SPORTS = "sports"
    WORLD = "world"

    @classmethod
    def parse(cls, name: str | None) -> "ProfileName":
        """Parse a profile name, falling back to DEFAULT.

        Args:
            name: Raw profile name (case-insensitive), or None.

        Returns:
            Matching ProfileName, DEFAULT for unknown or missing names.
        """
        if not name:
            return cls.DEFAULT
        try:
            return cls(name.strip().lower())
        except ValueError:
            return cls.DEFAULT


class RankProfile(StrictBaseModel):
    """Scoring configuration for one profile.

    Attributes:
        bm25_weight: Multiplier for the title text score.
        recency_alpha: Weight of the recency decay (0 disables it).
        per_domain_cap: Maximum shortlisted items sharing one domain.
        source_prior: Domain to score bonus.
        dedupe_near_dupes: Whether near-duplicate titles are collapsed.
        window_hours: Recency window, if the profile defines one.
    """

    bm25_weight: Annotated[float, Field(ge=0.0)] = 1.0
    recency_alpha: Annotated[float, Field(ge=0.0, le=1.0)] = 0.22
    per_domain_cap: Annotated[int, Field(ge=1)] = 2
    source_prior: dict[str, float] = Field(default_factory=dict)
    dedupe_near_dupes: bool = True
    window_hours: Annotated[int | None, Field(ge=1)] = 48


class SearchPreferences(ClientPayloadModel):
    """Search preferences from client storage."""

    time_window_hours: OverrideValue = None


class RankingPreferences(ClientPayloadModel):
    """Ranking preferences from client storage."""

    recency_alpha: OverrideValue = None
    per_domain_cap: OverrideValue = None
    bm25_weight: float | None = None
    profile_alpha: float | None = None
    dedupe_near_dupes: bool | None = None


class DisplayPreferences(ClientPayloadModel):
    """Display preferences from client storage."""

    links_to_show: int | None = None


class Preferences(ClientPayloadModel):
    """User preferences consumed (read-only) by the ranking pipeline.

    Only ``ranking.per_domain_cap``, ``ranking.recency_alpha`` and
    ``search.time_window_hours`` influence ranking; the remaining fields
    are carried for the digest service and display.
    """

    search: SearchPreferences = Field(default_factory=SearchPreferences)
    ranking: RankingPreferences = Field(default_factory=RankingPreferences)
    display: DisplayPreferences = Field(default_factory=DisplayPreferences)
    default_profile: str | None = None


class ProfileOverrides(StrictBaseModel):
    """Per-request overrides for a profile's base values.

    Values are stored as received; ``resolve_profile`` decides whether
    each one is applicable.

    Attributes:
        per_domain_cap: Replacement per-domain cap.
        recency_alpha: Replacement recency weight.
        window_hours: Replacement recency window.
    """

    per_domain_cap: OverrideValue = None
    recency_alpha: OverrideValue = None
    window_hours: OverrideValue = None

    @classmethod
    def from_preferences(cls, preferences: Preferences | None) -> "ProfileOverrides":
        """Extract the ranking overrides from user preferences.

        Args:
            preferences: User preferences, or None.

        Returns:
            Overrides (all empty when preferences are missing).
        """
        if preferences is None:
            return cls()
        return cls(
            per_domain_cap=preferences.ranking.per_domain_cap,
            recency_alpha=preferences.ranking.recency_alpha,
            window_hours=preferences.search.time_window_hours,
        )


_BASE_PROFILES: dict[ProfileName, RankProfile] = {
    ProfileName.TECHNOLOGY: RankProfile(
        bm25_weight=1.2,
        recency_alpha=0.35,
        per_domain_cap=1,
        source_prior={
            "techcrunch.com": 0.30,
            "theverge.com": 0.25,
            "wired.com": 0.25,
            "arstechnica.com": 0.30,
            "anandtech.com": 0.35,
        },
        dedupe_near_dupes=True,
        window_hours=48,
    ),
    ProfileName.FINANCE: RankProfile(
        bm25_weight=1.0,
        recency_alpha=0.40,
        per_domain_cap=1,
        source_prior={
            "reuters.com": 0.35,
            "bloomberg.com": 0.35,
            "ft.com": 0.40,
            "wsj.com": 0.30,
        },
        dedupe_near_dupes=True,
        window_hours=36,
    ),
    ProfileName.AI: RankProfile(
        bm25_weight=1.1,
        recency_alpha=0.30,
        per_domain_cap=1,
        source_prior={
            "semianalysis.com": 0.40,
            "huggingface.co": 0.25,
            "arxiv.org": 0.25,
            "openai.com": 0.20,
        },
        dedupe_near_dupes=True,
        window_hours=72,
    ),
    ProfileName.DEFAULT: RankProfile(
        bm25_weight=1.0,
        recency_alpha=0.22,
        per_domain_cap=2,
        source_prior={},
        dedupe_near_dupes=True,
        window_hours=48,
    ),
}


def base_profile(name: ProfileName | str | None) -> RankProfile:
    """Get the base profile for a name, without overrides.

    Sports and world share the default scoring table.

    Args:
        name: Profile name.

    Returns:
        Base RankProfile.
    """
    profile_name = name if isinstance(name, ProfileName) else ProfileName.parse(name)
    return _BASE_PROFILES.get(profile_name, _BASE_PROFILES[ProfileName.DEFAULT])


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _valid_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _valid_recency_alpha(value: object) -> bool:
    return _is_number(value) and 0.0 < float(value) <= 1.0  # type: ignore[arg-type]


def resolve_profile(
    name: ProfileName | str | None,
    overrides: ProfileOverrides | None = None,
) -> RankProfile:
    """Resolve a profile name and apply validated overrides.

    Unknown names resolve to the default profile. Never raises for
    unknown names or unusable override values.

    Args:
        name: Profile name.
        overrides: Optional per-request overrides.

    Returns:
        A fresh RankProfile.
    """
    profile = base_profile(name)
    if overrides is None:
        return profile.model_copy(deep=True)

    updates: dict[str, object] = {}
    rejected: list[str] = []

    if overrides.per_domain_cap is not None:
        if _valid_positive_int(overrides.per_domain_cap):
            updates["per_domain_cap"] = overrides.per_domain_cap
        else:
            rejected.append("per_domain_cap")

    if overrides.recency_alpha is not None:
        if _valid_recency_alpha(overrides.recency_alpha):
            updates["recency_alpha"] = float(overrides.recency_alpha)
        else:
            rejected.append("recency_alpha")

    if overrides.window_hours is not None:
        if _valid_positive_int(overrides.window_hours):
            updates["window_hours"] = overrides.window_hours
        else:
            rejected.append("window_hours")

    if rejected:
        logger.debug(
            "profile_overrides_ignored",
            component="ranker",
            subcomponent="profiles",
            fields=rejected,
        )

    return profile.model_copy(update=updates, deep=True)
