"""Selection policy between hard filtering and soft boosting.

The policy is a three-state decision:

    hard hits >= 3                  -> HARD_FILTERED
    0 < hard hits < 3               -> SOFT_BOOSTED   (fallback)
    hard hits == 0, non-default     -> SOFT_BOOSTED   (fallback)
    hard hits == 0, default profile -> UNFILTERED

An empty focus keeps every item in the hard filter, so its hit count is
the pool size.
"""

from dataclasses import dataclass

from src.ranker.constants import MIN_HARD_FOCUS_HITS
from src.ranker.models import FocusMode
from src.ranker.profiles import ProfileName


@dataclass(frozen=True)
class FocusDecision:
    """Outcome of the focus selection policy.

    Attributes:
        mode: Chosen focus mode.
        hard_hits: Number of hard filter hits the decision was based on.
        reason: Short machine-readable reason for logging.
    """

    mode: FocusMode
    hard_hits: int
    reason: str

    @property
    def profile_fallback(self) -> bool:
        """Whether the soft boost branch was taken."""
        return self.mode is FocusMode.SOFT_BOOSTED


def select_focus_mode(
    hard_hits: int,
    profile_name: ProfileName | str | None,
) -> FocusDecision:
    """Choose how the profile focus is applied to a pool.

    Args:
        hard_hits: Number of items the hard filter kept.
        profile_name: Resolved profile name.

    Returns:
        FocusDecision with the chosen mode.
    """
    if hard_hits >= MIN_HARD_FOCUS_HITS:
        return FocusDecision(FocusMode.HARD_FILTERED, hard_hits, "enough_hard_hits")

    if hard_hits > 0:
        return FocusDecision(FocusMode.SOFT_BOOSTED, hard_hits, "too_few_hard_hits")

    parsed = (
        profile_name
        if isinstance(profile_name, ProfileName)
        else ProfileName.parse(profile_name)
    )
    if parsed is ProfileName.DEFAULT:
        return FocusDecision(FocusMode.UNFILTERED, hard_hits, "default_profile")

    return FocusDecision(FocusMode.SOFT_BOOSTED, hard_hits, "no_hard_hits")
