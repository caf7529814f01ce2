"""Unit tests for the focus selection policy."""

import pytest

from src.ranker.focus_policy import select_focus_mode
from src.ranker.models import FocusMode
from src.ranker.profiles import ProfileName


class TestSelectFocusMode:
    """Tests for select_focus_mode."""

    @pytest.mark.parametrize("hits", [3, 4, 20])
    def test_enough_hits_hard_filters(self, hits: int) -> None:
        """Three or more hits select the hard filter."""
        decision = select_focus_mode(hits, ProfileName.FINANCE)
        assert decision.mode is FocusMode.HARD_FILTERED
        assert decision.profile_fallback is False

    @pytest.mark.parametrize("hits", [1, 2])
    def test_few_hits_soft_boost(self, hits: int) -> None:
        """One or two hits fall back to soft boosting."""
        decision = select_focus_mode(hits, ProfileName.FINANCE)
        assert decision.mode is FocusMode.SOFT_BOOSTED
        assert decision.profile_fallback is True
        assert decision.reason == "too_few_hard_hits"

    def test_zero_hits_non_default_soft_boosts(self) -> None:
        """Focused profiles still soft boost with no hits."""
        decision = select_focus_mode(0, ProfileName.SPORTS)
        assert decision.mode is FocusMode.SOFT_BOOSTED
        assert decision.profile_fallback is True
        assert decision.reason == "no_hard_hits"

    def test_zero_hits_default_is_unfiltered(self) -> None:
        """Default profile with no hits leaves the pool alone."""
        decision = select_focus_mode(0, ProfileName.DEFAULT)
        assert decision.mode is FocusMode.UNFILTERED
        assert decision.profile_fallback is False

    @pytest.mark.parametrize(
        ("hits", "expected"),
        [
            (1, FocusMode.SOFT_BOOSTED),
            (2, FocusMode.SOFT_BOOSTED),
            (3, FocusMode.HARD_FILTERED),
        ],
    )
    def test_default_profile_follows_hit_count(
        self, hits: int, expected: FocusMode
    ) -> None:
        """The default profile uses the same thresholds when it has hits."""
        decision = select_focus_mode(hits, ProfileName.DEFAULT)
        assert decision.mode is expected
        assert decision.profile_fallback is (expected is FocusMode.SOFT_BOOSTED)

    def test_accepts_string_names(self) -> None:
        """Raw names are parsed."""
        decision = select_focus_mode(0, "Finance")
        assert decision.mode is FocusMode.SOFT_BOOSTED

    def test_boundary_between_modes(self) -> None:
        """Two hits soft boost, three hard filter."""
        assert select_focus_mode(2, "ai").mode is FocusMode.SOFT_BOOSTED
        assert select_focus_mode(3, "ai").mode is FocusMode.HARD_FILTERED
