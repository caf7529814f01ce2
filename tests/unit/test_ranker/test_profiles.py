"""Unit tests for profile resolution."""

import pytest
from pydantic import ValidationError

from src.ranker.profiles import (
    Preferences,
    ProfileName,
    ProfileOverrides,
    RankProfile,
    base_profile,
    resolve_profile,
)


class TestProfileName:
    """Tests for ProfileName parsing."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("finance", ProfileName.FINANCE),
            ("Technology", ProfileName.TECHNOLOGY),
            (" AI ", ProfileName.AI),
            ("sports", ProfileName.SPORTS),
            ("world", ProfileName.WORLD),
            ("default", ProfileName.DEFAULT),
        ],
    )
    def test_known_names(self, raw: str, expected: ProfileName) -> None:
        """Known names parse case-insensitively."""
        assert ProfileName.parse(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "crypto", "fin ance"])
    def test_unknown_names_fall_back(self, raw: str | None) -> None:
        """Missing and unknown names resolve to default."""
        assert ProfileName.parse(raw) == ProfileName.DEFAULT


class TestBaseProfiles:
    """Tests for the built-in profile table."""

    def test_finance_values(self) -> None:
        """Finance favours wire services with one item per domain."""
        profile = base_profile(ProfileName.FINANCE)
        assert profile.bm25_weight == 1.0
        assert profile.recency_alpha == 0.40
        assert profile.per_domain_cap == 1
        assert profile.window_hours == 36
        assert profile.source_prior["reuters.com"] == 0.35
        assert profile.source_prior["ft.com"] == 0.40

    def test_technology_values(self) -> None:
        """Technology boosts text matches."""
        profile = base_profile("technology")
        assert profile.bm25_weight == 1.2
        assert profile.recency_alpha == 0.35
        assert profile.window_hours == 48
        assert profile.source_prior["anandtech.com"] == 0.35

    def test_ai_values(self) -> None:
        """AI uses a three-day window."""
        profile = base_profile("ai")
        assert profile.bm25_weight == 1.1
        assert profile.window_hours == 72
        assert profile.source_prior["semianalysis.com"] == 0.40

    def test_default_values(self) -> None:
        """Default allows two items per domain and has no priors."""
        profile = base_profile(ProfileName.DEFAULT)
        assert profile.recency_alpha == 0.22
        assert profile.per_domain_cap == 2
        assert profile.source_prior == {}
        assert profile.dedupe_near_dupes is True

    @pytest.mark.parametrize("name", ["sports", "world"])
    def test_sports_and_world_use_default_table(self, name: str) -> None:
        """Sports and world share the default scoring values."""
        assert base_profile(name) == base_profile(ProfileName.DEFAULT)

    def test_profile_is_immutable(self) -> None:
        """Profiles cannot be mutated in place."""
        profile = base_profile(ProfileName.FINANCE)
        with pytest.raises(ValidationError):
            profile.per_domain_cap = 5  # type: ignore[misc]

    def test_invalid_profile_values_rejected(self) -> None:
        """Out-of-range values fail validation."""
        with pytest.raises(ValidationError):
            RankProfile(per_domain_cap=0)
        with pytest.raises(ValidationError):
            RankProfile(recency_alpha=1.5)


class TestResolveProfile:
    """Tests for resolve_profile with overrides."""

    def test_unknown_name_resolves_to_default(self) -> None:
        """Unknown names never raise."""
        assert resolve_profile("crypto") == base_profile(ProfileName.DEFAULT)

    def test_no_overrides_returns_copy(self) -> None:
        """The base table is never shared with callers."""
        resolved = resolve_profile(ProfileName.FINANCE)
        assert resolved == base_profile(ProfileName.FINANCE)
        assert resolved.source_prior is not base_profile(
            ProfileName.FINANCE
        ).source_prior

    def test_valid_overrides_applied(self) -> None:
        """Valid values replace base values."""
        overrides = ProfileOverrides(
            per_domain_cap=3, recency_alpha=0.5, window_hours=12
        )
        profile = resolve_profile(ProfileName.FINANCE, overrides)
        assert profile.per_domain_cap == 3
        assert profile.recency_alpha == 0.5
        assert profile.window_hours == 12
        assert profile.source_prior["reuters.com"] == 0.35

    def test_overrides_do_not_leak_between_calls(self) -> None:
        """Applying overrides leaves the base profile untouched."""
        resolve_profile(ProfileName.FINANCE, ProfileOverrides(per_domain_cap=9))
        assert base_profile(ProfileName.FINANCE).per_domain_cap == 1

    @pytest.mark.parametrize("cap", [0, -1, 2.5, "3", True])
    def test_invalid_cap_ignored(self, cap: object) -> None:
        """Caps that are not positive integers are ignored."""
        profile = resolve_profile(
            ProfileName.FINANCE, ProfileOverrides(per_domain_cap=cap)
        )
        assert profile.per_domain_cap == 1

    @pytest.mark.parametrize("alpha", [0, 0.0, -0.1, 1.5, "0.3"])
    def test_invalid_alpha_ignored(self, alpha: object) -> None:
        """Alpha outside (0, 1] is ignored."""
        profile = resolve_profile(
            ProfileName.FINANCE, ProfileOverrides(recency_alpha=alpha)
        )
        assert profile.recency_alpha == 0.40

    def test_alpha_upper_bound_accepted(self) -> None:
        """Alpha of exactly 1 is applied."""
        profile = resolve_profile(
            ProfileName.DEFAULT, ProfileOverrides(recency_alpha=1)
        )
        assert profile.recency_alpha == 1.0

    @pytest.mark.parametrize("hours", [0, None, -4, 1.5])
    def test_unusable_window_ignored(self, hours: object) -> None:
        """Zero, missing, negative and fractional windows are ignored."""
        profile = resolve_profile(
            ProfileName.AI, ProfileOverrides(window_hours=hours)
        )
        assert profile.window_hours == 72


class TestPreferences:
    """Tests for preference parsing and override extraction."""

    def test_camel_case_payload(self) -> None:
        """Client payloads use camelCase keys."""
        prefs = Preferences.model_validate(
            {
                "search": {"timeWindowHours": 24},
                "ranking": {"perDomainCap": 3, "recencyAlpha": 0.5},
                "display": {"linksToShow": 5},
                "defaultProfile": "finance",
                "theme": "dark",
            }
        )
        assert prefs.search.time_window_hours == 24
        assert prefs.ranking.per_domain_cap == 3
        assert prefs.display.links_to_show == 5
        assert prefs.default_profile == "finance"

    def test_overrides_from_preferences(self) -> None:
        """Only cap, alpha and window become overrides."""
        prefs = Preferences.model_validate(
            {
                "search": {"timeWindowHours": 24},
                "ranking": {"perDomainCap": 3, "recencyAlpha": 0.5, "bm25Weight": 9},
            }
        )
        overrides = ProfileOverrides.from_preferences(prefs)
        assert overrides.per_domain_cap == 3
        assert overrides.recency_alpha == 0.5
        assert overrides.window_hours == 24

        profile = resolve_profile(ProfileName.DEFAULT, overrides)
        assert profile.bm25_weight == 1.0

    def test_wrongly_typed_fields_parse(self) -> None:
        """Override fields accept any scalar and keep it unchanged."""
        prefs = Preferences.model_validate(
            {
                "search": {"timeWindowHours": True},
                "ranking": {"perDomainCap": "three", "recencyAlpha": 2.5},
            }
        )
        overrides = ProfileOverrides.from_preferences(prefs)
        assert overrides.window_hours is True
        assert overrides.per_domain_cap == "three"
        assert overrides.recency_alpha == 2.5

        profile = resolve_profile(ProfileName.FINANCE, overrides)
        assert profile.per_domain_cap == 1
        assert profile.recency_alpha == 0.40
        assert profile.window_hours == 36

    def test_no_preferences(self) -> None:
        """Missing preferences give empty overrides."""
        overrides = ProfileOverrides.from_preferences(None)
        assert overrides.per_domain_cap is None
        assert overrides.recency_alpha is None
        assert overrides.window_hours is None
