"""Profile focus: keyword and domain affinity sets.

The focus of a profile biases results toward its topic, either by hard
filtering (drop everything that does not match) or by soft boosting (keep
everything, add a bonus to matching items). Both use the same matching
rules, implemented once in ``FocusMatcher``.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from src.data_model import StrictBaseModel
from src.ranker.constants import FOCUS_DOMAIN_BONUS, FOCUS_KEYWORD_BONUS
from src.ranker.domains import extract_host
from src.ranker.models import FocusedItem, Item
from src.ranker.profiles import ProfileName


_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


class RankFocus(StrictBaseModel):
    """Keyword and domain affinity for a profile.

    Both collections are ordered tuples so matching never depends on set
    iteration order.

    Attributes:
        keywords: Lowercase keywords matched against titles.
        allow_domains: Bare hostnames (no ``www.``) favoured by the profile.
    """

    keywords: tuple[str, ...] = ()
    allow_domains: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """Whether the focus has neither keywords nor domains."""
        return not self.keywords and not self.allow_domains


_FOCUS_TABLE: dict[ProfileName, RankFocus] = {
    ProfileName.TECHNOLOGY: RankFocus(
        keywords=(
            "chip",
            "semiconductor",
            "iphone",
            "android",
            "ai",
            "software",
            "gpu",
            "cloud",
            "data center",
            "app",
            "startup",
            "tech",
            "computing",
            "verge",
            "crunch",
        ),
        allow_domains=(
            "techcrunch.com",
            "theverge.com",
            "wired.com",
            "arstechnica.com",
            "anandtech.com",
            "tomshardware.com",
            "semianalysis.com",
            "9to5mac.com",
            "engadget.com",
        ),
    ),
    ProfileName.AI: RankFocus(
        keywords=(
            "ai",
            "llm",
            "model",
            "gpt",
            "agent",
            "ml",
            "machine learning",
            "openai",
            "anthropic",
            "deepmind",
            "hugging face",
            "inference",
            "training",
        ),
        allow_domains=(
            "openai.com",
            "anthropic.com",
            "huggingface.co",
            "deepmind.google",
            "semianalysis.com",
            "arxiv.org",
            "paperswithcode.com",
        ),
    ),
    ProfileName.FINANCE: RankFocus(
        keywords=(
            "markets",
            "stocks",
            "bond",
            "fed",
            "inflation",
            "earnings",
            "ipo",
            "m&a",
            "commodities",
            "economy",
        ),
        allow_domains=(
            "reuters.com",
            "bloomberg.com",
            "ft.com",
            "wsj.com",
            "marketwatch.com",
            "cnbc.com",
        ),
    ),
    ProfileName.SPORTS: RankFocus(
        keywords=(
            "sports",
            "game",
            "team",
            "player",
            "coach",
            "season",
            "league",
            "nfl",
            "nba",
            "mlb",
            "nhl",
            "soccer",
            "football",
            "basketball",
            "baseball",
            "hockey",
            "championship",
            "playoff",
            "tournament",
        ),
        allow_domains=(
            "espn.com",
            "si.com",
            "bleacherreport.com",
            "sports.yahoo.com",
            "cbssports.com",
            "nfl.com",
            "nba.com",
            "mlb.com",
        ),
    ),
    ProfileName.WORLD: RankFocus(
        keywords=(
            "international",
            "global",
            "country",
            "nation",
            "foreign",
            "diplomatic",
            "treaty",
            "summit",
            "conflict",
            "war",
            "peace",
            "united nations",
            "embassy",
            "minister",
            "president",
            "prime minister",
        ),
        allow_domains=(
            "reuters.com",
            "bbc.com",
            "apnews.com",
            "aljazeera.com",
            "dw.com",
            "france24.com",
        ),
    ),
}

_EMPTY_FOCUS = RankFocus()


def resolve_focus(name: ProfileName | str | None) -> RankFocus:
    """Get the focus for a profile name.

    Args:
        name: Profile name; default and unknown names get an empty focus.

    Returns:
        RankFocus for the profile.
    """
    profile_name = name if isinstance(name, ProfileName) else ProfileName.parse(name)
    return _FOCUS_TABLE.get(profile_name, _EMPTY_FOCUS)


@dataclass(frozen=True)
class FocusMatch:
    """Result of matching one item against a focus.

    Attributes:
        keyword_hit: Title contains a focus keyword.
        domain_hit: URL host is one of the focus domains.
        url_valid: Whether the URL parsed at all.
    """

    keyword_hit: bool
    domain_hit: bool
    url_valid: bool = True

    @property
    def is_hit(self) -> bool:
        """Whether the item counts as a hard filter hit."""
        return self.url_valid and (self.keyword_hit or self.domain_hit)

    @property
    def bonus(self) -> float:
        """Soft boost bonus for this match."""
        if not self.url_valid:
            return 0.0
        bonus = 0.0
        if self.keyword_hit:
            bonus += FOCUS_KEYWORD_BONUS
        if self.domain_hit:
            bonus += FOCUS_DOMAIN_BONUS
        return bonus


class FocusMatcher:
    """Matches items against a profile focus."""

    def __init__(self, focus: RankFocus) -> None:
        """Initialize the matcher.

        Args:
            focus: Focus to match against.
        """
        # dict.fromkeys keeps first-seen order while dropping duplicates
        self._keywords = tuple(dict.fromkeys(k.lower() for k in focus.keywords if k))
        self._domains = frozenset(focus.allow_domains)

    def match(self, item: Item) -> FocusMatch:
        """Match a single item.

        A keyword hits when it occurs in the lowercase title as a
        substring or equals one of the title's alphanumeric tokens.

        Args:
            item: Item to match.

        Returns:
            FocusMatch describing which conditions hold.
        """
        host = extract_host(item.url)
        if host is None:
            return FocusMatch(keyword_hit=False, domain_hit=False, url_valid=False)

        title = (item.title or "").lower()
        tokens = {t for t in _TOKEN_SPLIT.split(title) if t}
        keyword_hit = any(k in tokens or k in title for k in self._keywords)

        return FocusMatch(keyword_hit=keyword_hit, domain_hit=host in self._domains)


def hard_filter(items: Sequence[Item], focus: RankFocus) -> list[Item]:
    """Keep only items matching the focus.

    Items whose URL fails to parse are excluded.

    Args:
        items: Candidate items.
        focus: Profile focus.

    Returns:
        Matching items in input order, or the input unchanged when the
        focus is empty.
    """
    if focus.is_empty:
        return list(items)

    matcher = FocusMatcher(focus)
    return [item for item in items if matcher.match(item).is_hit]


def soft_boost(items: Sequence[Item], focus: RankFocus) -> list[FocusedItem]:
    """Attach focus bonuses without removing any item.

    Keyword hits add 0.25 and domain hits add 0.35. Items with an
    unparseable URL get no bonus.

    Args:
        items: Candidate items.
        focus: Profile focus.

    Returns:
        FocusedItems in input order.
    """
    if focus.is_empty:
        return [FocusedItem(item=item) for item in items]

    matcher = FocusMatcher(focus)
    return [
        FocusedItem(item=item, focus_bonus=matcher.match(item).bonus) for item in items
    ]
