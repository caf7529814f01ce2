"""Topic splitting and profile-aware search queries."""

import re

from src.ranker.focus import RankFocus
from src.ranker.profiles import ProfileName


MAX_TOPICS = 8

# Keywords appended to the retrieval query for focused profiles
QUERY_CONTEXT_KEYWORDS = 2

_TOPIC_SEPARATOR = re.compile(r",| and ", re.IGNORECASE)


def split_topics(query: str, max_topics: int = MAX_TOPICS) -> list[str]:
    """Split a free-text query into independent topics.

    Topics are separated by commas or the word "and".

    Args:
        query: Raw query, e.g. "fed rates, nvidia and chip exports".
        max_topics: Maximum number of topics kept.

    Returns:
        Trimmed, non-empty topics in query order.
    """
    topics = [part.strip() for part in _TOPIC_SEPARATOR.split(query.strip())]
    return [t for t in topics if t][:max_topics]


def enhance_search_query(
    topic: str, profile_name: ProfileName | str | None, focus: RankFocus
) -> str:
    """Add profile context to the retrieval query.

    Non-default profiles with focus keywords append their first two
    keywords, e.g. ``"rates (markets OR stocks)"``. Scoring still uses
    the plain topic.

    Args:
        topic: Topic text.
        profile_name: Resolved profile name.
        focus: Profile focus.

    Returns:
        Query string for the retriever.
    """
    name = (
        profile_name
        if isinstance(profile_name, ProfileName)
        else ProfileName.parse(profile_name)
    )
    if name is ProfileName.DEFAULT or not focus.keywords:
        return topic

    context = " OR ".join(focus.keywords[:QUERY_CONTEXT_KEYWORDS])
    return f"{topic} ({context})"
