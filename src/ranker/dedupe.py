"""Near-duplicate title collapsing."""

import re
from collections.abc import Sequence
from typing import TypeVar

from src.ranker.constants import DEDUPE_SIGNATURE_TOKENS, MAX_SHORTLIST_ITEMS
from src.ranker.models import Item, ScoredItem


_NON_ALNUM_SPACE = re.compile(r"[^a-z0-9\s]")

T = TypeVar("T", Item, ScoredItem)


def title_signature(title: str) -> str:
    """Build the near-duplicate key for a title.

    The title is lowercased, stripped of everything except ASCII letters,
    digits and whitespace, and reduced to its first five words.

    Args:
        title: Item title.

    Returns:
        Space-joined signature (empty for titles with no usable words).
    """
    normalized = _NON_ALNUM_SPACE.sub("", (title or "").lower()).strip()
    return " ".join(normalized.split()[:DEDUPE_SIGNATURE_TOKENS])


def _title_of(entry: Item | ScoredItem) -> str:
    if isinstance(entry, ScoredItem):
        return entry.item.title
    return entry.title


def collapse_near_duplicates(
    items: Sequence[T],
    enabled: bool = True,
    limit: int = MAX_SHORTLIST_ITEMS,
) -> list[T]:
    """Drop items whose title signature was already seen.

    The first item for each signature wins. The result is truncated to
    ``limit`` whether or not collapsing is enabled.

    Args:
        items: Items in ranked order.
        enabled: Whether to collapse near-duplicates.
        limit: Maximum number of items returned.

    Returns:
        Deduplicated, truncated items.
    """
    if not enabled:
        return list(items[:limit])

    seen: set[str] = set()
    unique: list[T] = []
    for entry in items:
        key = title_signature(_title_of(entry))
        if key in seen:
            continue
        seen.add(key)
        unique.append(entry)

    return unique[:limit]
