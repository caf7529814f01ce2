"""Score ordering and per-domain diversity capping."""

from collections import defaultdict
from collections.abc import Sequence

import structlog

from src.ranker.domains import normalized_domain
from src.ranker.models import ScoredItem


logger = structlog.get_logger()


def sort_by_score(scored: Sequence[ScoredItem]) -> list[ScoredItem]:
    """Sort items by score with a deterministic tie-breaker.

    Order:
    1. Total score descending
    2. Position in the scorer input ascending

    Args:
        scored: Scored items.

    Returns:
        Sorted items.
    """
    return sorted(scored, key=lambda s: (-s.score, s.position))


def cap_per_domain(
    sorted_items: Sequence[ScoredItem], per_domain_cap: int
) -> list[ScoredItem]:
    """Keep at most ``per_domain_cap`` items per normalized domain.

    Walks the list once, left to right. Items whose domain already holds
    ``per_domain_cap`` slots are dropped; kept items stay in input order.
    Malformed URLs all share the ``"unknown"`` domain.

    Args:
        sorted_items: Items sorted by descending score.
        per_domain_cap: Maximum items per domain.

    Returns:
        Capped items.

    Raises:
        ValueError: If per_domain_cap is less than 1.
    """
    if per_domain_cap < 1:
        msg = f"per_domain_cap must be >= 1, got {per_domain_cap}"
        raise ValueError(msg)

    domain_counts: dict[str, int] = defaultdict(int)
    kept: list[ScoredItem] = []

    for s in sorted_items:
        domain = normalized_domain(s.item.url)
        if domain_counts[domain] >= per_domain_cap:
            continue
        domain_counts[domain] += 1
        kept.append(s)

    if len(kept) < len(sorted_items):
        logger.debug(
            "domain_cap_applied",
            component="ranker",
            subcomponent="diversity",
            per_domain_cap=per_domain_cap,
            dropped=len(sorted_items) - len(kept),
        )

    return kept
