"""Publish date parsing and the recency prefilter."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from email.utils import parsedate_to_datetime

from src.ranker.constants import DEFAULT_MAX_LINKS, MIN_RECENT_ITEMS
from src.ranker.models import Item


def parse_pub_date(value: datetime | str | None) -> datetime | None:
    """Parse a publish date into an aware UTC datetime.

    Accepts datetimes (naive values are taken as UTC), RFC 2822 strings as
    found in RSS feeds, and ISO 8601 strings.

    Args:
        value: Raw publish date.

    Returns:
        Aware datetime in UTC, or None when missing or unparseable.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if not text:
            return None
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError, OverflowError):
            try:
                parsed = datetime.fromisoformat(text)
            except (ValueError, OverflowError):
                return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    try:
        return parsed.astimezone(UTC)
    except OverflowError:
        # Offsets that push the instant past datetime.min or datetime.max
        return None


def age_hours(pub_date: datetime | str | None, now: datetime) -> float | None:
    """Compute an item's age in hours.

    Args:
        pub_date: Raw publish date.
        now: Reference time.

    Returns:
        Age in hours (negative for future dates), or None if unparseable.
    """
    parsed = parse_pub_date(pub_date)
    if parsed is None:
        return None
    return (now - parsed).total_seconds() / 3600


@dataclass(frozen=True)
class PrefilterResult:
    """Outcome of the recency prefilter.

    Attributes:
        items: Items passed downstream.
        recent_count: Items inside the window (undated items included).
        used_fallback: Whether the unfiltered list was used instead.
    """

    items: list[Item]
    recent_count: int
    used_fallback: bool


def prefilter_recent(
    items: Sequence[Item],
    window_hours: int,
    max_links: int = DEFAULT_MAX_LINKS,
    now: datetime | None = None,
) -> PrefilterResult:
    """Narrow candidates to the recency window.

    Items without a parseable publish date count as recent. When fewer
    than six items are recent, the original list is used instead so a
    quiet window never starves later stages. Either way the result is
    truncated to ``max_links``.

    Args:
        items: Candidate items in retrieval order.
        window_hours: Recency window in hours.
        max_links: Retrieval cap.
        now: Reference time (defaults to the current time).

    Returns:
        PrefilterResult with the chosen items.
    """
    now = now or datetime.now(UTC)
    window = timedelta(hours=window_hours)

    recent: list[Item] = []
    for item in items:
        published = parse_pub_date(item.pub_date)
        if published is None or now - published <= window:
            recent.append(item)

    used_fallback = len(recent) < MIN_RECENT_ITEMS
    chosen = list(items) if used_fallback else recent

    return PrefilterResult(
        items=chosen[: max(max_links, 0)],
        recent_count=len(recent),
        used_fallback=used_fallback,
    )


def filter_recent(
    items: Sequence[Item],
    window_hours: int,
    max_links: int = DEFAULT_MAX_LINKS,
    now: datetime | None = None,
) -> list[Item]:
    """Pure function API for the recency prefilter.

    Args:
        items: Candidate items.
        window_hours: Recency window in hours.
        max_links: Retrieval cap.
        now: Reference time.

    Returns:
        Items passed downstream.
    """
    return prefilter_recent(items, window_hours, max_links, now).items
