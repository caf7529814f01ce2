"""Relative time labels for panel items."""

from datetime import UTC, datetime

from src.ranker.recency import parse_pub_date


def time_ago(pub_date: datetime | str | None, now: datetime | None = None) -> str:
    """Format a publish date as a short relative label.

    Args:
        pub_date: Raw publish date.
        now: Reference time (defaults to the current time).

    Returns:
        Label such as ``"45s ago"``, ``"3h ago"`` or ``"2w ago"``; empty
        when the date is missing or unparseable.
    """
    published = parse_pub_date(pub_date)
    if published is None:
        return ""

    seconds = int(((now or datetime.now(UTC)) - published).total_seconds())
    if seconds < 60:
        return f"{seconds}s ago"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    if seconds < 604800:
        return f"{seconds // 86400}d ago"
    return f"{seconds // 604800}w ago"
