"""Hostname extraction for source domains."""

from urllib.parse import urlsplit

from src.ranker.constants import UNKNOWN_DOMAIN


def extract_host(url: str) -> str | None:
    """Extract the bare hostname of an absolute URL.

    The hostname is lowercased and a single leading ``www.`` is removed.

    Args:
        url: URL to parse.

    Returns:
        Bare hostname, or None when the URL has no scheme or host or
        cannot be parsed at all.
    """
    try:
        parsed = urlsplit(url.strip())
        hostname = parsed.hostname
    except (AttributeError, ValueError):
        return None

    if not parsed.scheme or not hostname:
        return None

    return hostname.removeprefix("www.")


def normalized_domain(url: str) -> str:
    """Get the domain used for source priors and diversity capping.

    Args:
        url: URL to parse.

    Returns:
        Bare hostname, or ``"unknown"`` for malformed URLs.
    """
    return extract_host(url) or UNKNOWN_DOMAIN
