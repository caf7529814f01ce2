"""Digest summarizers for ranked topic shortlists."""

import re
from collections.abc import Sequence
from typing import Protocol

from src.digest.models import TopicDigest
from src.ranker.models import Item


class DigestSummarizer(Protocol):
    """Turns a ranked shortlist into narrative digest text."""

    def summarize(
        self, items: Sequence[Item], topic: str, window_hours: int
    ) -> TopicDigest:
        """Summarize the shortlist for a topic."""
        ...


_CAPITALIZED_PHRASE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*")

_TAKEAWAYS = (
    "These developments may impact markets, policies, or public sentiment.",
    "Key stakeholders should monitor upcoming announcements and reactions.",
)
_ACTIONS = (
    "Monitor official sources for updates and clarifications.",
    "Set alerts for related keywords to track developments.",
    "Compare coverage across multiple reputable outlets.",
)
_WATCH = (
    "Follow-up announcements expected in 24-48 hours.",
    "Watch for official statements and regulatory responses.",
    "Track social media and expert analysis for context.",
)

MAX_INSIGHTS = 4
MAX_INSIGHT_CHARS = 100
MAX_TAGS = 6
TAG_SOURCE_ITEMS = 6
SUMMARY_BULLETS = 5


class HeadlineSummarizer:
    """Builds a deterministic digest from titles and sources alone.

    Used when no language model is configured: insights restate the top
    headlines, tags come from source names and capitalized phrases, and
    takeaways, actions and watch items are generic.
    """

    def summarize(
        self, items: Sequence[Item], topic: str, window_hours: int
    ) -> TopicDigest:
        """Build a headline digest.

        Args:
            items: Ranked shortlist, best first.
            topic: Topic text (unused by the headline digest).
            window_hours: Recency window (unused by the headline digest).

        Returns:
            TopicDigest with ``used_llm`` False.
        """
        insights = [
            self._as_sentence(item.title[:MAX_INSIGHT_CHARS])
            for item in items[:MAX_INSIGHTS]
        ]
        bullets = "\n".join(f"- {i.title}" for i in items[:SUMMARY_BULLETS])
        summary_md = (
            f"{bullets}\n\n**Why it matters:** "
            "These are the latest developments based on recent coverage."
        )

        return TopicDigest(
            summary_md=summary_md,
            insights=insights or ["Recent news updates available."],
            takeaways=list(_TAKEAWAYS),
            actions=list(_ACTIONS),
            watch=list(_WATCH),
            tags=self._derive_tags(items) or ["#News"],
            used_llm=False,
        )

    @staticmethod
    def _as_sentence(text: str) -> str:
        return text if text.endswith(".") else f"{text}."

    @staticmethod
    def _derive_tags(items: Sequence[Item]) -> list[str]:
        """Derive hashtags from source names and capitalized phrases.

        Args:
            items: Ranked shortlist.

        Returns:
            Up to six unique tags in discovery order.
        """
        tags: dict[str, None] = {}
        head = items[:TAG_SOURCE_ITEMS]

        for item in head:
            if not item.source:
                continue
            name = item.source.removeprefix("www.").split(".")[0]
            if len(name) > 2:
                tags[f"#{name[0].upper()}{name[1:]}"] = None

        text = " ".join(item.title for item in head)
        for phrase in _CAPITALIZED_PHRASE.findall(text)[:4]:
            if 2 < len(phrase) < 20:
                tags["#" + re.sub(r"\s+", "", phrase)] = None

        return list(tags)[:MAX_TAGS]
