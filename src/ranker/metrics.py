"""Metrics collection for the topic ranking pipeline."""

from dataclasses import dataclass


@dataclass
class PipelineMetrics:
    """Stage counts and timings for a single topic pipeline run.

    One instance is created per run; nothing is shared between topics.

    Attributes:
        items_in: Number of items received from retrieval.
        recent_count: Items inside the recency window.
        recency_fallback: Whether the prefilter kept the unfiltered list.
        pool_count: Items leaving the prefilter.
        hard_hits: Items matched by the hard focus filter.
        focused_count: Items leaving the focus stage.
        dropped_by_domain_cap: Items removed by the diversity cap.
        dropped_as_duplicate: Items removed by the near-duplicate collapser.
        items_out: Items in the final shortlist.
        scoring_duration_ms: Time spent scoring.
        total_duration_ms: Time spent on the whole run.
    """

    items_in: int = 0
    recent_count: int = 0
    recency_fallback: bool = False
    pool_count: int = 0
    hard_hits: int = 0
    focused_count: int = 0
    dropped_by_domain_cap: int = 0
    dropped_as_duplicate: int = 0
    items_out: int = 0
    scoring_duration_ms: float = 0.0
    total_duration_ms: float = 0.0

    def record_prefilter(self, items_in: int, recent: int, pool: int) -> None:
        """Record recency prefilter counts.

        Args:
            items_in: Items received.
            recent: Items inside the window.
            pool: Items kept by the prefilter.
        """
        self.items_in = items_in
        self.recent_count = recent
        self.pool_count = pool

    def record_focus(self, hard_hits: int, focused: int) -> None:
        """Record focus stage counts.

        Args:
            hard_hits: Items matched by the hard filter.
            focused: Items in the working pool after the focus decision.
        """
        self.hard_hits = hard_hits
        self.focused_count = focused

    def record_drops(self, by_domain_cap: int, as_duplicate: int) -> None:
        """Record how many items the diversity stages removed.

        Args:
            by_domain_cap: Items removed by the per-domain cap.
            as_duplicate: Items removed as near-duplicates or by truncation.
        """
        self.dropped_by_domain_cap = by_domain_cap
        self.dropped_as_duplicate = as_duplicate

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "items_in": self.items_in,
            "recent_count": self.recent_count,
            "recency_fallback": self.recency_fallback,
            "pool_count": self.pool_count,
            "hard_hits": self.hard_hits,
            "focused_count": self.focused_count,
            "dropped_by_domain_cap": self.dropped_by_domain_cap,
            "dropped_as_duplicate": self.dropped_as_duplicate,
            "items_out": self.items_out,
            "scoring_duration_ms": round(self.scoring_duration_ms, 3),
            "total_duration_ms": round(self.total_duration_ms, 3),
        }
