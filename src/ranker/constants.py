"""Constants for the ranker module."""

# Sentinel domain for URLs that do not parse to a hostname
UNKNOWN_DOMAIN: str = "unknown"

# Retrieval cap applied by the recency prefilter
DEFAULT_MAX_LINKS: int = 20

# Below this many in-window items the prefilter keeps the full list
MIN_RECENT_ITEMS: int = 6

# Prefilter window when the resolved profile carries none
DEFAULT_PREFILTER_WINDOW_HOURS: int = 72

# Recency decay window when the profile carries none
DEFAULT_SCORING_WINDOW_HOURS: int = 48

# Hard focus hits needed to keep the hard-filtered pool
MIN_HARD_FOCUS_HITS: int = 3

# Soft boost bonuses (additive, max 0.60)
FOCUS_KEYWORD_BONUS: float = 0.25
FOCUS_DOMAIN_BONUS: float = 0.35

# Simplified BM25 saturation: tf * (k1 + 1) / (tf + k1)
BM25_K1: float = 1.2

# Leading title tokens forming a near-duplicate signature
DEDUPE_SIGNATURE_TOKENS: int = 5

# Hard ceiling on the final shortlist
MAX_SHORTLIST_ITEMS: int = 20
