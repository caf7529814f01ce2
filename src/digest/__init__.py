"""Multi-topic news digests built on the topic ranking pipeline."""

from src.digest.models import PanelItem, PanelMeta, SearchResponse, TopicDigest, TopicPanel
from src.digest.retrieval import GoogleNewsRetriever, NewsRetriever
from src.digest.service import DigestService
from src.digest.summarizer import DigestSummarizer, HeadlineSummarizer
from src.digest.time import time_ago
from src.digest.topics import enhance_search_query, split_topics


__all__ = [
    "DigestService",
    "DigestSummarizer",
    "GoogleNewsRetriever",
    "HeadlineSummarizer",
    "NewsRetriever",
    "PanelItem",
    "PanelMeta",
    "SearchResponse",
    "TopicDigest",
    "TopicPanel",
    "enhance_search_query",
    "split_topics",
    "time_ago",
]
