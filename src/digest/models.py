"""Response models for topic digests."""

from pydantic import Field

from src.data_model import ClientPayloadModel


class TopicDigest(ClientPayloadModel):
    """Narrative digest produced by a summarizer.

    Attributes:
        summary_md: Markdown summary.
        insights: Concrete changes, one sentence each.
        takeaways: Why the changes matter.
        actions: Suggested follow-ups.
        watch: Things to keep an eye on.
        tags: Hashtags.
        used_llm: Whether a language model produced the digest.
    """

    summary_md: str = ""
    insights: list[str] = Field(default_factory=list)
    takeaways: list[str] = Field(default_factory=list)
    actions: list[str] = Field(default_factory=list)
    watch: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    used_llm: bool = False


class PanelItem(ClientPayloadModel):
    """A shortlisted item as shown in a topic panel."""

    title: str
    url: str
    source: str | None = None
    pub_date: str | None = None
    time_ago: str = ""
    score: float | None = None


class PanelMeta(ClientPayloadModel):
    """Ranking metadata for a topic panel."""

    used_llm: bool = False
    recent_window_hours: int = 72
    profile: str = "default"
    profile_fallback: bool = False


class TopicPanel(ClientPayloadModel):
    """Digest panel for one topic."""

    title: str
    type: str = "topic"
    summary_md: str = ""
    insights: list[str] = Field(default_factory=list)
    takeaways: list[str] = Field(default_factory=list)
    actions: list[str] = Field(default_factory=list)
    watch: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    items: list[PanelItem] = Field(default_factory=list)
    meta: PanelMeta = Field(default_factory=PanelMeta)


class SearchResponse(ClientPayloadModel):
    """Panels for every topic of a search query, in query order."""

    query: str
    panels: list[TopicPanel] = Field(default_factory=list)
