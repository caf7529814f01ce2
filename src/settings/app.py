"""Application settings powered by Pydantic BaseSettings."""

from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Centralized environment configuration.

    Every field can be set through an environment variable prefixed with
    ``SIGNAL_FEED_`` (for example ``SIGNAL_FEED_MAX_WORKERS=8``) or through
    a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="SIGNAL_FEED_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_topics: Annotated[int, Field(ge=1, le=32)] = 8
    max_links: Annotated[int, Field(ge=1, le=100)] = 20
    max_workers: Annotated[int, Field(ge=1, le=32)] = 4
    links_to_show: Annotated[int, Field(ge=1, le=20)] = 7
    summary_items: Annotated[int, Field(ge=1, le=20)] = 12
    request_timeout_seconds: Annotated[float, Field(gt=0.0, le=120.0)] = 10.0
    news_region: str = "US:en"
    user_agent: str = "Mozilla/5.0 (compatible; SignalFeedBot/1.0)"


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
