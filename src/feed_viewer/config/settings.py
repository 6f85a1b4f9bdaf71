"""
Configuration settings for the feed viewer.

This module handles environment variable loading and configuration management
using Pydantic for validation and type safety.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Feed viewer configuration settings.

    All settings can be overridden via environment variables prefixed
    with ``FEED_VIEWER_``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FEED_VIEWER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Feed Configuration
    feed_url: str = Field(
        default="https://www.reddit.com/r/reactjs.json",
        description="Listing endpoint the viewer loads posts from"
    )
    feed_request_timeout: Optional[float] = Field(
        default=None,
        description="Timeout in seconds for the feed request (None disables it)"
    )
    user_agent: str = Field(
        default="feed_viewer/1.0 (community feed viewer)",
        description="User-Agent header sent with the feed request"
    )

    # Page Configuration
    page_title: str = Field(
        default="React Community Insights",
        description="Heading shown at the top of the page"
    )
    excerpt_length: int = Field(
        default=200,
        gt=0,
        description="Visible characters of post body shown on a card"
    )
    author_name: str = Field(
        default="adharshboddul",
        description="Name shown in the footer credit"
    )
    author_url: str = Field(
        default="https://github.com/adharsh-a",
        description="Link target of the footer credit"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="text",
        description="Logging format (json or text)"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path of a rotating log file"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Configured settings instance
    """
    return Settings()
