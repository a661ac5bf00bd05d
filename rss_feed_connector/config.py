"""Configuration management for RSS Feed Connector."""

import os
from dataclasses import dataclass

from .models import DEFAULT_MAX_ITEMS, MAX_ITEMS_LIMIT

SAFETY_LIMIT_ITEMS = 500
HTTP_CONNECT_TIMEOUT = 10.0
HTTP_REQUEST_TIMEOUT = 30.0
USER_AGENT = "RSS-Feed-Connector/1.0"


@dataclass(frozen=True)
class FetchConfig:
    """Configuration for retrieving feed documents."""

    connect_timeout: float = HTTP_CONNECT_TIMEOUT
    request_timeout: float = HTTP_REQUEST_TIMEOUT
    user_agent: str = USER_AGENT


@dataclass(frozen=True)
class PipelineConfig:
    """Limits applied by the feed pipeline."""

    safety_limit: int = SAFETY_LIMIT_ITEMS
    default_max_items: int = DEFAULT_MAX_ITEMS
    max_items_limit: int = MAX_ITEMS_LIMIT


class Config:
    """Main configuration manager."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.connect_timeout = _env_number(
            "RSS_CONNECT_TIMEOUT", HTTP_CONNECT_TIMEOUT, float
        )
        self.request_timeout = _env_number(
            "RSS_REQUEST_TIMEOUT", HTTP_REQUEST_TIMEOUT, float
        )
        self.user_agent = os.getenv("RSS_USER_AGENT", USER_AGENT)
        self.safety_limit = _env_number("RSS_SAFETY_LIMIT", SAFETY_LIMIT_ITEMS, int)
        self.default_max_items = _env_number(
            "RSS_DEFAULT_MAX_ITEMS", DEFAULT_MAX_ITEMS, int
        )
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

    def get_fetch_config(self) -> FetchConfig:
        """Get fetch configuration."""
        return FetchConfig(
            connect_timeout=self.connect_timeout,
            request_timeout=self.request_timeout,
            user_agent=self.user_agent,
        )

    def get_pipeline_config(self) -> PipelineConfig:
        """Get pipeline configuration."""
        return PipelineConfig(
            safety_limit=self.safety_limit,
            default_max_items=self.default_max_items,
        )


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        raise ValueError(f"Invalid value for {name}: {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value
