"""Data models for RSS Feed Connector."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .dates import parse_request_date
from .errors import ConnectorError

DEFAULT_MAX_ITEMS = 10
MAX_ITEMS_LIMIT = 500


@dataclass(frozen=True)
class FeedRequest:
    """Input of a single connector invocation."""

    feed_url: str
    max_items: int | None = None
    from_date: str | None = None
    to_date: str | None = None

    @classmethod
    def from_variables(cls, variables: Mapping[str, Any]) -> "FeedRequest":
        """Bind a request from the camelCase variables of an invocation.

        Only the structural shape is checked here; URL scheme and date
        semantics are validated by the pipeline.

        Args:
            variables: Mapping with feedUrl, maxItems, fromDate and toDate

        Returns:
            FeedRequest instance

        Raises:
            ValueError: If a variable is missing, blank, mistyped or out of bounds
        """
        feed_url = variables.get("feedUrl")
        if not isinstance(feed_url, str) or not feed_url.strip():
            raise ValueError("Feed URL is required")

        max_items = variables.get("maxItems")
        if max_items is not None:
            if isinstance(max_items, bool):
                raise ValueError(f"Max items must be an integer, got {max_items!r}")
            if isinstance(max_items, str) and max_items.strip().lstrip("-").isdigit():
                max_items = int(max_items.strip())
            if not isinstance(max_items, int):
                raise ValueError(f"Max items must be an integer, got {max_items!r}")
            if max_items < 1:
                raise ValueError("Max items must be at least 1")
            if max_items > MAX_ITEMS_LIMIT:
                raise ValueError(f"Max items cannot exceed {MAX_ITEMS_LIMIT}")

        dates = {}
        for name in ("fromDate", "toDate"):
            value = variables.get(name)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"{name} must be a string, got {type(value).__name__}")
            dates[name] = value

        return cls(
            feed_url=feed_url,
            max_items=max_items,
            from_date=dates["fromDate"],
            to_date=dates["toDate"],
        )

    def max_items_or_default(self, default: int = DEFAULT_MAX_ITEMS) -> int:
        return self.max_items if self.max_items is not None else default

    def parse_from_date(self) -> datetime | None:
        return parse_request_date(self.from_date, "fromDate")

    def parse_to_date(self) -> datetime | None:
        return parse_request_date(self.to_date, "toDate")


@dataclass
class FeedItem:
    """Represents a single normalized RSS/Atom feed item."""

    title: str | None = None
    link: str | None = None
    description: str | None = None
    published_date: str | None = None
    author: str | None = None
    categories: list[str] = field(default_factory=list)
    guid: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "link": self.link,
            "description": self.description,
            "publishedDate": self.published_date,
            "author": self.author,
            "categories": list(self.categories),
            "guid": self.guid,
        }


@dataclass
class FeedMetadata:
    """Describes the feed as a whole."""

    title: str | None = None
    description: str | None = None
    link: str | None = None
    last_build_date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "link": self.link,
            "lastBuildDate": self.last_build_date,
        }


@dataclass
class FeedResult:
    """Filtered, sorted and capped items together with feed metadata."""

    items: list[FeedItem]
    total_items: int
    filtered_items: int
    metadata: FeedMetadata

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "totalItems": self.total_items,
            "filteredItems": self.filtered_items,
            "metadata": self.metadata.to_dict(),
        }


@dataclass
class PipelineOutcome:
    """Either a FeedResult or the ConnectorError that aborted the run."""

    result: FeedResult | None = None
    error: ConnectorError | None = None

    def __post_init__(self):
        if (self.result is None) == (self.error is None):
            raise ValueError("PipelineOutcome needs exactly one of result or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> FeedResult:
        """Return the result, raising the stored error if the run failed."""
        if self.error is not None:
            raise self.error
        return self.result
