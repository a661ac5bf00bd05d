"""RSS/Atom parsing and item normalization for RSS Feed Connector."""

import io
from dataclasses import dataclass, field
from datetime import datetime

import feedparser
from feedparser.exceptions import CharacterEncodingOverride, NonXMLContentType

from .dates import format_timestamp, struct_time_to_datetime
from .errors import ConnectorError, ErrorCode
from .fetcher import FetchedFeed
from .logging_config import create_execution_logger
from .models import FeedItem, FeedMetadata

# Warnings feedparser raises for documents that are still well-formed feeds
_BENIGN_BOZO = (CharacterEncodingOverride, NonXMLContentType)


@dataclass
class RawEntry:
    """One feed entry in a format-independent shape."""

    title: str | None = None
    link: str | None = None
    description: str | None = None
    author: str | None = None
    categories: list[str | None] | None = None
    published: datetime | None = None
    updated: datetime | None = None
    guid: str | None = None


@dataclass
class ParsedFeed:
    """Feed-level fields plus the entries in document order."""

    title: str | None = None
    description: str | None = None
    link: str | None = None
    published: datetime | None = None
    version: str | None = None
    entries: list[RawEntry] = field(default_factory=list)


class FeedParser:
    """Parses RSS 0.9x/1.0/2.0 and Atom 0.3/1.0 documents with feedparser."""

    def __init__(self, execution_id: str | None = None):
        self.logger = create_execution_logger("parser", execution_id)

    def parse(self, fetched: FetchedFeed) -> ParsedFeed:
        """Parse a fetched document.

        Args:
            fetched: Raw document and, for HTTP sources, its content type

        Returns:
            ParsedFeed with feed fields and raw entries

        Raises:
            ConnectorError: PARSE_ERROR if the content is not a valid feed
        """
        response_headers = {}
        if fetched.content_type:
            response_headers["content-type"] = fetched.content_type

        # Descriptions are passed through untouched
        feed = feedparser.parse(
            io.BytesIO(fetched.content),
            response_headers=response_headers,
            resolve_relative_uris=False,
            sanitize_html=False,
        )

        bozo_exception = feed.get("bozo_exception")
        if feed.get("bozo") and not isinstance(bozo_exception, _BENIGN_BOZO):
            self._fail(fetched.url, str(bozo_exception or "ill-formed document"))
        if not feed.get("version"):
            self._fail(fetched.url, "document is not a recognised RSS or Atom feed")
        if feed.get("bozo"):
            self.logger.warning(
                f"Feed parsing warning for {fetched.url}: {bozo_exception}",
                feed_url=fetched.url,
                bozo_exception=str(bozo_exception),
            )

        channel = feed.feed
        parsed = ParsedFeed(
            title=channel.get("title"),
            description=channel.get("subtitle"),
            link=channel.get("link"),
            published=struct_time_to_datetime(
                channel.get("published_parsed") or channel.get("updated_parsed")
            ),
            version=feed.version,
            entries=[self._to_raw_entry(entry) for entry in feed.entries],
        )
        self.logger.info(
            "Parsed feed document",
            feed_url=fetched.url,
            feed_version=parsed.version,
            entries_count=len(parsed.entries),
        )
        return parsed

    def _fail(self, url: str, diagnostic: str) -> None:
        self.logger.error(
            f"Failed to parse RSS feed from {url}: {diagnostic}", feed_url=url
        )
        raise ConnectorError(
            ErrorCode.PARSE_ERROR,
            "Failed to parse RSS feed. The content may not be valid RSS/Atom XML: "
            f"{diagnostic}",
        )

    @staticmethod
    def _to_raw_entry(entry) -> RawEntry:
        tags = entry.get("tags")
        categories = None
        if tags is not None:
            categories = [tag.get("term") if tag is not None else None for tag in tags]

        return RawEntry(
            title=entry.get("title"),
            link=entry.get("link"),
            description=entry.get("summary"),
            author=entry.get("author"),
            categories=categories,
            published=struct_time_to_datetime(entry.get("published_parsed")),
            updated=struct_time_to_datetime(_own_value(entry, "updated_parsed")),
            guid=entry.get("id"),
        )


def _own_value(entry, key: str):
    # feedparser answers a missing "updated" lookup with the published value
    return entry[key] if key in entry else None


class ItemNormalizer:
    """Turns raw entries into FeedItems; never fails."""

    @staticmethod
    def normalize(entry: RawEntry) -> FeedItem:
        """Normalize a raw entry into a FeedItem.

        Args:
            entry: Raw entry from FeedParser

        Returns:
            FeedItem with absent source fields left as None
        """
        published = entry.published or entry.updated
        published_date = format_timestamp(published) if published else None

        categories = [
            name for name in (entry.categories or []) if name is not None and name.strip()
        ]

        return FeedItem(
            title=entry.title,
            link=entry.link,
            description=entry.description,
            published_date=published_date,
            author=entry.author,
            categories=categories,
            guid=entry.guid,
        )

    @staticmethod
    def extract_metadata(feed: ParsedFeed) -> FeedMetadata:
        """Build the metadata block describing the feed itself."""
        return FeedMetadata(
            title=feed.title,
            description=feed.description,
            link=feed.link,
            last_build_date=format_timestamp(feed.published) if feed.published else None,
        )
