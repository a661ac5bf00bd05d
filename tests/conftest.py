"""Shared test fixtures for RSS Feed Connector tests."""

from datetime import UTC, datetime, timedelta
from email.utils import format_datetime

import pytest

from rss_feed_connector.fetcher import FetchedFeed

RSS_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>{title}</title>
    <link>https://example.com</link>
    <description>A test RSS feed for unit testing</description>
    <lastBuildDate>Sun, 26 Oct 2025 12:00:00 GMT</lastBuildDate>
{items}
  </channel>
</rss>"""

LATEST_ITEM = """    <item>
      <title>Latest News Item</title>
      <link>https://example.com/latest</link>
      <guid>https://example.com/latest</guid>
      <description>&lt;p&gt;Breaking &amp; latest news&lt;/p&gt;</description>
      <dc:creator>Jane Doe</dc:creator>
      <category>Technology</category>
      <category>News</category>
      <pubDate>Sun, 26 Oct 2025 10:30:00 GMT</pubDate>
    </item>"""

MINIMAL_ITEM = """    <item>
      <title>Item With Minimal Fields</title>
      <link>https://example.com/minimal</link>
    </item>"""

UNDATED_ITEM = """    <item>
      <title>Item Without Date</title>
      <link>https://example.com/no-date</link>
      <description>This item has no publication date</description>
    </item>"""

EMPTY_RSS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Empty Feed</title>
    <link>https://example.com</link>
    <description>A feed without items</description>
  </channel>
</rss>"""

SAMPLE_ATOM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Test Atom Feed</title>
  <link href="https://example.org/"/>
  <subtitle>A test Atom feed</subtitle>
  <updated>2025-10-24T08:00:00Z</updated>
  <id>urn:uuid:feed</id>
  <entry>
    <title>Updated Only Entry</title>
    <link href="https://example.org/updated-only"/>
    <id>urn:uuid:entry-1</id>
    <updated>2025-10-23T07:15:00Z</updated>
    <summary>Summary of entry 1</summary>
  </entry>
  <entry>
    <title>Published Entry</title>
    <link href="https://example.org/published"/>
    <id>urn:uuid:entry-2</id>
    <author><name>Atom Author</name></author>
    <category term="Science"/>
    <category term="Space"/>
    <published>2025-10-22T06:00:00+02:00</published>
    <updated>2025-10-24T06:00:00Z</updated>
  </entry>
</feed>"""

MALFORMED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Malformed Feed</title>
    <item>
      <title>Bad Item</title>
"""

NOT_A_FEED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<html>
  <body>This is not a feed</body>
</html>"""

# Newest dated entry in the standard sample feed
LATEST_DATE = datetime(2025, 10, 26, 10, 30, tzinfo=UTC)


def rss_item(index: int, published: datetime | None) -> str:
    """Render a plain RSS item, optionally with a pubDate."""
    pub_date = ""
    if published is not None:
        pub_date = f"\n      <pubDate>{format_datetime(published, usegmt=True)}</pubDate>"
    return f"""    <item>
      <title>News Item {index}</title>
      <link>https://example.com/news/{index}</link>
      <guid>news-{index}</guid>
      <description>Description of news item {index}</description>{pub_date}
    </item>"""


def build_rss(items: list[str], title: str = "Test RSS Feed") -> str:
    return RSS_TEMPLATE.format(title=title, items="\n".join(items))


def build_dated_rss(count: int, start: datetime = LATEST_DATE) -> str:
    """RSS feed with count items, one day apart, listed oldest first."""
    items = [rss_item(i, start - timedelta(days=i)) for i in range(count)]
    return build_rss(list(reversed(items)))


def build_sample_rss() -> str:
    """The 15-item sample feed.

    Contains "Latest News Item" (2025-10-26, with categories), twelve items
    dated 2025-10-25 back to 2025-10-14, an item with minimal fields and an
    item without a date, in shuffled document order.
    """
    dated = [rss_item(i, LATEST_DATE - timedelta(days=i, hours=1)) for i in range(1, 13)]
    items = dated[6:] + [UNDATED_ITEM] + dated[:3] + [LATEST_ITEM, MINIMAL_ITEM] + dated[3:6]
    return build_rss(items)


def as_fetched(xml: str | bytes, url: str = "https://example.com/feed.xml") -> FetchedFeed:
    content = xml.encode("utf-8") if isinstance(xml, str) else xml
    return FetchedFeed(url=url, content=content)


@pytest.fixture
def feed_file(tmp_path):
    """Write feed content to a temporary file and return its file:// URL."""

    def _write(content: str | bytes, name: str = "feed.xml") -> str:
        path = tmp_path / name
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_bytes(content)
        return path.as_uri()

    return _write


@pytest.fixture
def sample_feed_url(feed_file):
    """file:// URL of the 15-item sample feed."""
    return feed_file(build_sample_rss(), "test-feed.xml")


@pytest.fixture
def empty_feed_url(feed_file):
    return feed_file(EMPTY_RSS_XML, "empty-feed.xml")


@pytest.fixture
def malformed_feed_url(feed_file):
    return feed_file(MALFORMED_XML, "invalid-feed.xml")
