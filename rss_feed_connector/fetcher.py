"""Feed retrieval over HTTP(S) and from local files."""

import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import ParseResult, urlparse
from urllib.request import url2pathname

import requests

from .config import FetchConfig
from .errors import ConnectorError, ErrorCode
from .logging_config import create_execution_logger

ALLOWED_SCHEMES = ("http", "https", "file")

# Characters that may never appear unescaped in a URI
_ILLEGAL_URL_CHARS = re.compile(r'[\s<>"{}|\\^`]')


@dataclass
class FetchedFeed:
    """Raw feed document as retrieved from its source."""

    url: str
    content: bytes
    content_type: str | None = None
    status_code: int | None = None


def validate_feed_url(url: str) -> ParseResult:
    """Parse a feed URL and check that its scheme is supported.

    Args:
        url: Feed URL as supplied by the caller

    Returns:
        Parsed URL

    Raises:
        ConnectorError: INVALID_URL if the URL is malformed or uses another scheme
    """
    malformed = ConnectorError(
        ErrorCode.INVALID_URL, f"The provided URL is malformed: {url}"
    )
    if _ILLEGAL_URL_CHARS.search(url):
        raise malformed
    try:
        parsed = urlparse(url)
        # Accessing the port validates it
        parsed.port
    except ValueError as e:
        malformed.cause = e
        raise malformed from e

    scheme = parsed.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        raise ConnectorError(
            ErrorCode.INVALID_URL,
            f"URL must use HTTP, HTTPS, or file scheme. Received: {url}",
        )
    if scheme in ("http", "https") and not parsed.hostname:
        raise malformed
    if scheme == "file" and not parsed.path:
        raise malformed
    return parsed


class FeedFetcher:
    """Retrieves feed documents with a single attempt per call."""

    def __init__(
        self,
        config: FetchConfig | None = None,
        session: requests.Session | None = None,
        execution_id: str | None = None,
    ):
        """Initialize FeedFetcher with configuration.

        Args:
            config: Timeouts and client identification
            session: HTTP session to use, a new one is created if omitted
            execution_id: Execution ID for logging context
        """
        self.config = config or FetchConfig()
        self.logger = create_execution_logger("fetcher", execution_id)
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.config.user_agent})

    def fetch(self, url: str) -> FetchedFeed:
        """Fetch the raw feed document behind a URL.

        Raises:
            ConnectorError: INVALID_URL for unusable URLs, FETCH_ERROR when the
                document cannot be retrieved
        """
        parsed = validate_feed_url(url)
        if parsed.scheme.lower() == "file":
            return self._fetch_file(url, parsed)
        return self._fetch_http(url)

    def _fetch_http(self, url: str) -> FetchedFeed:
        self.logger.info("Downloading feed content", feed_url=url)
        try:
            response = self.session.get(
                url,
                timeout=(self.config.connect_timeout, self.config.request_timeout),
                allow_redirects=True,
            )
            content = response.content
        except requests.RequestException as e:
            self.logger.error(
                f"Failed to fetch RSS feed from {url}: {e}", feed_url=url, error=str(e)
            )
            raise ConnectorError(
                ErrorCode.FETCH_ERROR,
                f"Failed to fetch RSS feed from URI. Network or server error: {e}",
                e,
            ) from e

        status_code = response.status_code
        if status_code < 200 or status_code >= 300:
            self.logger.error(
                f"Unexpected HTTP status {status_code} for {url}",
                feed_url=url,
                status_code=status_code,
            )
            raise ConnectorError(
                ErrorCode.FETCH_ERROR,
                f"Failed to fetch RSS feed. HTTP status code: {status_code}",
            )

        self.logger.info(
            "Feed downloaded successfully",
            feed_url=url,
            status_code=status_code,
            content_length=len(content),
        )
        return FetchedFeed(
            url=url,
            content=content,
            content_type=response.headers.get("Content-Type"),
            status_code=status_code,
        )

    def _fetch_file(self, url: str, parsed: ParseResult) -> FetchedFeed:
        path = Path(url2pathname(parsed.path))
        self.logger.info("Reading feed from file", feed_url=url, path=str(path))
        try:
            content = path.read_bytes()
        except OSError as e:
            self.logger.error(
                f"Failed to read RSS feed from file {path}: {e}",
                feed_url=url,
                error=str(e),
            )
            raise ConnectorError(
                ErrorCode.FETCH_ERROR, f"Failed to read RSS feed from file: {e}", e
            ) from e
        return FetchedFeed(url=url, content=content)
