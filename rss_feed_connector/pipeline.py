"""Fetch, parse, filter and sort pipeline for RSS Feed Connector."""

from datetime import datetime

from .config import FetchConfig, PipelineConfig
from .dates import parse_item_date
from .errors import ConnectorError, ErrorCode
from .fetcher import FeedFetcher, validate_feed_url
from .logging_config import create_execution_logger
from .models import FeedItem, FeedRequest, FeedResult, PipelineOutcome
from .rss import FeedParser, ItemNormalizer


class FeedPipeline:
    """Runs one request through validate, fetch, parse, filter, sort and cap.

    Every stage failure aborts the run with a ConnectorError; nothing is
    retried and no partial result is produced.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        fetcher: FeedFetcher | None = None,
        parser: FeedParser | None = None,
        execution_id: str | None = None,
    ):
        """Initialize the pipeline.

        Args:
            config: Safety limit and default item count
            fetcher: Feed fetcher, built from a default FetchConfig if omitted
            parser: Feed parser
            execution_id: Execution ID for logging context
        """
        self.config = config or PipelineConfig()
        self.logger = create_execution_logger("pipeline", execution_id)
        self.fetcher = fetcher or FeedFetcher(FetchConfig(), execution_id=execution_id)
        self.parser = parser or FeedParser(execution_id=execution_id)
        self.normalizer = ItemNormalizer()

    def run(self, request: FeedRequest) -> PipelineOutcome:
        """Execute the pipeline, returning the error instead of raising it."""
        try:
            return PipelineOutcome(result=self.execute(request))
        except ConnectorError as e:
            return PipelineOutcome(error=e)

    def execute(self, request: FeedRequest) -> FeedResult:
        """Execute the pipeline for a request.

        Args:
            request: Feed URL, item cap and optional date bounds

        Returns:
            FeedResult with the selected items and feed metadata

        Raises:
            ConnectorError: If validation, fetching or parsing fails
            ValueError: If the item cap is outside 1..max_items_limit
        """
        max_items = request.max_items_or_default(self.config.default_max_items)
        if not 1 <= max_items <= self.config.max_items_limit:
            raise ValueError(
                f"Max items must be between 1 and {self.config.max_items_limit}, "
                f"got {max_items}"
            )
        self.logger.info(
            "Executing RSS feed pipeline",
            feed_url=request.feed_url,
            max_items=max_items,
            from_date=request.from_date,
            to_date=request.to_date,
        )

        from_date, to_date = self._validate(request)

        fetched = self.fetcher.fetch(request.feed_url)
        feed = self.parser.parse(fetched)

        original_size = len(feed.entries)
        entries = feed.entries[: self.config.safety_limit]
        total_items = len(entries)
        if original_size > self.config.safety_limit:
            self.logger.log_truncation(
                request.feed_url, original_size, self.config.safety_limit
            )
        self.logger.debug(
            f"Fetched {total_items} items from feed: {feed.title}",
            feed_url=request.feed_url,
        )

        items = [self.normalizer.normalize(entry) for entry in entries]
        items = [item for item in items if self._matches(item, from_date, to_date)]
        items = sort_items(items)[:max_items]

        self.logger.info(
            f"Parsed {total_items} items, filtered to {len(items)} items",
            feed_url=request.feed_url,
            total_items=total_items,
            filtered_items=len(items),
        )

        return FeedResult(
            items=items,
            total_items=total_items,
            filtered_items=len(items),
            metadata=self.normalizer.extract_metadata(feed),
        )

    def _validate(self, request: FeedRequest) -> tuple[datetime | None, datetime | None]:
        try:
            validate_feed_url(request.feed_url)
        except ConnectorError as e:
            self.logger.error(
                f"Invalid URL: {request.feed_url}",
                feed_url=request.feed_url,
                error_code=e.code.value,
            )
            raise

        from_date = request.parse_from_date()
        to_date = request.parse_to_date()
        if from_date is not None and to_date is not None and from_date > to_date:
            raise ConnectorError(
                ErrorCode.INVALID_DATE_RANGE,
                "fromDate must be before or equal to toDate. "
                f"Received fromDate: {request.from_date}, toDate: {request.to_date}",
            )
        return from_date, to_date

    def _matches(
        self, item: FeedItem, from_date: datetime | None, to_date: datetime | None
    ) -> bool:
        if from_date is None and to_date is None:
            return True
        if item.published_date is None:
            return True

        item_date = parse_item_date(item.published_date)
        if item_date is None:
            self.logger.debug(
                f"Could not parse date for filtering: {item.published_date}"
            )
            return True

        if from_date is not None and item_date < from_date:
            return False
        if to_date is not None and item_date > to_date:
            return False
        return True


def sort_items(items: list[FeedItem]) -> list[FeedItem]:
    """Order items newest first; undated items follow in their input order."""
    dated = []
    undated = []
    for item in items:
        item_date = parse_item_date(item.published_date)
        if item_date is None:
            undated.append(item)
        else:
            dated.append((item_date, item))

    # sorted() is stable with reverse=True, so equal dates keep input order
    dated = sorted(dated, key=lambda pair: pair[0], reverse=True)
    return [item for _, item in dated] + undated
