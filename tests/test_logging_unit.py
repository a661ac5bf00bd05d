"""Unit tests for structured logging."""

import json
import logging
from unittest.mock import Mock

from conftest import as_fetched, build_dated_rss
from rss_feed_connector.config import PipelineConfig
from rss_feed_connector.fetcher import FeedFetcher
from rss_feed_connector.logging_config import (
    StructuredFormatter,
    create_execution_logger,
)
from rss_feed_connector.models import FeedRequest
from rss_feed_connector.pipeline import FeedPipeline


class TestStructuredLoggingUnit:
    """Unit tests for the JSON formatter and execution logger."""

    def test_formatter_includes_context(self):
        record = logging.LogRecord(
            "rss_feed_connector.fetcher", logging.INFO, __file__, 10, "Downloading", None, None
        )
        record.execution_id = "exec_1"
        record.component = "fetcher"
        record.feed_url = "https://example.com/feed"

        entry = json.loads(StructuredFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "rss_feed_connector.fetcher"
        assert entry["message"] == "Downloading"
        assert entry["execution_id"] == "exec_1"
        assert entry["component"] == "fetcher"
        assert entry["feed_url"] == "https://example.com/feed"

    def test_execution_logger_generates_id(self):
        logger = create_execution_logger("pipeline")

        assert logger.execution_id.startswith("exec_")
        assert logger.logger.name == "rss_feed_connector.pipeline"

    def test_execution_end_reports_duration(self, caplog):
        logger = create_execution_logger("handler", "exec_2")

        with caplog.at_level(logging.INFO, logger="rss_feed_connector"):
            logger.log_execution_start()
            logger.log_execution_end(success=False)

        end = caplog.records[-1]
        assert end.execution_id == "exec_2"
        assert end.execution_success is False
        assert end.execution_duration_seconds >= 0

    def test_truncation_is_logged_as_warning(self, caplog):
        fetcher = Mock(spec=FeedFetcher)
        fetcher.fetch.return_value = as_fetched(build_dated_rss(12))
        pipeline = FeedPipeline(PipelineConfig(safety_limit=5), fetcher=fetcher)

        with caplog.at_level(logging.WARNING, logger="rss_feed_connector"):
            result = pipeline.execute(FeedRequest("https://example.com/feed.xml"))

        assert result.total_items == 5
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert warnings[0].original_size == 12
        assert warnings[0].safety_limit == 5
        assert "safety limit" in warnings[0].getMessage()

    def test_no_truncation_warning_below_limit(self, caplog):
        fetcher = Mock(spec=FeedFetcher)
        fetcher.fetch.return_value = as_fetched(build_dated_rss(5))
        pipeline = FeedPipeline(PipelineConfig(safety_limit=5), fetcher=fetcher)

        with caplog.at_level(logging.WARNING, logger="rss_feed_connector"):
            pipeline.execute(FeedRequest("https://example.com/feed.xml"))

        assert not [r for r in caplog.records if r.levelno == logging.WARNING]
