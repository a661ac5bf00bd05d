"""Invocation entry point for RSS Feed Connector."""

import json
from datetime import UTC, datetime
from typing import Any

from .config import Config
from .errors import ConnectorError
from .fetcher import FeedFetcher
from .logging_config import create_execution_logger, setup_structured_logging
from .models import FeedRequest
from .pipeline import FeedPipeline
from .rss import FeedParser


def connector_handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """
    Bind the invocation variables, run the feed pipeline and build a response.

    Args:
        event: Invocation variables (feedUrl, maxItems, fromDate, toDate)
        context: Runtime context object, optional

    Returns:
        Response dictionary with status code and JSON body
    """
    config = Config()
    setup_structured_logging(config.log_level)

    execution_id = f"rss_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
    handler_logger = create_execution_logger("handler", execution_id)
    handler_logger.log_execution_start(
        request_id=getattr(context, "aws_request_id", None),
        feed_url=event.get("feedUrl"),
        max_items=event.get("maxItems"),
        from_date=event.get("fromDate"),
        to_date=event.get("toDate"),
    )

    try:
        request = FeedRequest.from_variables(event)
    except ValueError as e:
        handler_logger.error(f"Invalid request: {e}", error=str(e))
        handler_logger.log_execution_end(success=False, error_code="INVALID_INPUT")
        return _response(
            400,
            execution_id,
            error={"code": "INVALID_INPUT", "message": str(e)},
        )

    pipeline = FeedPipeline(
        config.get_pipeline_config(),
        fetcher=FeedFetcher(config.get_fetch_config(), execution_id=execution_id),
        parser=FeedParser(execution_id=execution_id),
        execution_id=execution_id,
    )
    outcome = pipeline.run(request)

    if not outcome.ok:
        error: ConnectorError = outcome.error
        handler_logger.log_execution_end(success=False, error_code=error.code.value)
        return _response(
            400 if error.is_input_error else 502,
            execution_id,
            error=error.to_dict(),
        )

    result = outcome.result
    handler_logger.log_metrics(
        {"total_items": result.total_items, "filtered_items": result.filtered_items}
    )
    handler_logger.log_execution_end(success=True)
    return _response(200, execution_id, result=result.to_dict())


def _response(status_code: int, execution_id: str, **payload) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "body": json.dumps({"execution_id": execution_id, **payload}),
    }
