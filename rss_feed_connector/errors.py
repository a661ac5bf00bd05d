"""Error taxonomy for RSS Feed Connector."""

from enum import Enum


class ErrorCode(str, Enum):
    """Codes surfaced to the caller when a pipeline run fails."""

    INVALID_URL = "INVALID_URL"
    INVALID_DATE_FORMAT = "INVALID_DATE_FORMAT"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    FETCH_ERROR = "FETCH_ERROR"
    PARSE_ERROR = "PARSE_ERROR"


# Codes the caller fixes by changing the request rather than the source feed
INPUT_ERROR_CODES = frozenset(
    {ErrorCode.INVALID_URL, ErrorCode.INVALID_DATE_FORMAT, ErrorCode.INVALID_DATE_RANGE}
)


class ConnectorError(Exception):
    """Failure of a pipeline stage, carrying an error code and message."""

    def __init__(
        self, code: ErrorCode, message: str, cause: BaseException | None = None
    ):
        """Initialize the error.

        Args:
            code: One of the ErrorCode values
            message: Human-readable description, including the offending input
            cause: Underlying exception, if any
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.cause = cause

    @property
    def is_input_error(self) -> bool:
        """True when the request itself has to be fixed."""
        return self.code in INPUT_ERROR_CODES

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code.value, "message": self.message}

    def __repr__(self) -> str:
        return f"ConnectorError({self.code.value}, {self.message!r})"
