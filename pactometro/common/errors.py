"""Domain errors and failure typing."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigurationError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class FeedHttpError(PipelineError):
    """Raised when the results feed answers with a non-success status."""

    error_code = "FEED_HTTP_ERROR"

    def __init__(self, message: str, *, status: int | None = None, body: str = "", url: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body
        self.url = url


class MalformedFeedError(PipelineError):
    """Raised when the snapshot index yields no usable snapshot id."""

    error_code = "MALFORMED_FEED"


class RecordNotFoundError(PipelineError):
    """Raised when a totals payload has no region record."""

    error_code = "RECORD_NOT_FOUND"


class ParseWarning(PipelineError):
    """Raised for recoverable field parse problems; callers log and continue."""

    error_code = "PARSE_WARNING"


class StoreError(PipelineError):
    """Raised for read or write failures against the results store."""

    error_code = "STORE_ERROR"

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
