# =============================================================================
# core/errors.py  —  Exception hierarchy for the Cursor API access layer
# =============================================================================
#
# Every failure the core raises on its own derives from CursorAPIError, so a
# caller can catch the whole family in one place.  Network-level failures
# (DNS, connection reset, timeouts) are NOT wrapped: they come straight from
# urllib and propagate unchanged.
#
# NOTE: None of these messages may contain the API key.  Only the HTTP
# status, the response body and counters are ever formatted into them.
# =============================================================================


class CursorAPIError(Exception):
    """Base class for every error raised by the core."""


class ConfigurationError(CursorAPIError):
    """Required configuration is missing or malformed (raised at startup)."""


class UpstreamRequestError(CursorAPIError):
    """The upstream answered with a non-2xx, non-429 status."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"Cursor API {status}: {body}")


class ResponseParseError(CursorAPIError, ValueError):
    """A successful response carried a body that is not valid JSON."""


class RetryBudgetExceededError(CursorAPIError):
    """Rate-limit retries ran past the configured ceiling."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Cursor API still rate limited after {attempts} attempts"
        )


class PageLimitExceededError(CursorAPIError):
    """The server kept reporting more pages past the configured ceiling."""

    def __init__(self, max_pages: int):
        self.max_pages = max_pages
        super().__init__(
            f"Pagination did not finish within {max_pages} pages"
        )
