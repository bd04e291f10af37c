# =============================================================================
# core/transport.py  —  One authenticated request, with rate-limit backoff
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Sends exactly one logical request to the Cursor API and returns the
#   decoded JSON body.  "One logical request" may mean several HTTP attempts:
#   when the server answers 429 (Too Many Requests) we wait and send the
#   identical request again.
#
# HOW A CALL FLOWS:
#   1. Endpoint (path, method, body, query) is fixed before anything is sent
#   2. A fresh urllib Request is built from it for every attempt
#   3. 429            → wait Retry-After seconds (default 60), go to 2
#      other non-2xx  → UpstreamRequestError(status, body text)
#      2xx            → json.loads(body)
#
# RETRY CEILING:
#   max_rate_limit_retries=None keeps retrying for as long as the server
#   keeps saying 429.  Set it to an integer to get RetryBudgetExceededError
#   instead.
#
# TESTABILITY:
#   Both the opener (anything shaped like urllib.request.urlopen) and the
#   sleep function are constructor arguments, so tests run without a network
#   and without real waiting.
# =============================================================================

import base64
import json
import logging
import time
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional
from urllib.parse import urlencode

from core.errors import ResponseParseError, RetryBudgetExceededError, UpstreamRequestError

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUS = 429
DEFAULT_RETRY_AFTER_SECONDS = 60
USER_AGENT = "cursor-usage-advisor/0.1.0"


@dataclass(frozen=True)
class Endpoint:
    """The full shape of one outbound request."""

    path: str                                  # "/teams/spend"
    method: str = "GET"
    body: Optional[Any] = None                 # JSON-serializable, POST only
    query: Optional[Mapping[str, str]] = field(default=None)
    allow_empty: bool = False                  # 2xx with no body is a valid answer

    def url(self, base_url: str) -> str:
        url = f"{base_url}{self.path}"
        if self.query:
            url = f"{url}?{urlencode(dict(self.query))}"
        return url


def basic_auth_header(api_key: str) -> str:
    """HTTP Basic with the key as username and an empty password."""
    token = base64.b64encode(f"{api_key}:".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def parse_retry_after(value: Optional[str]) -> int:
    """Seconds to wait for a 429, from the Retry-After header value.

    Only the delay-seconds form is understood; fractions are truncated
    ("2.5" waits 2).  A missing or unparseable header falls back to
    DEFAULT_RETRY_AFTER_SECONDS.
    """
    if value is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        return max(0, int(float(value.strip())))
    except (ValueError, OverflowError):
        return DEFAULT_RETRY_AFTER_SECONDS


class Transport:
    """Authenticated JSON-over-HTTPS transport for a single upstream origin."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.cursor.com",
        *,
        timeout: float = 30.0,
        max_rate_limit_retries: Optional[int] = None,
        urlopen: Callable[..., Any] = urllib.request.urlopen,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._auth_header = basic_auth_header(api_key)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_rate_limit_retries = max_rate_limit_retries
        self._urlopen = urlopen
        self._sleep = sleep

    def __repr__(self) -> str:
        return f"Transport(base_url={self.base_url!r})"

    def send(self, endpoint: Endpoint) -> Any:
        """Perform one request-with-retry cycle and return the decoded body.

        Returns:
            The parsed JSON body, or None when a successful response has an
            empty body and the endpoint allows it.

        Raises:
            UpstreamRequestError: non-2xx status other than 429.
            ResponseParseError: 2xx status but the body is not JSON (an empty
                body counts unless endpoint.allow_empty is set).
            RetryBudgetExceededError: only when max_rate_limit_retries is set.
            urllib.error.URLError / OSError: network failures, never retried.
        """
        attempts = 0
        while True:
            attempts += 1
            logger.debug("%s %s (attempt %d)", endpoint.method, endpoint.path, attempts)
            status, headers, body = self._exchange(self._build_request(endpoint))

            if status != RATE_LIMIT_STATUS:
                break

            retries_used = attempts - 1
            if self.max_rate_limit_retries is not None and retries_used >= self.max_rate_limit_retries:
                raise RetryBudgetExceededError(attempts)

            wait_seconds = parse_retry_after(headers.get("Retry-After") if headers else None)
            logger.warning(
                "Rate limited on %s %s, retrying in %ss",
                endpoint.method, endpoint.path, wait_seconds,
            )
            self._sleep(wait_seconds)

        if not 200 <= status < 300:
            raise UpstreamRequestError(status, _body_text(body))

        if not body or not body.strip():
            if endpoint.allow_empty:
                return None
            raise ResponseParseError(
                f"Cursor API returned an empty body for {endpoint.method} {endpoint.path}"
            )
        try:
            return json.loads(body)
        except ValueError as exc:
            raise ResponseParseError(
                f"Cursor API returned invalid JSON for {endpoint.method} {endpoint.path}: {exc}"
            ) from exc

    def _build_request(self, endpoint: Endpoint) -> urllib.request.Request:
        headers = {
            "Authorization": self._auth_header,
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        data = None
        if endpoint.body is not None:
            data = json.dumps(endpoint.body).encode("utf-8")
            headers["Content-Type"] = "application/json"
        return urllib.request.Request(
            endpoint.url(self.base_url),
            data=data,
            headers=headers,
            method=endpoint.method,
        )

    def _exchange(self, request: urllib.request.Request) -> tuple[int, Any, bytes]:
        # urlopen raises HTTPError for 4xx/5xx; for us those are responses.
        try:
            with self._urlopen(request, timeout=self.timeout) as response:
                return response.status, response.headers, response.read()
        except urllib.error.HTTPError as exc:
            try:
                return exc.code, exc.headers, exc.read()
            finally:
                exc.close()


def _body_text(body: Any) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return "" if body is None else str(body)
