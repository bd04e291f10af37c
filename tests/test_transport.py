import base64
import io
import json
import urllib.error

import pytest

from core.errors import ResponseParseError, RetryBudgetExceededError, UpstreamRequestError
from core.transport import (
    DEFAULT_RETRY_AFTER_SECONDS,
    Endpoint,
    Transport,
    basic_auth_header,
    parse_retry_after,
)
from fakes import FakeResponse, json_response

API_KEY = "test-api-key"


def rate_limited(retry_after=None):
    headers = {"Retry-After": retry_after} if retry_after is not None else {}
    return FakeResponse(429, b"Rate limited", headers)


class TestRequestConstruction:
    def test_sends_basic_auth_with_base64_encoded_key(self, transport, opener):
        opener.queue(json_response({"teamMembers": []}))

        transport.send(Endpoint("/teams/members"))

        expected = "Basic " + base64.b64encode(b"test-api-key:").decode()
        assert opener.requests[0].get_header("Authorization") == expected
        assert basic_auth_header(API_KEY) == expected

    def test_url_is_origin_plus_path(self, transport, opener):
        opener.queue(json_response({}))

        transport.send(Endpoint("/teams/members"))

        request = opener.requests[0]
        assert request.full_url == "https://api.cursor.com/teams/members"
        assert request.get_method() == "GET"

    def test_query_is_encoded_onto_the_url(self, transport, opener):
        opener.queue(json_response({}))

        transport.send(Endpoint("/analytics/team/dau", query={"startDate": "30d", "endDate": "today"}))

        assert opener.requests[0].full_url == (
            "https://api.cursor.com/analytics/team/dau?startDate=30d&endDate=today"
        )

    def test_get_without_body_has_no_content_type(self, transport, opener):
        opener.queue(json_response({}))

        transport.send(Endpoint("/teams/groups"))

        request = opener.requests[0]
        assert request.data is None
        assert request.get_header("Content-type") is None

    def test_post_body_is_serialized_as_json(self, transport, opener):
        opener.queue(json_response({}))

        transport.send(Endpoint("/teams/spend", "POST", {"page": 2, "pageSize": 50}))

        request = opener.requests[0]
        assert request.get_method() == "POST"
        assert request.get_header("Content-type") == "application/json"
        assert json.loads(request.data) == {"page": 2, "pageSize": 50}

    def test_timeout_is_passed_to_the_opener(self, opener, clock):
        transport = Transport(API_KEY, timeout=12.5, urlopen=opener, sleep=clock.sleep)
        opener.queue(json_response({}))

        transport.send(Endpoint("/teams/members"))

        assert opener.timeouts == [12.5]

    def test_trailing_slash_on_origin_is_dropped(self, opener, clock):
        transport = Transport(API_KEY, "https://example.test/", urlopen=opener, sleep=clock.sleep)
        opener.queue(json_response({}))

        transport.send(Endpoint("/teams/members"))

        assert opener.requests[0].full_url == "https://example.test/teams/members"


class TestRateLimiting:
    def test_waits_retry_after_seconds_then_repeats_identical_request(self, transport, opener, clock):
        opener.queue(rate_limited("2"), json_response({"ok": True}))
        endpoint = Endpoint("/teams/spend", "POST", {"page": 1, "pageSize": 100})

        result = transport.send(endpoint)

        assert result == {"ok": True}
        assert opener.calls == 2
        assert clock.sleeps == [2]
        assert clock.elapsed >= 2
        first, second = opener.requests
        assert first is not second
        assert first.get_method() == second.get_method()
        assert first.full_url == second.full_url
        assert first.data == second.data

    def test_defaults_to_sixty_seconds_without_retry_after(self, transport, opener, clock):
        opener.queue(rate_limited(), json_response({}))

        transport.send(Endpoint("/teams/members"))

        assert clock.sleeps == [60]

    def test_fractional_retry_after_is_truncated(self, transport, opener, clock):
        opener.queue(rate_limited("2.5"), json_response({}))

        transport.send(Endpoint("/teams/members"))

        assert clock.sleeps == [2]

    def test_unparseable_retry_after_falls_back_to_default(self, transport, opener, clock):
        opener.queue(rate_limited("Wed, 21 Oct 2026 07:28:00 GMT"), json_response({}))

        transport.send(Endpoint("/teams/members"))

        assert clock.sleeps == [DEFAULT_RETRY_AFTER_SECONDS]

    def test_retries_without_limit_by_default(self, transport, opener, clock):
        opener.queue(*[rate_limited("1") for _ in range(25)], json_response({"done": True}))

        assert transport.send(Endpoint("/teams/members")) == {"done": True}
        assert opener.calls == 26
        assert clock.sleeps == [1] * 25

    def test_retry_budget_raises_once_exhausted(self, opener, clock):
        transport = Transport(API_KEY, urlopen=opener, sleep=clock.sleep, max_rate_limit_retries=2)
        opener.queue(rate_limited("1"), rate_limited("1"), rate_limited("1"))

        with pytest.raises(RetryBudgetExceededError) as excinfo:
            transport.send(Endpoint("/teams/members"))

        assert excinfo.value.attempts == 3
        assert opener.calls == 3
        assert clock.sleeps == [1, 1]

    def test_retry_budget_not_hit_when_request_succeeds_in_time(self, opener, clock):
        transport = Transport(API_KEY, urlopen=opener, sleep=clock.sleep, max_rate_limit_retries=2)
        opener.queue(rate_limited("1"), rate_limited("1"), json_response({"ok": True}))

        assert transport.send(Endpoint("/teams/members")) == {"ok": True}

    def test_http_error_429_is_treated_as_a_response(self, transport, opener, clock):
        error = urllib.error.HTTPError(
            "https://api.cursor.com/teams/members", 429, "Too Many Requests",
            {"Retry-After": "3"}, io.BytesIO(b"slow down"),
        )
        opener.queue(error, json_response({"teamMembers": []}))

        assert transport.send(Endpoint("/teams/members")) == {"teamMembers": []}
        assert clock.sleeps == [3]


class TestFailures:
    def test_non_ok_status_raises_with_status_and_body(self, transport, opener, clock):
        opener.queue(FakeResponse(403, b"Forbidden"))

        with pytest.raises(UpstreamRequestError) as excinfo:
            transport.send(Endpoint("/teams/members"))

        assert "403" in str(excinfo.value)
        assert "Forbidden" in str(excinfo.value)
        assert str(excinfo.value) == "Cursor API 403: Forbidden"
        assert excinfo.value.status == 403
        assert opener.calls == 1
        assert clock.sleeps == []

    def test_http_error_status_raises_upstream_error(self, transport, opener):
        opener.queue(urllib.error.HTTPError(
            "https://api.cursor.com/teams/members", 500, "Server Error", {}, io.BytesIO(b"boom"),
        ))

        with pytest.raises(UpstreamRequestError, match="Cursor API 500: boom"):
            transport.send(Endpoint("/teams/members"))

    def test_non_text_body_is_coerced_to_text(self, transport, opener):
        opener.queue(FakeResponse(502, b"\xff\xfebad gateway"))

        with pytest.raises(UpstreamRequestError) as excinfo:
            transport.send(Endpoint("/teams/members"))

        assert "bad gateway" in excinfo.value.body
        assert "�" in excinfo.value.body

    def test_invalid_json_raises_parse_error(self, transport, opener):
        opener.queue(FakeResponse(200, b"<html>not json</html>"))

        with pytest.raises(ResponseParseError) as excinfo:
            transport.send(Endpoint("/teams/members"))

        assert isinstance(excinfo.value, ValueError)

    def test_network_errors_propagate_without_retry(self, transport, opener, clock):
        opener.queue(urllib.error.URLError("connection reset"))

        with pytest.raises(urllib.error.URLError):
            transport.send(Endpoint("/teams/members"))

        assert opener.calls == 1
        assert clock.sleeps == []

    def test_api_key_never_appears_in_errors_or_repr(self, transport, opener):
        opener.queue(FakeResponse(401, b"Unauthorized"))

        with pytest.raises(UpstreamRequestError) as excinfo:
            transport.send(Endpoint("/teams/members"))

        assert API_KEY not in str(excinfo.value)
        assert API_KEY not in repr(transport)


class TestSuccess:
    def test_empty_body_returns_none_when_endpoint_allows_it(self, transport, opener):
        opener.queue(FakeResponse(200, b""))

        endpoint = Endpoint("/teams/user-spend-limit", "POST", {"email": "a@x.com"}, allow_empty=True)
        assert transport.send(endpoint) is None

    @pytest.mark.parametrize("body", [b"", b"  \n"])
    def test_empty_body_is_a_parse_error_by_default(self, transport, opener, body):
        opener.queue(FakeResponse(200, body))

        with pytest.raises(ResponseParseError, match="empty body for GET /teams/members"):
            transport.send(Endpoint("/teams/members"))

    def test_same_call_twice_decodes_identically(self, transport, opener):
        payload = {"teamMembers": [{"name": "Alice", "email": "alice@co.com"}]}
        opener.queue(json_response(payload), json_response(payload))

        first = transport.send(Endpoint("/teams/members"))
        second = transport.send(Endpoint("/teams/members"))

        assert first == second == payload


@pytest.mark.parametrize(
    "value, expected",
    [(None, 60), ("2", 2), (" 5 ", 5), ("2.5", 2), ("0", 0), ("-3", 0), ("soon", 60), ("inf", 60)],
)
def test_parse_retry_after(value, expected):
    assert parse_retry_after(value) == expected
