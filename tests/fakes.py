"""Test doubles for the urllib opener and the sleep function."""

import json


class FakeResponse:
    """Just enough of http.client.HTTPResponse for Transport."""

    def __init__(self, status=200, body=b"", headers=None):
        self.status = status
        self.headers = headers or {}
        self._body = body if isinstance(body, bytes) else body.encode("utf-8")

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False


def json_response(data, status=200, headers=None):
    return FakeResponse(status, json.dumps(data).encode("utf-8"), headers)


class FakeOpener:
    """Stands in for urllib.request.urlopen and records every request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []
        self.timeouts = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def __call__(self, request, timeout=None):
        self.requests.append(request)
        self.timeouts.append(timeout)
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    @property
    def calls(self):
        return len(self.requests)

    def json_body(self, index=-1):
        return json.loads(self.requests[index].data)


class FakeClock:
    """Records sleeps instead of waiting."""

    def __init__(self):
        self.sleeps = []

    def sleep(self, seconds):
        self.sleeps.append(seconds)

    @property
    def elapsed(self):
        return sum(self.sleeps)


def daily_usage_page(entries, page, has_next_page, total_pages=2):
    return {
        "period": {"startDate": 0, "endDate": 0},
        "data": entries,
        "pagination": {
            "page": page,
            "pageSize": 100,
            "totalUsers": len(entries),
            "totalPages": total_pages,
            "hasNextPage": has_next_page,
            "hasPreviousPage": page > 1,
        },
    }


def spend_page(members, total_pages, cycle_start=1708300800000):
    return {
        "teamMemberSpend": members,
        "subscriptionCycleStart": cycle_start,
        "totalMembers": len(members),
        "totalPages": total_pages,
        "limitedUsersCount": 0,
        "maxUserSpendCents": max((m["spendCents"] for m in members), default=0),
    }


def usage_events_page(events, page, has_next_page, num_pages=2):
    return {
        "totalUsageEventsCount": len(events),
        "pagination": {
            "numPages": num_pages,
            "currentPage": page,
            "pageSize": 500,
            "hasNextPage": has_next_page,
            "hasPreviousPage": page > 1,
        },
        "usageEvents": events,
        "period": {"startDate": 0, "endDate": 0},
    }


def usage_entry(email="alice@co.com", **overrides):
    entry = {
        "date": 0,
        "day": "2026-02-01",
        "userId": "1",
        "email": email,
        "isActive": True,
        "totalLinesAdded": 100,
        "totalLinesDeleted": 10,
        "acceptedLinesAdded": 80,
        "acceptedLinesDeleted": 5,
        "totalApplies": 20,
        "totalAccepts": 15,
        "totalRejects": 5,
        "totalTabsShown": 50,
        "totalTabsAccepted": 30,
        "composerRequests": 10,
        "chatRequests": 5,
        "agentRequests": 3,
        "cmdkUsages": 10,
        "subscriptionIncludedReqs": 15,
        "apiKeyReqs": 0,
        "usageBasedReqs": 3,
        "bugbotUsages": 0,
        "mostUsedModel": "claude-sonnet-4.5",
        "applyMostUsedExtension": ".ts",
        "tabMostUsedExtension": ".ts",
    }
    entry.update(overrides)
    return entry


def member_spend(email, spend_cents, name=None, **overrides):
    member = {
        "userId": email,
        "email": email,
        "name": name or email.split("@")[0].title(),
        "role": "member",
        "spendCents": spend_cents,
        "includedSpendCents": 0,
        "fastPremiumRequests": 0,
        "monthlyLimitDollars": None,
        "hardLimitOverrideDollars": 0,
    }
    member.update(overrides)
    return member
