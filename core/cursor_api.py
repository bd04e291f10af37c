# =============================================================================
# core/cursor_api.py  —  One method per Cursor admin/analytics resource
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Wraps Transport (core/transport.py) with one method per logical resource
#   and maps the raw JSON into the dataclasses from core/models.py.
#
#   Single-page methods return exactly what one response holds, with its
#   pagination metadata.  get_all_* methods drive the aggregator in
#   core/pagination.py with a fixed page size and everything except the
#   page number held constant.
#
# RESOURCE → STOP SIGNAL:
#   daily usage    POST /teams/daily-usage-data        hasNextPage
#   spend          POST /teams/spend                   totalPages
#   usage events   POST /teams/filtered-usage-events   hasNextPage
# =============================================================================

from typing import Iterable, Optional

from core.analytics import ANALYTICS_METRICS, analytics_params
from core.config import Settings
from core.models import (
    AnalyticsResponse,
    BillingGroups,
    DailyUsageEntry,
    DailyUsagePage,
    SpendPage,
    TeamMember,
    TeamSpend,
    UsageEvent,
    UsageEventsPage,
)
from core.pagination import iter_pages, paginate_until, stop_at_total_pages, stop_when_no_next_page
from core.transport import Endpoint, Transport

DAILY_USAGE_PAGE_SIZE = 100
SPEND_PAGE_SIZE = 100
USAGE_EVENTS_PAGE_SIZE = 500


class CursorAPI:
    """Client for the Cursor team admin and analytics API."""

    def __init__(self, transport: Transport, max_pages: Optional[int] = None):
        self.transport = transport
        self.max_pages = max_pages

    @classmethod
    def from_settings(cls, settings: Settings, **transport_kwargs) -> "CursorAPI":
        transport = Transport(
            settings.api_key,
            settings.base_url,
            timeout=settings.http_timeout_seconds,
            max_rate_limit_retries=settings.max_rate_limit_retries,
            **transport_kwargs,
        )
        return cls(transport, max_pages=settings.max_pages)

    # -------------------------------------------------------------------------
    # Team roster
    # -------------------------------------------------------------------------
    def get_team_members(self) -> list[TeamMember]:
        data = self.transport.send(Endpoint("/teams/members"))
        return [TeamMember.from_api(m) for m in data.get("teamMembers", [])]

    # -------------------------------------------------------------------------
    # Daily usage
    # -------------------------------------------------------------------------
    def get_daily_usage(
        self,
        start_date: Optional[int] = None,
        end_date: Optional[int] = None,
        page: int = 1,
        page_size: int = DAILY_USAGE_PAGE_SIZE,
    ) -> DailyUsagePage:
        """One page of per-user daily usage.  Dates are epoch milliseconds."""
        body: dict = {"page": page, "pageSize": page_size}
        if start_date:
            body["startDate"] = start_date
        if end_date:
            body["endDate"] = end_date
        data = self.transport.send(Endpoint("/teams/daily-usage-data", "POST", body))
        return DailyUsagePage.from_api(data)

    def get_all_daily_usage(
        self,
        start_date: Optional[int] = None,
        end_date: Optional[int] = None,
    ) -> list[DailyUsageEntry]:
        return paginate_until(
            lambda page: self.get_daily_usage(start_date, end_date, page, DAILY_USAGE_PAGE_SIZE),
            lambda result: result.entries,
            stop_when_no_next_page(lambda result: result.pagination),
            self.max_pages,
        )

    # -------------------------------------------------------------------------
    # Spend
    # -------------------------------------------------------------------------
    def get_spending(self, page: int = 1, page_size: int = SPEND_PAGE_SIZE) -> SpendPage:
        data = self.transport.send(
            Endpoint("/teams/spend", "POST", {"page": page, "pageSize": page_size})
        )
        return SpendPage.from_api(data)

    def get_all_spending(self) -> TeamSpend:
        """All members' spend; cycle_start comes from the last page fetched."""
        members = []
        cycle_start = ""
        pages = iter_pages(
            lambda page: self.get_spending(page, SPEND_PAGE_SIZE),
            stop_at_total_pages(lambda result: result.total_pages),
            self.max_pages,
        )
        for result in pages:
            members.extend(result.members)
            cycle_start = result.cycle_start
        return TeamSpend(members=members, cycle_start=cycle_start)

    # -------------------------------------------------------------------------
    # Billing groups
    # -------------------------------------------------------------------------
    def get_billing_groups(self) -> BillingGroups:
        return BillingGroups.from_api(self.transport.send(Endpoint("/teams/groups")))

    # -------------------------------------------------------------------------
    # Usage events
    # -------------------------------------------------------------------------
    def get_usage_events(
        self,
        email: Optional[str] = None,
        start_date: Optional[int] = None,
        end_date: Optional[int] = None,
        page: int = 1,
        page_size: int = USAGE_EVENTS_PAGE_SIZE,
    ) -> UsageEventsPage:
        body: dict = {"page": page, "pageSize": page_size}
        if email is not None:
            body["email"] = email
        if start_date is not None:
            body["startDate"] = start_date
        if end_date is not None:
            body["endDate"] = end_date
        data = self.transport.send(Endpoint("/teams/filtered-usage-events", "POST", body))
        return UsageEventsPage.from_api(data)

    def get_all_usage_events(
        self,
        email: Optional[str] = None,
        start_date: Optional[int] = None,
        end_date: Optional[int] = None,
    ) -> list[UsageEvent]:
        return paginate_until(
            lambda page: self.get_usage_events(email, start_date, end_date, page, USAGE_EVENTS_PAGE_SIZE),
            lambda result: result.events,
            stop_when_no_next_page(lambda result: result.pagination),
            self.max_pages,
        )

    # -------------------------------------------------------------------------
    # Spend limits
    # -------------------------------------------------------------------------
    def set_user_spend_limit(self, email: str, limit_dollars: float) -> None:
        """Set a member's hard limit in dollars (0 removes it)."""
        self.transport.send(
            Endpoint(
                "/teams/user-spend-limit",
                "POST",
                {"email": email, "hardLimitDollars": limit_dollars},
                allow_empty=True,
            )
        )

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------
    def get_analytics(
        self,
        metric: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        users: Optional[Iterable[str]] = None,
    ) -> AnalyticsResponse:
        if metric not in ANALYTICS_METRICS:
            raise ValueError(f"Unknown analytics metric: {metric!r}")
        endpoint = Endpoint(
            f"/analytics/team/{metric}",
            query=analytics_params(start_date, end_date, users),
        )
        return AnalyticsResponse.from_api(metric, self.transport.send(endpoint))

    def get_dau(self, start_date=None, end_date=None, users=None) -> AnalyticsResponse:
        return self.get_analytics("dau", start_date, end_date, users)

    def get_model_usage(self, start_date=None, end_date=None, users=None) -> AnalyticsResponse:
        return self.get_analytics("models", start_date, end_date, users)

    def get_agent_edits(self, start_date=None, end_date=None, users=None) -> AnalyticsResponse:
        return self.get_analytics("agent-edits", start_date, end_date, users)

    def get_tabs(self, start_date=None, end_date=None, users=None) -> AnalyticsResponse:
        return self.get_analytics("tabs", start_date, end_date, users)

    def get_mcp(self, start_date=None, end_date=None, users=None) -> AnalyticsResponse:
        return self.get_analytics("mcp", start_date, end_date, users)

    def get_file_extensions(self, start_date=None, end_date=None, users=None) -> AnalyticsResponse:
        return self.get_analytics("top-file-extensions", start_date, end_date, users)

    def get_client_versions(self, start_date=None, end_date=None, users=None) -> AnalyticsResponse:
        return self.get_analytics("client-versions", start_date, end_date, users)

    def get_commands(self, start_date=None, end_date=None, users=None) -> AnalyticsResponse:
        return self.get_analytics("commands", start_date, end_date, users)

    def get_plans(self, start_date=None, end_date=None, users=None) -> AnalyticsResponse:
        return self.get_analytics("plans", start_date, end_date, users)
