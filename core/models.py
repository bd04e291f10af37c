# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the Cursor admin API)
# =============================================================================
#
# These dataclasses define the shape of every record that flows out of the
# API access layer.  Each one has a from_api() classmethod that maps the raw
# camelCase JSON into snake_case fields.
#
# MAPPING RULES:
#   - No schema validation: missing numeric fields become 0, missing strings
#     become "", so a sparse upstream record still maps.
#   - Nothing is dropped or reordered; list order is the server's order.
#   - The tool layer turns these back into dicts with dataclasses.asdict().
# =============================================================================

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


def epoch_ms_to_date(ms: Optional[float]) -> str:
    """Epoch milliseconds → UTC "YYYY-MM-DD" ("" when absent)."""
    if ms is None:
        return ""
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).date().isoformat()


def date_to_epoch_ms(value: str) -> int:
    """ISO date or datetime → epoch milliseconds (naive values are UTC).

    A trailing "Z" is accepted.  Relative ranges such as "7d" are not.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(
            f"Expected an ISO date such as 2026-02-01 or 2026-02-01T00:00:00Z, got {value!r}"
        ) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


# -----------------------------------------------------------------------------
# Shared pieces
# -----------------------------------------------------------------------------
@dataclass
class Period:
    """Date range echoed back by the server, in epoch milliseconds."""

    start_date: int
    end_date: int

    @classmethod
    def from_api(cls, data: Optional[dict]) -> "Period":
        data = data or {}
        return cls(start_date=data.get("startDate", 0), end_date=data.get("endDate", 0))


@dataclass
class PageInfo:
    """Pagination metadata for one page.

    The two paged listings spell this differently (page/totalPages vs
    currentPage/numPages), so there are two constructors.
    """

    page: int
    page_size: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool = False
    total_items: Optional[int] = None

    @classmethod
    def from_daily_usage(cls, data: dict) -> "PageInfo":
        return cls(
            page=data.get("page", 1),
            page_size=data.get("pageSize", 0),
            total_pages=data.get("totalPages", 0),
            has_next_page=bool(data.get("hasNextPage", False)),
            has_previous_page=bool(data.get("hasPreviousPage", False)),
            total_items=data.get("totalUsers"),
        )

    @classmethod
    def from_usage_events(cls, data: dict, total_items: Optional[int] = None) -> "PageInfo":
        return cls(
            page=data.get("currentPage", 1),
            page_size=data.get("pageSize", 0),
            total_pages=data.get("numPages", 0),
            has_next_page=bool(data.get("hasNextPage", False)),
            has_previous_page=bool(data.get("hasPreviousPage", False)),
            total_items=total_items,
        )


# -----------------------------------------------------------------------------
# Team roster
# -----------------------------------------------------------------------------
@dataclass
class TeamMember:
    name: str
    email: str
    id: str
    role: str
    is_removed: bool = False

    @classmethod
    def from_api(cls, data: dict) -> "TeamMember":
        return cls(
            name=data.get("name", ""),
            email=data.get("email", ""),
            id=str(data.get("id", "")),
            role=data.get("role", ""),
            is_removed=bool(data.get("isRemoved", False)),
        )


# -----------------------------------------------------------------------------
# Daily usage — one row per user per day
# -----------------------------------------------------------------------------
@dataclass
class DailyUsageEntry:
    """Per-user, per-day activity counters."""

    date: int                          # epoch ms of the day
    day: str                           # "2026-02-01"
    user_id: str
    email: str
    is_active: bool
    total_lines_added: int = 0
    total_lines_deleted: int = 0
    accepted_lines_added: int = 0
    accepted_lines_deleted: int = 0
    total_applies: int = 0
    total_accepts: int = 0
    total_rejects: int = 0
    total_tabs_shown: int = 0
    total_tabs_accepted: int = 0
    composer_requests: int = 0
    chat_requests: int = 0
    agent_requests: int = 0
    cmdk_usages: int = 0
    subscription_included_reqs: int = 0
    api_key_reqs: int = 0
    usage_based_reqs: int = 0
    bugbot_usages: int = 0
    most_used_model: str = ""
    apply_most_used_extension: str = ""
    tab_most_used_extension: str = ""
    client_version: Optional[str] = None

    @property
    def total_requests(self) -> int:
        return self.composer_requests + self.chat_requests + self.agent_requests

    @classmethod
    def from_api(cls, data: dict) -> "DailyUsageEntry":
        return cls(
            date=data.get("date", 0),
            day=data.get("day", ""),
            user_id=str(data.get("userId", "")),
            email=data.get("email", ""),
            is_active=bool(data.get("isActive", False)),
            total_lines_added=data.get("totalLinesAdded", 0),
            total_lines_deleted=data.get("totalLinesDeleted", 0),
            accepted_lines_added=data.get("acceptedLinesAdded", 0),
            accepted_lines_deleted=data.get("acceptedLinesDeleted", 0),
            total_applies=data.get("totalApplies", 0),
            total_accepts=data.get("totalAccepts", 0),
            total_rejects=data.get("totalRejects", 0),
            total_tabs_shown=data.get("totalTabsShown", 0),
            total_tabs_accepted=data.get("totalTabsAccepted", 0),
            composer_requests=data.get("composerRequests", 0),
            chat_requests=data.get("chatRequests", 0),
            agent_requests=data.get("agentRequests", 0),
            cmdk_usages=data.get("cmdkUsages", 0),
            subscription_included_reqs=data.get("subscriptionIncludedReqs", 0),
            api_key_reqs=data.get("apiKeyReqs", 0),
            usage_based_reqs=data.get("usageBasedReqs", 0),
            bugbot_usages=data.get("bugbotUsages", 0),
            most_used_model=data.get("mostUsedModel", ""),
            apply_most_used_extension=data.get("applyMostUsedExtension", ""),
            tab_most_used_extension=data.get("tabMostUsedExtension", ""),
            client_version=data.get("clientVersion"),
        )


@dataclass
class DailyUsagePage:
    entries: list[DailyUsageEntry]
    pagination: PageInfo
    period: Period

    @classmethod
    def from_api(cls, data: dict) -> "DailyUsagePage":
        return cls(
            entries=[DailyUsageEntry.from_api(e) for e in data.get("data", [])],
            pagination=PageInfo.from_daily_usage(data.get("pagination", {})),
            period=Period.from_api(data.get("period")),
        )


# -----------------------------------------------------------------------------
# Spend — current billing cycle, per member
# -----------------------------------------------------------------------------
@dataclass
class MemberSpend:
    user_id: str
    email: str
    name: str
    role: str
    spend_cents: int = 0
    included_spend_cents: int = 0
    fast_premium_requests: int = 0
    monthly_limit_dollars: Optional[float] = None
    hard_limit_override_dollars: float = 0

    @classmethod
    def from_api(cls, data: dict) -> "MemberSpend":
        return cls(
            user_id=str(data.get("userId", "")),
            email=data.get("email", ""),
            name=data.get("name", ""),
            role=data.get("role", ""),
            spend_cents=data.get("spendCents", 0),
            included_spend_cents=data.get("includedSpendCents", 0),
            fast_premium_requests=data.get("fastPremiumRequests", 0),
            monthly_limit_dollars=data.get("monthlyLimitDollars"),
            hard_limit_override_dollars=data.get("hardLimitOverrideDollars") or 0,
        )


@dataclass
class SpendPage:
    members: list[MemberSpend]
    cycle_start: str                   # UTC "YYYY-MM-DD"
    total_pages: int
    total_members: int
    limited_users_count: int = 0
    max_user_spend_cents: int = 0

    @classmethod
    def from_api(cls, data: dict) -> "SpendPage":
        return cls(
            members=[MemberSpend.from_api(m) for m in data.get("teamMemberSpend", [])],
            cycle_start=epoch_ms_to_date(data.get("subscriptionCycleStart")),
            total_pages=data.get("totalPages", 0),
            total_members=data.get("totalMembers", 0),
            limited_users_count=data.get("limitedUsersCount", 0),
            max_user_spend_cents=data.get("maxUserSpendCents", 0),
        )


@dataclass
class TeamSpend:
    """Every member's spend for the cycle, aggregated over all pages."""

    members: list[MemberSpend]
    cycle_start: str

    @property
    def total_spend_cents(self) -> int:
        return sum(m.spend_cents for m in self.members)


# -----------------------------------------------------------------------------
# Billing groups
# -----------------------------------------------------------------------------
@dataclass
class DailySpend:
    date: str
    spend_cents: int

    @classmethod
    def from_api(cls, data: dict) -> "DailySpend":
        return cls(date=data.get("date", ""), spend_cents=data.get("spendCents", 0))


@dataclass
class GroupMemberSpend:
    user_id: str
    name: str
    email: str
    joined_at: str
    left_at: Optional[str] = None
    spend_cents: int = 0
    daily_spend: list[DailySpend] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "GroupMemberSpend":
        return cls(
            user_id=str(data.get("userId", "")),
            name=data.get("name", ""),
            email=data.get("email", ""),
            joined_at=data.get("joinedAt", ""),
            left_at=data.get("leftAt"),
            spend_cents=data.get("spendCents", 0),
            daily_spend=[DailySpend.from_api(d) for d in data.get("dailySpend", [])],
        )


@dataclass
class BillingGroup:
    id: str
    name: str
    type: str
    member_count: int = 0
    spend_cents: int = 0
    current_members: list[GroupMemberSpend] = field(default_factory=list)
    daily_spend: list[DailySpend] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "BillingGroup":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            type=data.get("type", ""),
            member_count=data.get("memberCount", 0),
            spend_cents=data.get("spendCents", 0),
            current_members=[GroupMemberSpend.from_api(m) for m in data.get("currentMembers", [])],
            daily_spend=[DailySpend.from_api(d) for d in data.get("dailySpend", [])],
        )


@dataclass
class BillingCycle:
    cycle_start: str
    cycle_end: str


@dataclass
class BillingGroups:
    groups: list[BillingGroup]
    unassigned_group: Optional[BillingGroup] = None
    billing_cycle: Optional[BillingCycle] = None

    @classmethod
    def from_api(cls, data: dict) -> "BillingGroups":
        unassigned = data.get("unassignedGroup")
        cycle = data.get("billingCycle")
        return cls(
            groups=[BillingGroup.from_api(g) for g in data.get("groups", [])],
            unassigned_group=BillingGroup.from_api(unassigned) if unassigned else None,
            billing_cycle=(
                BillingCycle(cycle_start=cycle.get("cycleStart", ""), cycle_end=cycle.get("cycleEnd", ""))
                if cycle else None
            ),
        )


# -----------------------------------------------------------------------------
# Usage events — one row per request
# -----------------------------------------------------------------------------
@dataclass
class TokenUsage:
    input_tokens: int = 0
    output_tokens: int = 0
    cache_write_tokens: int = 0
    cache_read_tokens: int = 0
    total_cents: float = 0

    @classmethod
    def from_api(cls, data: dict) -> "TokenUsage":
        return cls(
            input_tokens=data.get("inputTokens", 0),
            output_tokens=data.get("outputTokens", 0),
            cache_write_tokens=data.get("cacheWriteTokens", 0),
            cache_read_tokens=data.get("cacheReadTokens", 0),
            total_cents=data.get("totalCents", 0),
        )


@dataclass
class UsageEvent:
    timestamp: str
    model: str
    kind: str
    user_email: str
    max_mode: bool = False
    requests_costs: float = 0
    is_token_based_call: bool = False
    is_chargeable: bool = False
    is_headless: bool = False
    token_usage: Optional[TokenUsage] = None

    @classmethod
    def from_api(cls, data: dict) -> "UsageEvent":
        token_usage = data.get("tokenUsage")
        return cls(
            timestamp=str(data.get("timestamp", "")),
            model=data.get("model", ""),
            kind=data.get("kind", ""),
            user_email=data.get("userEmail", ""),
            max_mode=bool(data.get("maxMode", False)),
            requests_costs=data.get("requestsCosts", 0),
            is_token_based_call=bool(data.get("isTokenBasedCall", False)),
            is_chargeable=bool(data.get("isChargeable", False)),
            is_headless=bool(data.get("isHeadless", False)),
            token_usage=TokenUsage.from_api(token_usage) if token_usage else None,
        )


@dataclass
class UsageEventsPage:
    total_usage_events_count: int
    pagination: PageInfo
    events: list[UsageEvent]
    period: Period

    @classmethod
    def from_api(cls, data: dict) -> "UsageEventsPage":
        total = data.get("totalUsageEventsCount", 0)
        return cls(
            total_usage_events_count=total,
            pagination=PageInfo.from_usage_events(data.get("pagination", {}), total),
            events=[UsageEvent.from_api(e) for e in data.get("usageEvents", [])],
            period=Period.from_api(data.get("period")),
        )


# -----------------------------------------------------------------------------
# Analytics — rows differ per metric, so they stay as plain dicts
# -----------------------------------------------------------------------------
@dataclass
class AnalyticsResponse:
    metric: str                        # "dau", "models", ...
    data: list[dict[str, Any]]
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, metric: str, data: dict) -> "AnalyticsResponse":
        return cls(metric=metric, data=list(data.get("data", [])), params=dict(data.get("params", {})))
