# =============================================================================
# core/reports.py  —  Compact, agent-friendly summaries of API results
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Takes records from core/cursor_api.py and reshapes them into small dicts
#   the MCP tools can return directly.  Every function here is pure: no
#   network, no clock (callers pass in whatever they fetched).
#
# CONTEXT BUDGET:
#   An agent does not need 400 rows of daily usage to answer "who spends the
#   most?".  Lists are capped (top 20 spenders, first 50 usage rows, first 20
#   events, ...) and every cap is reported back (truncated / more_members) so
#   the agent knows it is looking at a slice.
# =============================================================================

from collections import Counter
from dataclasses import asdict
from typing import Optional

from core.models import (
    AnalyticsResponse,
    BillingGroup,
    BillingGroups,
    DailyUsageEntry,
    MemberSpend,
    TeamMember,
    TeamSpend,
    UsageEvent,
    UsageEventsPage,
)


def format_cents(cents: float) -> str:
    """1234 → "$12.34"."""
    return f"${cents / 100:.2f}"


def _member_line(member: TeamMember) -> str:
    return f"{member.name} <{member.email}> ({member.role})"


def _spender(rank: int, member: MemberSpend) -> dict:
    entry = {
        "rank": rank,
        "name": member.name,
        "email": member.email,
        "spend": format_cents(member.spend_cents),
        "included": format_cents(member.included_spend_cents),
        "premium_requests": member.fast_premium_requests,
    }
    if member.hard_limit_override_dollars > 0:
        entry["limit"] = f"${member.hard_limit_override_dollars}"
    return entry


def _top_spenders(members: list[MemberSpend], n: int) -> list[MemberSpend]:
    return sorted(members, key=lambda m: m.spend_cents, reverse=True)[:n]


def _same_email(a: str, b: str) -> bool:
    return a.lower() == b.lower()


# -----------------------------------------------------------------------------
# Roster & spend
# -----------------------------------------------------------------------------
def summarize_team(members: list[TeamMember]) -> dict:
    active = [m for m in members if not m.is_removed]
    removed = [m for m in members if m.is_removed]
    return {
        "summary": f"Team: {len(members)} total ({len(active)} active, {len(removed)} removed)",
        "total": len(members),
        "active": len(active),
        "removed": len(removed),
        "active_members": [_member_line(m) for m in active],
        "removed_members": [_member_line(m) for m in removed],
    }


def summarize_spending(team_spend: TeamSpend, top_n: int = 20) -> dict:
    members = team_spend.members
    top = _top_spenders(members, top_n)
    return {
        "summary": (
            f"Billing cycle start: {team_spend.cycle_start}. "
            f"Total team spend: {format_cents(team_spend.total_spend_cents)} "
            f"across {len(members)} members."
        ),
        "cycle_start": team_spend.cycle_start,
        "total_spend": format_cents(team_spend.total_spend_cents),
        "members": len(members),
        "top_spenders": [_spender(i + 1, m) for i, m in enumerate(top)],
        "more_members": max(0, len(members) - top_n),
    }


def describe_spend_limit(email: str, limit_dollars: float) -> str:
    if limit_dollars > 0:
        return f"Spend limit set: {email} → ${limit_dollars:g}/cycle"
    return f"Spend limit removed for {email}"


# -----------------------------------------------------------------------------
# Usage
# -----------------------------------------------------------------------------
def summarize_daily_usage(entries: list[DailyUsageEntry], limit: int = 50) -> dict:
    result = {
        "total_entries": len(entries),
        "entries": [asdict(e) for e in entries[:limit]],
        "truncated": len(entries) > limit,
    }
    if result["truncated"]:
        result["note"] = (
            f"Showing first {limit} of {len(entries)} entries. "
            "Use page/page_size for specific ranges."
        )
    return result


def summarize_usage_events(page: UsageEventsPage, limit: int = 20) -> dict:
    return {
        "total_events": page.total_usage_events_count,
        "page": page.pagination.page,
        "total_pages": page.pagination.total_pages,
        "has_next_page": page.pagination.has_next_page,
        "events": [asdict(e) for e in page.events[:limit]],
        "truncated": len(page.events) > limit,
    }


def _group_summary(group: BillingGroup, members_per_group: int) -> dict:
    return {
        "name": group.name,
        "member_count": group.member_count,
        "spend": format_cents(group.spend_cents),
        "members": [
            f"{m.name} <{m.email}>: {format_cents(m.spend_cents)}"
            for m in group.current_members[:members_per_group]
        ],
        "more_members": max(0, len(group.current_members) - members_per_group),
    }


def summarize_billing_groups(groups: BillingGroups, members_per_group: int = 10) -> dict:
    cycle = groups.billing_cycle
    unassigned = groups.unassigned_group
    return {
        "billing_cycle": f"{cycle.cycle_start} → {cycle.cycle_end}" if cycle else None,
        "groups": [_group_summary(g, members_per_group) for g in groups.groups],
        "unassigned": (
            {"member_count": unassigned.member_count, "spend": format_cents(unassigned.spend_cents)}
            if unassigned else None
        ),
    }


# -----------------------------------------------------------------------------
# Analytics
# -----------------------------------------------------------------------------
def model_totals(response: AnalyticsResponse) -> list[dict]:
    """Per-model messages summed over the period, busiest model first.

    max_daily_users is the highest single-day user count, not a distinct
    user count (the API only reports per-day numbers).
    """
    totals: dict[str, dict] = {}
    for day in response.data:
        for model, stats in (day.get("model_breakdown") or {}).items():
            entry = totals.setdefault(model, {"model": model, "messages": 0, "max_daily_users": 0})
            entry["messages"] += stats.get("messages", 0)
            entry["max_daily_users"] = max(entry["max_daily_users"], stats.get("users", 0))
    return sorted(totals.values(), key=lambda t: t["messages"], reverse=True)


def summarize_model_usage(response: AnalyticsResponse) -> dict:
    totals = model_totals(response)
    lines = ["Model usage summary (period totals):"]
    lines += [
        f"  {t['model']}: {t['messages']} messages, up to {t['max_daily_users']} users/day"
        for t in totals
    ]
    return {"summary": "\n".join(lines), "models": totals, "daily": response.data}


# -----------------------------------------------------------------------------
# Composite views
# -----------------------------------------------------------------------------
def team_overview(
    members: list[TeamMember],
    team_spend: TeamSpend,
    dau: AnalyticsResponse,
    models: AnalyticsResponse,
) -> dict:
    active = [m for m in members if not m.is_removed]
    total = team_spend.total_spend_cents
    average = round(total / (len(active) or 1))
    latest = dau.data[-1] if dau.data else {}
    top = _top_spenders(team_spend.members, 5)
    top_models = model_totals(models)[:5]

    lines = [
        "=== Team Overview ===",
        f"Members: {len(active)} active ({len(members)} total)",
        f"Billing cycle: started {team_spend.cycle_start}",
        f"Total spend this cycle: {format_cents(total)}",
        f"Average spend per member: {format_cents(average)}",
        f"Latest DAU: {latest.get('dau', 'N/A')} ({latest.get('date', 'N/A')})",
        "Top 5 spenders:",
        *[f"  {i + 1}. {m.name}: {format_cents(m.spend_cents)}" for i, m in enumerate(top)],
        "Top 5 models (by messages):",
        *[f"  {i + 1}. {t['model']}: {t['messages']} messages" for i, t in enumerate(top_models)],
    ]
    return {
        "summary": "\n".join(lines),
        "active_members": len(active),
        "total_members": len(members),
        "cycle_start": team_spend.cycle_start,
        "total_spend": format_cents(total),
        "average_spend": format_cents(average),
        "latest_dau": latest or None,
        "top_spenders": [_spender(i + 1, m) for i, m in enumerate(top)],
        "top_models": top_models,
    }


def _describe_event(event: UsageEvent) -> str:
    if event.token_usage:
        tokens = event.token_usage.input_tokens + event.token_usage.output_tokens
        cost = f"{tokens} tokens, {format_cents(event.token_usage.total_cents)}"
    else:
        cost = f"cost: {format_cents(event.requests_costs)}"
    return f"{event.timestamp}: {event.model} ({event.kind}) {cost}"


def user_deep_dive(
    email: str,
    team_spend: TeamSpend,
    daily_usage: list[DailyUsageEntry],
    events: UsageEventsPage,
    recent_limit: int = 10,
) -> dict:
    """Spend, activity and model preferences for one member."""
    spend: Optional[MemberSpend] = next(
        (m for m in team_spend.members if _same_email(m.email, email)), None
    )
    days = [d for d in daily_usage if _same_email(d.email, email)]
    model_counts = Counter(e.model for e in events.events)

    result = {
        "email": email,
        "spend": None,
        "activity": {
            "days": len(days),
            "active_days": sum(1 for d in days if d.is_active),
            "total_requests": sum(d.total_requests for d in days),
            "total_lines_added": sum(d.total_lines_added for d in days),
        },
        "recent_models": [{"model": m, "requests": c} for m, c in model_counts.most_common()],
        "recent_events": [_describe_event(e) for e in events.events[:recent_limit]],
        "events_shown": len(events.events),
    }
    if spend is not None:
        result["spend"] = {
            "spend": format_cents(spend.spend_cents),
            "included": format_cents(spend.included_spend_cents),
            "premium_requests": spend.fast_premium_requests,
            "limit": (
                f"${spend.hard_limit_override_dollars}"
                if spend.hard_limit_override_dollars > 0 else "none"
            ),
        }
    else:
        result["note"] = "Spend data not found for this user."
    return result
