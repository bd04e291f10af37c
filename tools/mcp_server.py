# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Registers every Cursor usage tool the agent can call.  Each tool is a
#   thin wrapper: it calls core/cursor_api.py, hands the records to
#   core/reports.py for summarizing, and returns a dict.
#
# TOOL NAMING CONVENTIONS:
#   - get_*  → read-only retrieval (idempotent, safe to retry)
#   - set_*  → the one write operation (set_spend_limit)
#
# ERRORS:
#   Anything the core raises (missing CURSOR_API_KEY, upstream 4xx/5xx,
#   invalid JSON, network failures) propagates out of the tool and FastMCP
#   reports it to the agent as a tool error.
#
# RUNNING THIS SERVER:
#   a) Standalone:              python -m tools.mcp_server
#   b) From the agent (stdio):  see agent/usage_agent.py
# =============================================================================

import json
import logging
import sys
import time
from dataclasses import asdict
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from fastmcp import FastMCP

from core.analytics import parse_users
from core.config import load_settings
from core.cursor_api import CursorAPI
from core.models import date_to_epoch_ms
from core.reports import (
    describe_spend_limit,
    summarize_billing_groups,
    summarize_daily_usage,
    summarize_model_usage,
    summarize_spending,
    summarize_team,
    summarize_usage_events,
    team_overview,
    user_deep_dive,
)

# =============================================================================
# Logging Setup
# =============================================================================
# STDOUT carries the MCP protocol, so every log line goes to STDERR.
#
# Colours: CYAN for incoming tool calls, YELLOW for progress, GREEN for the
# response JSON.
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result):
    """Log the tool response as compact JSON in GREEN, then return it."""
    logging.info(f"{_GREEN}  ← {tool_name} response: {json.dumps(result, separators=(',', ':'))}{_RESET}")
    return result


# =============================================================================
# API client
# =============================================================================
# Built once, on first use, from the environment (after load_dotenv).  A
# missing CURSOR_API_KEY raises ConfigurationError here, before any request.
# =============================================================================
load_dotenv()


@lru_cache(maxsize=1)
def _get_api() -> CursorAPI:
    return CursorAPI.from_settings(load_settings())


mcp = FastMCP("cursor-usage")

_DAY_MS = 24 * 60 * 60 * 1000


# =============================================================================
# ADMIN API TOOLS
# =============================================================================
@mcp.tool()
def get_team_members() -> dict:
    """List all team members with their roles and status.

    Returns:
        A dict with total/active/removed counts, a one-line summary and the
        active and removed members as "Name <email> (role)" strings.
    """
    _log_request("get_team_members")
    members = _get_api().get_team_members()
    _log_status(f"Got {len(members)} members")
    return _log_response("get_team_members", summarize_team(members))


@mcp.tool()
def get_spending(page: Optional[int] = None, all_pages: bool = False) -> dict:
    """Get current billing cycle spending for team members.

    Shows spend in dollars, included vs overage, fast premium requests and
    spend limits.

    Args:
        page: Page number (default: 1).  Ignored when all_pages is true.
        all_pages: Fetch every page and return the top 20 spenders with the
            team total (default: false).

    Returns:
        With all_pages: cycle_start, total_spend, members, top_spenders.
        Otherwise: one raw page with members, cycle_start, total_pages and
        total_members.
    """
    _log_request("get_spending", page=page, all_pages=all_pages)
    api = _get_api()

    if all_pages:
        team_spend = api.get_all_spending()
        _log_status(f"Aggregated {len(team_spend.members)} members")
        return _log_response("get_spending", summarize_spending(team_spend))

    result = api.get_spending(page=page or 1)
    return _log_response("get_spending", asdict(result))


@mcp.tool()
def get_daily_usage(
    start_date: Optional[int] = None,
    end_date: Optional[int] = None,
    page: Optional[int] = None,
    page_size: Optional[int] = None,
    all_pages: bool = False,
) -> dict:
    """Get daily usage data per user.

    Lines added/deleted, applies, accepts, rejects, tabs, requests by mode
    (composer/chat/agent), models used and client versions.

    Args:
        start_date: Start date as Unix timestamp in milliseconds.
        end_date: End date as Unix timestamp in milliseconds.
        page: Page number (default: 1).
        page_size: Results per page (default: 100).
        all_pages: Fetch all pages automatically (default: false).  Only the
            first 50 rows are returned; total_entries gives the full count.
    """
    _log_request("get_daily_usage", start_date=start_date, end_date=end_date,
                 page=page, page_size=page_size, all_pages=all_pages)
    api = _get_api()

    if all_pages:
        entries = api.get_all_daily_usage(start_date, end_date)
        _log_status(f"Aggregated {len(entries)} rows")
        return _log_response("get_daily_usage", summarize_daily_usage(entries))

    result = api.get_daily_usage(start_date, end_date, page=page or 1, page_size=page_size or 100)
    return _log_response("get_daily_usage", asdict(result))


@mcp.tool()
def get_billing_groups() -> dict:
    """Get billing groups with member lists, group-level spend and the billing cycle.

    At most 10 members are listed per group; more_members gives the rest.
    """
    _log_request("get_billing_groups")
    groups = _get_api().get_billing_groups()
    _log_status(f"Got {len(groups.groups)} groups")
    return _log_response("get_billing_groups", summarize_billing_groups(groups))


@mcp.tool()
def get_usage_events(
    email: Optional[str] = None,
    start_date: Optional[int] = None,
    end_date: Optional[int] = None,
    page: Optional[int] = None,
    page_size: Optional[int] = None,
) -> dict:
    """Get granular per-request usage events.

    Each event has model, token counts, cost and whether it was chargeable.

    Args:
        email: Filter by user email.
        start_date: Start date as Unix timestamp in milliseconds.
        end_date: End date as Unix timestamp in milliseconds.
        page: Page number (default: 1).
        page_size: Results per page (default: 500, max: 500).

    Returns:
        total_events, page, total_pages, has_next_page and the first 20
        events of the page (truncated tells whether there were more).
    """
    _log_request("get_usage_events", email=email, start_date=start_date,
                 end_date=end_date, page=page, page_size=page_size)
    result = _get_api().get_usage_events(
        email, start_date, end_date, page=page or 1, page_size=page_size or 500
    )
    return _log_response("get_usage_events", summarize_usage_events(result))


@mcp.tool()
def set_spend_limit(email: str, limit_dollars: float) -> str:
    """Set a hard spending limit (in dollars) for a specific team member.

    Use with caution: the user is blocked from making requests once the
    limit is reached.

    Args:
        email: User email to set the limit for.
        limit_dollars: Hard spending limit in dollars (0 removes the limit).
    """
    _log_request("set_spend_limit", email=email, limit_dollars=limit_dollars)
    _get_api().set_user_spend_limit(email, limit_dollars)
    return _log_response("set_spend_limit", describe_spend_limit(email, limit_dollars))


# =============================================================================
# ANALYTICS API TOOLS
# =============================================================================
# All analytics tools share one filter:
#   start_date  "YYYY-MM-DD", "7d", "30d", "today", "yesterday" (default "30d")
#   end_date    "YYYY-MM-DD", "today", "yesterday"              (default "today")
#   users       comma-separated emails
# =============================================================================
def _analytics(tool_name: str, metric: str, start_date, end_date, users) -> list:
    _log_request(tool_name, start_date=start_date, end_date=end_date, users=users)
    result = _get_api().get_analytics(metric, start_date, end_date, parse_users(users))
    _log_status(f"Got {len(result.data)} rows")
    return _log_response(tool_name, result.data)


@mcp.tool()
def get_dau(start_date: Optional[str] = None, end_date: Optional[str] = None,
            users: Optional[str] = None) -> list:
    """Get daily active users over time, with CLI, cloud agent and Bugbot breakdowns."""
    return _analytics("get_dau", "dau", start_date, end_date, users)


@mcp.tool()
def get_model_usage(start_date: Optional[str] = None, end_date: Optional[str] = None,
                    users: Optional[str] = None) -> dict:
    """Get model usage per day: which models are used, how many messages, by how many users.

    Returns period totals per model (busiest first) plus the daily breakdown.
    """
    _log_request("get_model_usage", start_date=start_date, end_date=end_date, users=users)
    result = _get_api().get_model_usage(start_date, end_date, parse_users(users))
    return _log_response("get_model_usage", summarize_model_usage(result))


@mcp.tool()
def get_agent_edits(start_date: Optional[str] = None, end_date: Optional[str] = None,
                    users: Optional[str] = None) -> list:
    """Get agent edit metrics: suggested vs accepted vs rejected diffs and lines."""
    return _analytics("get_agent_edits", "agent-edits", start_date, end_date, users)


@mcp.tool()
def get_tabs(start_date: Optional[str] = None, end_date: Optional[str] = None,
             users: Optional[str] = None) -> list:
    """Get tab autocomplete usage: suggestions shown vs accepted vs rejected."""
    return _analytics("get_tabs", "tabs", start_date, end_date, users)


@mcp.tool()
def get_mcp_usage(start_date: Optional[str] = None, end_date: Optional[str] = None,
                  users: Optional[str] = None) -> list:
    """Get MCP tool usage: which MCP servers and tools are used, and how often."""
    return _analytics("get_mcp_usage", "mcp", start_date, end_date, users)


@mcp.tool()
def get_file_extensions(start_date: Optional[str] = None, end_date: Optional[str] = None,
                        users: Optional[str] = None) -> list:
    """Get the file extensions that get the most AI suggestions, accepts and rejects."""
    return _analytics("get_file_extensions", "top-file-extensions", start_date, end_date, users)


@mcp.tool()
def get_client_versions(start_date: Optional[str] = None, end_date: Optional[str] = None,
                        users: Optional[str] = None) -> list:
    """Get the Cursor client version distribution across the team."""
    return _analytics("get_client_versions", "client-versions", start_date, end_date, users)


@mcp.tool()
def get_commands(start_date: Optional[str] = None, end_date: Optional[str] = None,
                 users: Optional[str] = None) -> list:
    """Get command usage analytics: which Cursor commands are used and how often."""
    return _analytics("get_commands", "commands", start_date, end_date, users)


@mcp.tool()
def get_plans(start_date: Optional[str] = None, end_date: Optional[str] = None,
              users: Optional[str] = None) -> list:
    """Get plan mode adoption: which models are used in plan mode and how often."""
    return _analytics("get_plans", "plans", start_date, end_date, users)


# =============================================================================
# COMPOSITE TOOLS
# =============================================================================
# These issue several API calls one after another and fold the results into
# one view.  Start here when the question is broad ("how is the team doing?").
# =============================================================================
@mcp.tool()
def get_team_overview(start_date: Optional[str] = None, end_date: Optional[str] = None) -> dict:
    """Get a team overview: member count, total spend, top spenders, DAU and top models.

    The best starting point for understanding the team's Cursor usage.

    Args:
        start_date: Analytics date range start (default: "7d").
        end_date: Analytics date range end (default: "today").
    """
    _log_request("get_team_overview", start_date=start_date, end_date=end_date)
    api = _get_api()
    start_date = start_date or "7d"
    end_date = end_date or "today"

    members = api.get_team_members()
    team_spend = api.get_all_spending()
    dau = api.get_dau(start_date, end_date)
    models = api.get_model_usage(start_date, end_date)
    _log_status(f"{len(members)} members, {len(team_spend.members)} spend rows")

    return _log_response("get_team_overview", team_overview(members, team_spend, dau, models))


@mcp.tool()
def get_user_deep_dive(email: str, start_date: Optional[str] = None) -> dict:
    """Deep dive into one user's usage: spend, daily activity, recent requests and models.

    Args:
        email: User email to analyze.
        start_date: ISO date or datetime ("2026-02-01", "2026-02-01T00:00:00Z")
            to start the activity window (default: 7 days ago).  Relative
            values such as "7d" are not accepted here.
    """
    _log_request("get_user_deep_dive", email=email, start_date=start_date)
    api = _get_api()
    now = int(time.time() * 1000)
    since = date_to_epoch_ms(start_date) if start_date else now - 7 * _DAY_MS

    team_spend = api.get_all_spending()
    daily_usage = api.get_all_daily_usage(since, now)
    events = api.get_usage_events(email, page=1, page_size=20)
    _log_status(f"{len(daily_usage)} usage rows, {len(events.events)} events")

    return _log_response("get_user_deep_dive", user_deep_dive(email, team_spend, daily_usage, events))


# =============================================================================
# Server entry point
# =============================================================================
if __name__ == "__main__":
    _get_api()
    mcp.run()
