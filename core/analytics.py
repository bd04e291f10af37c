# =============================================================================
# core/analytics.py  —  Query strings for the /analytics/team/* endpoints
# =============================================================================
#
# All analytics endpoints share the same filter:
#   startDate  "YYYY-MM-DD", "7d", "30d", "today", "yesterday"  (default "30d")
#   endDate    "YYYY-MM-DD", "today", "yesterday"               (default "today")
#   users      comma-separated emails, omitted entirely when there are none
#
# Pure functions only: no network, no state.
# =============================================================================

from typing import Iterable, Optional
from urllib.parse import urlencode

DEFAULT_START_DATE = "30d"
DEFAULT_END_DATE = "today"

# metric name → path segment under /analytics/team/
ANALYTICS_METRICS = (
    "dau",
    "models",
    "agent-edits",
    "tabs",
    "mcp",
    "top-file-extensions",
    "client-versions",
    "commands",
    "plans",
)


def analytics_params(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    users: Optional[Iterable[str]] = None,
) -> dict[str, str]:
    """Build the ordered query mapping for an analytics call."""
    params = {
        "startDate": start_date or DEFAULT_START_DATE,
        "endDate": end_date or DEFAULT_END_DATE,
    }
    user_list = list(users or [])
    if user_list:
        params["users"] = ",".join(user_list)
    return params


def build_analytics_query(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    users: Optional[Iterable[str]] = None,
) -> str:
    """Encode the analytics filter as a query string (without the "?")."""
    return urlencode(analytics_params(start_date, end_date, users))


def parse_users(users: Optional[str]) -> list[str]:
    """Split the comma-separated user filter the tools accept."""
    if not users:
        return []
    return [u.strip() for u in users.split(",") if u.strip()]
