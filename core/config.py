# =============================================================================
# core/config.py  —  Settings for the Cursor API client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns environment variables into one immutable Settings object.
#
#   Only the entry points (main.py, tools/mcp_server.py) call load_settings()
#   and they do it after load_dotenv(), so a local .env file works too.
#   Everything below the entry points receives Settings (or the values in it)
#   explicitly, which keeps the core testable without touching os.environ.
#
# VARIABLES:
#   CURSOR_API_KEY                 required, the team admin API key
#   CURSOR_API_BASE_URL            default https://api.cursor.com
#   CURSOR_HTTP_TIMEOUT            default 30 (seconds per request)
#   CURSOR_MAX_RATE_LIMIT_RETRIES  unset = retry 429s forever
#   CURSOR_MAX_PAGES               unset = follow pagination until it ends
#   CURSOR_AGENT_MODEL             default openrouter/openai/gpt-4o
# =============================================================================

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from core.errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.cursor.com"
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_AGENT_MODEL = "openrouter/openai/gpt-4o"


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, fixed at startup."""

    # repr=False keeps the key out of logs and tracebacks
    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT
    max_rate_limit_retries: Optional[int] = None
    max_pages: Optional[int] = None
    agent_model: str = DEFAULT_AGENT_MODEL


def _optional_int(environ: Mapping[str, str], name: str) -> Optional[int]:
    raw = environ.get(name, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {value}")
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment.

    Args:
        environ: Mapping to read from.  Defaults to os.environ.

    Raises:
        ConfigurationError: CURSOR_API_KEY is missing or a numeric variable
            cannot be parsed.  Raised before any network activity.
    """
    environ = os.environ if environ is None else environ

    api_key = environ.get("CURSOR_API_KEY", "").strip()
    if not api_key:
        raise ConfigurationError(
            "CURSOR_API_KEY environment variable is required. "
            "Get your API key from Cursor team settings (Settings → API Keys)."
        )

    raw_timeout = environ.get("CURSOR_HTTP_TIMEOUT", "").strip()
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_HTTP_TIMEOUT
    except ValueError:
        raise ConfigurationError(
            f"CURSOR_HTTP_TIMEOUT must be a number, got {raw_timeout!r}"
        ) from None
    if timeout <= 0:
        raise ConfigurationError("CURSOR_HTTP_TIMEOUT must be positive")

    base_url = environ.get("CURSOR_API_BASE_URL", "").strip() or DEFAULT_BASE_URL

    return Settings(
        api_key=api_key,
        base_url=base_url.rstrip("/"),
        http_timeout_seconds=timeout,
        max_rate_limit_retries=_optional_int(environ, "CURSOR_MAX_RATE_LIMIT_RETRIES"),
        max_pages=_optional_int(environ, "CURSOR_MAX_PAGES"),
        agent_model=environ.get("CURSOR_AGENT_MODEL", "").strip() or DEFAULT_AGENT_MODEL,
    )
