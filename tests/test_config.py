import pytest

from core.config import DEFAULT_AGENT_MODEL, DEFAULT_BASE_URL, load_settings
from core.errors import ConfigurationError


def test_missing_api_key_is_a_configuration_error():
    with pytest.raises(ConfigurationError, match="CURSOR_API_KEY"):
        load_settings({})


def test_blank_api_key_is_rejected():
    with pytest.raises(ConfigurationError):
        load_settings({"CURSOR_API_KEY": "   "})


def test_defaults():
    settings = load_settings({"CURSOR_API_KEY": "key_abc"})

    assert settings.api_key == "key_abc"
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.http_timeout_seconds == 30.0
    assert settings.max_rate_limit_retries is None
    assert settings.max_pages is None
    assert settings.agent_model == DEFAULT_AGENT_MODEL


def test_overrides():
    settings = load_settings({
        "CURSOR_API_KEY": "key_abc",
        "CURSOR_API_BASE_URL": "https://proxy.internal/",
        "CURSOR_HTTP_TIMEOUT": "5.5",
        "CURSOR_MAX_RATE_LIMIT_RETRIES": "3",
        "CURSOR_MAX_PAGES": "50",
        "CURSOR_AGENT_MODEL": "openrouter/anthropic/claude-3.5-sonnet",
    })

    assert settings.base_url == "https://proxy.internal"
    assert settings.http_timeout_seconds == 5.5
    assert settings.max_rate_limit_retries == 3
    assert settings.max_pages == 50
    assert settings.agent_model == "openrouter/anthropic/claude-3.5-sonnet"


@pytest.mark.parametrize(
    "name, value",
    [
        ("CURSOR_MAX_PAGES", "lots"),
        ("CURSOR_MAX_RATE_LIMIT_RETRIES", "-1"),
        ("CURSOR_HTTP_TIMEOUT", "fast"),
        ("CURSOR_HTTP_TIMEOUT", "0"),
    ],
)
def test_malformed_numbers_are_rejected(name, value):
    with pytest.raises(ConfigurationError, match=name):
        load_settings({"CURSOR_API_KEY": "key_abc", name: value})


def test_api_key_hidden_from_repr():
    settings = load_settings({"CURSOR_API_KEY": "key_secret_123"})

    assert "key_secret_123" not in repr(settings)
