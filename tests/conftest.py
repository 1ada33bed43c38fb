"""Shared fixtures for the test suite."""

import pytest

from nexmeet_bot.config.settings import Settings
from nexmeet_bot.store.gateway import EventGateway

from fakes import FakeSupabase, make_row


@pytest.fixture
def settings(monkeypatch):
    """Settings independent of the developer's environment and .env file."""
    for name in (
        "TELEGRAM_BOT_TOKEN", "MISTRAL_API_KEY", "MISTRAL_MODEL_NAME", "SESSION_TTL_SECONDS",
        "LOG_FILE", "LOG_LEVEL", "PORT", "HOST", "ENVIRONMENT", "EVENTS_TABLE", "CORS_ORIGINS",
        "RATE_LIMIT_MAX_REQUESTS", "RATE_LIMIT_WINDOW_SECONDS", "EVENT_URL_BASE",
        "CURRENCY_SYMBOL", "MAX_RESPONSE_LENGTH",
    ):
        monkeypatch.delenv(name, raising=False)
    return Settings(
        _env_file=None,
        supabase_url="https://example.supabase.co",
        supabase_key="test-key",
        telegram_bot_token="123456:test_token",
        log_file=None,
    )


@pytest.fixture
def fake_supabase():
    return FakeSupabase(rows=[make_row(1), make_row(2)])


@pytest.fixture
def gateway(settings, fake_supabase):
    return EventGateway(settings, client=fake_supabase)
