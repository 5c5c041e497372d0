"""Unit tests for CottonTrace configuration management.

Tests AppConfig loading from environment variables, validation, and defaults.
"""

from __future__ import annotations

import pytest

from cottontrace import config as config_module
from cottontrace.config import AppConfig, get_config, reset_config

ENV_VARS = [
    "LOG_LEVEL",
    "LOG_FORMAT",
    "PAGE_SIZE",
    "PAGE_WINDOW",
    "MOCK_SEED",
    "MOCK_BATCH_COUNT",
    "MOCK_LATENCY_MS",
    "FIBRETRACE_MOCK_MODE",
    "FIBRETRACE_API_KEY",
    "FIBRETRACE_API_URL",
    "TREND_RECORD_LIMIT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


class TestAppConfig:
    """Test AppConfig creation and validation."""

    def test_defaults(self):
        config = AppConfig.from_env()

        assert config.log_level == "INFO"
        assert config.log_format == "text"
        assert config.pagination.page_size == 10
        assert config.pagination.window == 5
        assert config.mock_data.seed is None
        assert config.mock_data.batch_count == 24
        assert config.analytics.trend_record_limit == 100
        assert config.fibretrace.mock_mode is True

    def test_custom_paging(self, monkeypatch):
        monkeypatch.setenv("PAGE_SIZE", "25")
        monkeypatch.setenv("PAGE_WINDOW", "7")

        config = AppConfig.from_env()

        assert config.pagination.page_size == 25
        assert config.pagination.window == 7

    def test_invalid_page_size(self, monkeypatch):
        monkeypatch.setenv("PAGE_SIZE", "0")

        with pytest.raises(ValueError):
            AppConfig.from_env()

    def test_json_log_format(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "JSON")
        assert AppConfig.from_env().log_format == "json"

    def test_unknown_log_format(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")

        with pytest.raises(ValueError):
            AppConfig.from_env()

    def test_seed(self, monkeypatch):
        monkeypatch.setenv("MOCK_SEED", "1234")
        assert AppConfig.from_env().mock_data.seed == 1234

    def test_live_mode_requires_api_key(self, monkeypatch):
        monkeypatch.setenv("FIBRETRACE_MOCK_MODE", "false")

        with pytest.raises(KeyError) as exc_info:
            AppConfig.from_env()

        assert "FIBRETRACE_API_KEY" in str(exc_info.value)

    def test_live_mode_with_api_key(self, monkeypatch):
        monkeypatch.setenv("FIBRETRACE_MOCK_MODE", "false")
        monkeypatch.setenv("FIBRETRACE_API_KEY", "secret")
        monkeypatch.setenv("FIBRETRACE_API_URL", "https://partner.example.com")

        config = AppConfig.from_env()

        assert config.fibretrace.mock_mode is False
        assert config.fibretrace.api_key == "secret"
        assert config.fibretrace.base_url == "https://partner.example.com"


class TestGetConfig:
    def test_cached_until_reset(self, monkeypatch):
        first = get_config()
        assert get_config() is first

        monkeypatch.setenv("PAGE_SIZE", "20")
        assert get_config().pagination.page_size == 10

        reset_config()
        assert get_config().pagination.page_size == 20
        assert config_module._config is not first
