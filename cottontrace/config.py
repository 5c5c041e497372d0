"""CottonTrace configuration management.

Loads configuration from environment variables with sensible defaults.
Mock data, pagination and analytics windows all default to the values the
dashboard views were built around (10 rows per page, 5 pager buttons,
100-record trend window).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass
class PaginationConfig:
    """List view paging defaults."""

    page_size: int = 10
    window: int = 5  # Number of page buttons shown in the pager


@dataclass
class MockDataConfig:
    """Mock backing-store generation settings."""

    seed: int | None = None  # None = different sample on every start
    batch_count: int = 24
    isotope_count: int = 20
    latency_ms: int = 300  # Simulated network delay for store fetches


@dataclass
class AnalyticsConfig:
    """Dashboard and trend chart tuning."""

    trend_record_limit: int = 100  # Most recent N records considered for trends
    top_supplier_count: int = 5
    cert_expiry_warning_days: int = 90


@dataclass
class FibreTraceConfig:
    """FibreTrace partner API configuration."""

    base_url: str = "https://api.fibretrace.io"
    api_key: str | None = None
    mock_mode: bool = True  # Canned responses, no network
    timeout_seconds: float = 30.0
    mock_latency_ms: int = 1000  # Simulated processing time for push operations


@dataclass
class AppConfig:
    """Root application configuration.

    Loads from environment variables with fail-fast on inconsistent values.
    """

    log_level: str = "INFO"
    log_format: str = "text"  # json or text
    default_user: str = "John Smith"  # Recorded on status changes without an explicit actor

    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    mock_data: MockDataConfig = field(default_factory=MockDataConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    fibretrace: FibreTraceConfig = field(default_factory=FibreTraceConfig)

    @classmethod
    def from_env(cls) -> AppConfig:
        """Load configuration from environment variables.

        Optional (with defaults):
        - LOG_LEVEL: Logging verbosity (default: "INFO")
        - LOG_FORMAT: "json" or "text" console output (default: "text")
        - PAGE_SIZE / PAGE_WINDOW: List paging (default: 10 / 5)
        - MOCK_SEED: Seed for reproducible mock data (default: unseeded)
        - FIBRETRACE_MOCK_MODE: Use canned partner API responses (default: true)

        Raises:
            KeyError: If FIBRETRACE_MOCK_MODE is false and no FIBRETRACE_API_KEY is set
            ValueError: If a numeric setting is out of range
        """
        mock_mode = os.getenv("FIBRETRACE_MOCK_MODE", "true").lower() == "true"
        api_key = os.getenv("FIBRETRACE_API_KEY")
        if not mock_mode and not api_key:
            raise KeyError(
                "FIBRETRACE_API_KEY environment variable is required when "
                "FIBRETRACE_MOCK_MODE=false."
            )

        seed = os.getenv("MOCK_SEED")

        pagination = PaginationConfig(
            page_size=int(os.getenv("PAGE_SIZE", "10")),
            window=int(os.getenv("PAGE_WINDOW", "5")),
        )
        if pagination.page_size < 1:
            raise ValueError("PAGE_SIZE must be at least 1")

        log_format = os.getenv("LOG_FORMAT", "text").lower()
        if log_format not in ("json", "text"):
            raise ValueError(f"LOG_FORMAT must be json or text, got {log_format!r}")

        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=log_format,
            default_user=os.getenv("DEFAULT_USER", "John Smith"),
            pagination=pagination,
            mock_data=MockDataConfig(
                seed=int(seed) if seed else None,
                batch_count=int(os.getenv("MOCK_BATCH_COUNT", "24")),
                isotope_count=int(os.getenv("MOCK_ISOTOPE_COUNT", "20")),
                latency_ms=int(os.getenv("MOCK_LATENCY_MS", "300")),
            ),
            analytics=AnalyticsConfig(
                trend_record_limit=int(os.getenv("TREND_RECORD_LIMIT", "100")),
                top_supplier_count=int(os.getenv("TOP_SUPPLIER_COUNT", "5")),
                cert_expiry_warning_days=int(
                    os.getenv("CERT_EXPIRY_WARNING_DAYS", "90")
                ),
            ),
            fibretrace=FibreTraceConfig(
                base_url=os.getenv("FIBRETRACE_API_URL", "https://api.fibretrace.io"),
                api_key=api_key,
                mock_mode=mock_mode,
                timeout_seconds=float(os.getenv("FIBRETRACE_TIMEOUT", "30")),
                mock_latency_ms=int(os.getenv("FIBRETRACE_MOCK_LATENCY_MS", "1000")),
            ),
        )

    @property
    def export_root(self) -> Path:
        """Default directory for CLI exports."""
        return Path(os.getenv("EXPORT_DIR", "exports"))


# Lazily built from the environment on first access
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or create the AppConfig instance from environment.

    Returns:
        AppConfig: Application configuration

    Raises:
        KeyError: If required environment variables are missing
    """
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next access re-reads the environment."""
    global _config
    _config = None
