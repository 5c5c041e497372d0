"""Pytest configuration and fixtures for CottonTrace tests.

Provides a fixed clock, seeded sample data, record factories and an
isolated ServiceContext with no simulated latency.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone

import pytest

from cottontrace.config import AppConfig, FibreTraceConfig, MockDataConfig
from cottontrace.context import ServiceContext
from cottontrace.mock_data import (
    derive_compliance_batch,
    generate_batch,
    generate_batches,
    generate_isotope_records,
)
from cottontrace.models import (
    Batch,
    ComplianceBatch,
    IsotopeRecord,
    QualityMetrics,
)

FIXED_NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Reference time for expiry checks and queue ages."""
    return FIXED_NOW


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def sample_batches(rng: random.Random, now: datetime) -> list[Batch]:
    """24 seeded batches."""
    return generate_batches(24, rng, now)


@pytest.fixture
def sample_isotopes(now: datetime) -> list[IsotopeRecord]:
    return generate_isotope_records(20, random.Random(7), now)


@pytest.fixture
def make_batch(now: datetime):
    """Factory for a batch with selected fields overridden.

    Accepts top-level Batch fields plus the shortcuts ``region``,
    ``labor_status`` and ``grade`` for the nested values views filter on.
    """

    def _make(index: int = 0, **overrides) -> Batch:
        batch = generate_batch(random.Random(index), index, now)
        update: dict = {}

        region = overrides.pop("region", None)
        if region is not None:
            update["location"] = batch.location.model_copy(update={"region": region})

        labor_status = overrides.pop("labor_status", None)
        if labor_status is not None:
            labor = batch.compliance_status.forced_labor_verification.model_copy(
                update={"status": labor_status}
            )
            update["compliance_status"] = batch.compliance_status.model_copy(
                update={"forced_labor_verification": labor}
            )

        grade = overrides.pop("grade", None)
        if grade is not None:
            update["quality"] = QualityMetrics(
                **{**batch.quality.model_dump(), "grade": grade}
            )

        update.update(overrides)
        return batch.model_copy(update=update)

    return _make


@pytest.fixture
def make_compliance(make_batch):
    """Factory for a compliance record derived from ``make_batch``."""

    def _make(index: int = 0, batch_overrides: dict | None = None, **overrides) -> ComplianceBatch:
        batch = make_batch(index, **(batch_overrides or {}))
        record = derive_compliance_batch(batch, random.Random(index))
        return record.model_copy(update=overrides)

    return _make


@pytest.fixture
def make_isotope(now: datetime):
    """Factory for an isotope record with selected fields overridden."""

    def _make(index: int = 0, **overrides) -> IsotopeRecord:
        record = generate_isotope_records(index + 1, random.Random(index), now)[index]
        return record.model_copy(update=overrides)

    return _make


@pytest.fixture
def test_config() -> AppConfig:
    """Seeded configuration with no simulated latency."""
    return AppConfig(
        mock_data=MockDataConfig(seed=42, latency_ms=0),
        fibretrace=FibreTraceConfig(mock_latency_ms=0),
    )


@pytest.fixture
def context(test_config: AppConfig, now: datetime) -> ServiceContext:
    """Isolated service context (fresh, empty stores)."""
    return ServiceContext.from_config(test_config, now=now)
