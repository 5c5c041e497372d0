"""Unit tests for dashboard metrics, alerts and chart payloads."""

from __future__ import annotations

from datetime import timedelta

import pytest

from cottontrace.models import Certification, CertificationStatus, CertificationType
from cottontrace.pipeline.aggregate import summarize_isotopes
from cottontrace.reporting.charts import (
    compliance_chart,
    isotope_trend_chart,
    region_chart,
    verification_status_chart,
)
from cottontrace.reporting.dashboard_metrics import (
    build_alerts,
    compute_dashboard_metrics,
    rank_suppliers,
)


class TestComputeDashboardMetrics:
    def test_counts_partition_batches(self, sample_batches, now):
        metrics = compute_dashboard_metrics(sample_batches, now)

        assert metrics.total_batches == 24
        assert (
            metrics.compliant_batches
            + metrics.pending_verification
            + metrics.non_compliant_batches
            == 24
        )
        assert metrics.computed_at == now

    def test_empty(self, now):
        metrics = compute_dashboard_metrics([], now)

        assert metrics.total_batches == 0
        assert metrics.average_sustainability_score is None
        assert metrics.top_suppliers == []
        assert metrics.recent_alerts == []

    def test_average(self, make_batch, now):
        batches = [
            make_batch(0, sustainability_score=90),
            make_batch(1, sustainability_score=70),
        ]
        assert compute_dashboard_metrics(batches, now).average_sustainability_score == pytest.approx(80)


class TestRankSuppliers:
    def test_best_farm_first(self, make_batch):
        batches = [
            make_batch(0, farm_name="Low Farm", sustainability_score=60),
            make_batch(1, farm_name="High Farm", sustainability_score=95),
            make_batch(2, farm_name="High Farm", sustainability_score=85),
        ]

        ranked = rank_suppliers(batches)

        assert ranked[0] == {"name": "High Farm", "score": 90.0, "batches": 2}
        assert ranked[1]["name"] == "Low Farm"

    def test_limit(self, sample_batches):
        assert len(rank_suppliers(sample_batches, limit=2)) == 2


class TestBuildAlerts:
    def test_failed_and_pending_labour_checks(self, make_batch, now):
        batches = [
            make_batch(0, labor_status="failed", certifications=[], grade="A"),
            make_batch(1, labor_status="pending", certifications=[], grade="A"),
            make_batch(2, labor_status="verified", certifications=[], grade="A"),
        ]

        alerts = build_alerts(batches, now)

        by_batch = {a.batch_id: a for a in alerts}
        assert by_batch[batches[0].id].severity == "high"
        assert by_batch[batches[1].id].severity == "medium"
        assert batches[2].id not in by_batch

    def test_low_grade(self, make_batch, now):
        batch = make_batch(0, labor_status="verified", certifications=[], grade="C")
        (alert,) = build_alerts([batch], now)
        assert alert.type == "quality"

    def test_expiring_certification(self, make_batch, now):
        cert = Certification(
            id="CERT-EXP",
            name="Organic Cotton Certification",
            issuer="Global Organic Textile Standard",
            issue_date=now - timedelta(days=300),
            expiry_date=now + timedelta(days=20),
            status=CertificationStatus.ACTIVE,
            type=CertificationType.ORGANIC,
        )
        batch = make_batch(0, labor_status="verified", certifications=[cert], grade="A")

        (alert,) = build_alerts([batch], now)

        assert alert.type == "certification"
        assert alert.severity == "medium"
        assert "CERT-EXP" in alert.message

    def test_ids_follow_newest_first_order(self, sample_batches, now):
        alerts = build_alerts(sample_batches, now)
        times = [a.timestamp for a in alerts]
        assert times == sorted(times, reverse=True)
        assert [a.id for a in alerts] == [f"ALERT-{n:03d}" for n in range(1, len(alerts) + 1)]


class TestCharts:
    def test_compliance_chart(self, sample_batches, now):
        metrics = compute_dashboard_metrics(sample_batches, now)
        chart = compliance_chart(metrics)

        assert chart["labels"] == ["Compliant", "Pending", "Non-Compliant"]
        assert sum(chart["datasets"][0]["data"]) == 24

    def test_isotope_charts(self, sample_isotopes):
        summary = summarize_isotopes(sample_isotopes)

        status = verification_status_chart(summary)
        regions = region_chart(summary)

        assert sum(status["datasets"][0]["data"]) == len(sample_isotopes)
        assert sum(regions["datasets"][0]["data"]) == len(sample_isotopes)

    def test_trend_has_one_series_per_isotope(self, sample_isotopes):
        chart = isotope_trend_chart(sample_isotopes)

        assert [d["label"] for d in chart["datasets"]] == ["δ13C", "δ15N", "δ18O", "δ2H"]
        assert all(len(d["data"]) == len(chart["labels"]) for d in chart["datasets"])
