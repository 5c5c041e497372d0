"""Unit tests for summary statistics."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from cottontrace.mock_data import generate_verification_queue
from cottontrace.models import ActionStatus
from cottontrace.pipeline.aggregate import (
    BATCH_PROFILE,
    COMPLIANCE_PROFILE,
    ISOTOPE_PROFILE,
    GroupStats,
    aggregate,
    count_by,
    group_by,
    mean,
    monthly_trend,
    summarize_compliance,
    summarize_isotopes,
    summarize_verification_queue,
)


class TestPrimitives:
    def test_mean_of_empty_is_none(self):
        assert mean([]) is None

    def test_mean(self):
        assert mean([90, 70, 80]) == pytest.approx(80.0)

    def test_group_stats_average(self):
        stats = GroupStats()
        assert stats.average is None
        stats.add(10)
        stats.add(20)
        assert (stats.count, stats.total, stats.average) == (2, 30, 15)

    def test_count_by_includes_declared_categories(self):
        counts = count_by(["b", "b"], lambda x: x, ["a", "b", "c"])
        assert counts == {"a": 0, "b": 2, "c": 0}
        assert list(counts) == ["a", "b", "c"]

    def test_count_by_appends_unknown_keys(self):
        counts = count_by(["z", "a"], lambda x: x, ["a"])
        assert list(counts) == ["a", "z"]

    def test_group_by_first_seen_order(self):
        groups = group_by(
            [("x", 1), ("y", 3), ("x", 5)], lambda r: r[0], lambda r: r[1]
        )
        assert list(groups) == ["x", "y"]
        assert groups["x"].average == 3


class TestAggregate:
    def test_empty_collection(self):
        stats = aggregate([])
        assert stats.total == 0
        assert stats.average_score is None
        assert stats.groups == {}
        assert sum(stats.status_counts.values()) == 0

    def test_empty_collection_with_profile(self):
        stats = aggregate([], ISOTOPE_PROFILE)
        assert stats.status_counts == {"verified": 0, "pending": 0, "failed": 0}

    def test_status_counts_sum_to_total(self, sample_batches):
        stats = aggregate(sample_batches)
        assert sum(stats.status_counts.values()) == stats.total == len(sample_batches)

    def test_compliance_counts_sum_to_total(self, make_compliance):
        records = [make_compliance(i) for i in range(12)]
        stats = aggregate(records)
        assert set(stats.status_counts) == {"approved", "hold"}
        assert sum(stats.status_counts.values()) == len(records)

    def test_average_score(self, make_batch):
        batches = [
            make_batch(0, sustainability_score=92, labor_status="verified"),
            make_batch(1, sustainability_score=40, labor_status="failed"),
            make_batch(2, sustainability_score=70, labor_status="pending"),
        ]
        stats = aggregate(batches, BATCH_PROFILE)
        assert stats.average_score == pytest.approx(202 / 3)
        assert stats.status_counts == {"verified": 1, "pending": 1, "failed": 1}

    def test_groups_by_region(self, make_batch):
        batches = [
            make_batch(0, region="Texas", sustainability_score=80),
            make_batch(1, region="Texas", sustainability_score=60),
            make_batch(2, region="Georgia", sustainability_score=90),
        ]
        stats = aggregate(batches)
        assert stats.groups["Texas"].average == 70
        assert stats.groups["Georgia"].count == 1

    def test_unknown_record_type_raises(self):
        with pytest.raises(TypeError):
            aggregate([object()])

    def test_explicit_profile_overrides_inference(self, make_compliance):
        records = [make_compliance(0)]
        assert aggregate(records, COMPLIANCE_PROFILE).total == 1


class TestMonthlyTrend:
    def test_buckets_by_month(self, make_isotope):
        records = [
            make_isotope(0, test_date=datetime(2023, 3, 2, tzinfo=timezone.utc)),
            make_isotope(1, test_date=datetime(2023, 1, 20, tzinfo=timezone.utc)),
            make_isotope(2, test_date=datetime(2023, 3, 28, tzinfo=timezone.utc)),
        ]
        trend = monthly_trend(
            records, lambda r: r.test_date, {"confidence": lambda r: r.confidence_score}
        )
        assert trend.keys == ["2023-01", "2023-03"]
        assert trend.labels == ["01/23", "03/23"]
        march = (records[0].confidence_score + records[2].confidence_score) / 2
        assert trend.series["confidence"] == pytest.approx(
            [records[1].confidence_score, march]
        )

    def test_limit_keeps_most_recent(self, make_isotope):
        records = [
            make_isotope(i, test_date=datetime(2023, i + 1, 1, tzinfo=timezone.utc))
            for i in range(6)
        ]
        trend = monthly_trend(records, lambda r: r.test_date, {}, limit=2)
        assert trend.keys == ["2023-05", "2023-06"]

    def test_empty(self):
        trend = monthly_trend([], lambda r: r, {"x": lambda r: 0})
        assert trend.keys == [] and trend.series == {"x": []}


class TestEntitySummaries:
    def test_isotope_summary(self, sample_isotopes):
        summary = summarize_isotopes(sample_isotopes)
        assert summary.verified + summary.pending + summary.failed == summary.total
        assert sum(g.count for g in summary.region_data.values()) == summary.total
        assert set(summary.average_isotopes) == {"carbon", "nitrogen", "oxygen", "hydrogen"}

    def test_isotope_summary_empty(self):
        summary = summarize_isotopes([])
        assert summary.average_confidence is None
        assert summary.average_isotopes["carbon"] is None

    def test_compliance_summary(self, make_compliance):
        records = [make_compliance(i) for i in range(8)]
        summary = summarize_compliance(records)
        assert summary.approved + summary.on_hold == summary.total
        assert summary.approved == sum(
            1 for r in records if r.action_status == ActionStatus.APPROVED
        )

    def test_queue_summary(self, now):
        summary = summarize_verification_queue(generate_verification_queue(now))
        assert summary.total == 9
        assert summary.status_counts == {
            "Pending": 4,
            "In Review": 3,
            "Verified": 1,
            "Rejected": 1,
        }
        assert summary.priority_counts == {"High": 4, "Medium": 3, "Low": 2}
        assert summary.oldest_request_id == "VR-2024-0001"
        assert summary.average_days_in_queue == pytest.approx(99 / 9)
