"""Unit tests for the mock sample generators."""

from __future__ import annotations

import random

from cottontrace.mock_data import (
    derive_compliance_batches,
    generate_batches,
    generate_isotope_records,
    generate_reports,
    generate_verification_queue,
)
from cottontrace.models import ActionStatus, QUALITY_GRADES


class TestBatches:
    def test_shape(self, sample_batches):
        assert len(sample_batches) == 24
        for batch in sample_batches:
            assert batch.id.startswith("MODULE-")
            assert batch.harvest_date.year == 2024
            assert 55 <= batch.sustainability_score <= 98
            assert batch.quality.grade in QUALITY_GRADES
            assert 1 <= len(batch.custody_chain) <= 3
            assert len(batch.certifications) <= 2

    def test_custodian_is_last_custody_recipient(self, sample_batches):
        for batch in sample_batches:
            assert batch.current_custodian == batch.custody_chain[-1].to_entity

    def test_custody_chain_is_chronological(self, sample_batches):
        for batch in sample_batches:
            times = [event.timestamp for event in batch.custody_chain]
            assert times == sorted(times)

    def test_same_seed_same_sample(self, now):
        assert generate_batches(5, random.Random(1), now) == generate_batches(
            5, random.Random(1), now
        )


class TestComplianceDerivation:
    def test_history_newest_first(self, sample_batches):
        for record in derive_compliance_batches(sample_batches, random.Random(3)):
            times = [entry.timestamp for entry in record.status_history]
            assert times == sorted(times, reverse=True)
            assert 1 <= len(times) <= 5
            assert record.action_status == record.status_history[0].status

    def test_pending_issues_only_on_hold(self, sample_batches):
        for record in derive_compliance_batches(sample_batches, random.Random(3)):
            if record.action_status == ActionStatus.APPROVED:
                assert record.pending_issues is None
            else:
                assert isinstance(record.pending_issues, list)

    def test_mirrors_batch(self, sample_batches):
        batch = sample_batches[0]
        record = derive_compliance_batches([batch], random.Random(3))[0]
        assert record.sustainability_score == batch.sustainability_score
        assert record.origin.location == batch.location.region
        assert record.quality_parameters == batch.quality
        assert batch.id in record.compliance_notes


class TestIsotopes:
    def test_failures_only_in_tail(self, sample_isotopes):
        assert all(r.verification_status != "failed" for r in sample_isotopes[:15])

    def test_values_within_reference_ranges(self, sample_isotopes):
        assert all(r.out_of_range_isotopes() == [] for r in sample_isotopes)

    def test_confidence_range(self, sample_isotopes):
        assert all(70 <= r.confidence_score < 100 for r in sample_isotopes)

    def test_ids(self, now):
        records = generate_isotope_records(3, random.Random(0), now)
        assert [r.batch_id for r in records] == ["BATCH-001", "BATCH-002", "BATCH-003"]


class TestQueueAndReports:
    def test_queue_ages(self, now):
        queue = generate_verification_queue(now)
        assert [r.id for r in queue][:2] == ["VR-2024-0001", "VR-2024-0002"]
        assert [r.time_in_queue for r in queue] == [25, 20, 15, 12, 10, 8, 5, 3, 1]

    def test_reports(self):
        assert [r.id for r in generate_reports()] == ["REP-001", "REP-002", "REP-003"]
