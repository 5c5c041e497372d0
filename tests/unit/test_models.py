"""Unit tests for CottonTrace Pydantic models.

Tests field constraints, invariants and the immutable update helpers.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from cottontrace.models import (
    ActionStatus,
    Certification,
    CertificationStatus,
    CertificationType,
    ComplianceBatch,
    QualityMetrics,
    ReferenceRange,
    VerificationRequest,
)


class TestQualityMetrics:
    def test_valid_grade(self):
        metrics = QualityMetrics(
            grade="B+",
            fiber_length=1.12,
            strength=29.5,
            micronaire=4.2,
            color="White",
            trash_content=1.1,
        )
        assert metrics.grade == "B+"

    def test_unknown_grade_rejected(self):
        with pytest.raises(ValidationError):
            QualityMetrics(
                grade="D",
                fiber_length=1.12,
                strength=29.5,
                micronaire=4.2,
                color="White",
                trash_content=1.1,
            )


class TestBatch:
    def test_score_bounds(self, make_batch):
        batch = make_batch(0)
        data = batch.model_dump()
        data["sustainability_score"] = 101
        with pytest.raises(ValidationError):
            type(batch)(**data)

    def test_custody_chain_must_be_chronological(self, make_batch):
        batch = make_batch(0)
        event = batch.custody_chain[0]
        earlier = event.model_copy(update={"timestamp": event.timestamp - timedelta(days=1)})
        data = batch.model_dump()
        data["custody_chain"] = [event.model_dump(), earlier.model_dump()]
        with pytest.raises(ValidationError, match="chronologically"):
            type(batch)(**data)

    def test_records_are_frozen(self, make_batch):
        batch = make_batch(0)
        with pytest.raises(ValidationError):
            batch.farm_name = "Other"

    def test_naive_datetimes_become_utc(self, make_batch):
        batch = make_batch(0)
        data = batch.model_dump()
        data["harvest_date"] = datetime(2024, 5, 1, 8, 0)
        rebuilt = type(batch)(**data)
        assert rebuilt.harvest_date.tzinfo == timezone.utc

    def test_certification_types(self, make_batch):
        batch = make_batch(0)
        assert batch.certification_types == [c.type.value for c in batch.certifications]


class TestCertification:
    def _cert(self, **overrides) -> Certification:
        data = {
            "id": "CERT-001",
            "name": "Organic Cotton Certification",
            "issuer": "Global Organic Textile Standard",
            "issue_date": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "expiry_date": datetime(2025, 1, 1, tzinfo=timezone.utc),
            "status": CertificationStatus.ACTIVE,
            "type": CertificationType.ORGANIC,
        }
        data.update(overrides)
        return Certification(**data)

    def test_issue_after_expiry_rejected(self):
        with pytest.raises(ValidationError):
            self._cert(issue_date=datetime(2026, 1, 1, tzinfo=timezone.utc))

    def test_effective_status_expires(self):
        cert = self._cert()
        assert cert.effective_status(datetime(2024, 6, 1, tzinfo=timezone.utc)) is CertificationStatus.ACTIVE
        assert cert.effective_status(datetime(2025, 6, 1, tzinfo=timezone.utc)) is CertificationStatus.EXPIRED

    def test_revoked_stays_revoked(self):
        cert = self._cert(status=CertificationStatus.REVOKED)
        assert cert.effective_status(datetime(2024, 6, 1, tzinfo=timezone.utc)) is CertificationStatus.REVOKED


class TestComplianceBatch:
    def test_head_must_match_action_status(self, make_compliance):
        record = make_compliance(0)
        data = record.model_dump()
        data["action_status"] = (
            ActionStatus.HOLD if record.action_status == ActionStatus.APPROVED else ActionStatus.APPROVED
        )
        with pytest.raises(ValidationError):
            ComplianceBatch(**data)

    def test_history_required(self, make_compliance):
        data = make_compliance(0).model_dump()
        data["status_history"] = []
        with pytest.raises(ValidationError):
            ComplianceBatch(**data)

    def test_with_status_prepends_entry(self, make_compliance):
        record = make_compliance(0)
        at = record.status_history[0].timestamp + timedelta(hours=1)
        updated = record.with_status(ActionStatus.HOLD, "Sarah Johnson", "Awaiting documents", at)

        assert updated.action_status == ActionStatus.HOLD
        assert updated.status_history[0].note == "Awaiting documents"
        assert updated.status_history[1:] == record.status_history
        assert updated.last_updated == at
        assert updated.updated_by == "Sarah Johnson"
        assert record.status_history[0].timestamp < at  # original untouched

    def test_approve_clears_pending_issues(self, make_compliance):
        record = make_compliance(0, pending_issues=["Documentation incomplete"])
        at = record.status_history[0].timestamp + timedelta(hours=1)
        updated = record.with_status(ActionStatus.APPROVED, "John Smith", None, at)
        assert updated.pending_issues is None

    def test_blank_note_stored_as_none(self, make_compliance):
        record = make_compliance(0)
        at = record.status_history[0].timestamp + timedelta(hours=1)
        updated = record.with_status(ActionStatus.HOLD, "John Smith", "", at)
        assert updated.status_history[0].note is None


class TestIsotopes:
    def test_reference_range_inclusive(self):
        reference = ReferenceRange(min=1, max=9)
        assert reference.contains(1) and reference.contains(9)
        assert not reference.contains(9.01)

    def test_out_of_range_isotopes(self, make_isotope):
        record = make_isotope(0)
        shifted = record.model_copy(
            update={"isotopes": record.isotopes.model_copy(update={"carbon": -40.0})}
        )
        assert shifted.out_of_range_isotopes() == ["carbon"]
        assert record.out_of_range_isotopes() == []

    def test_confidence_bounds(self, make_isotope):
        data = make_isotope(0).model_dump()
        data["confidence_score"] = 120
        with pytest.raises(ValidationError):
            type(make_isotope(0))(**data)


class TestVerificationRequest:
    def test_days_in_queue(self):
        now = datetime(2025, 1, 15, tzinfo=timezone.utc)
        assert VerificationRequest.days_in_queue(now - timedelta(days=3, hours=5), now) == 3

    def test_days_in_queue_never_negative(self):
        now = datetime(2025, 1, 15, tzinfo=timezone.utc)
        assert VerificationRequest.days_in_queue(now + timedelta(days=2), now) == 0
