"""Derive compliance dashboard records from batches."""

from __future__ import annotations

import random
from datetime import timedelta

from cottontrace.models import (
    ActionStatus,
    Batch,
    ComplianceBatch,
    ComplianceOrigin,
    StatusHistoryEntry,
)

REVIEWERS = ["John Smith", "Sarah Johnson", "Michael Brown"]
CANDIDATE_ISSUES = [
    "Documentation incomplete",
    "Isotope verification pending",
    "Labor standards verification needed",
]


def derive_compliance_batch(batch: Batch, rng: random.Random) -> ComplianceBatch:
    """Synthesize a status history (1-5 reviews, three days apart) for ``batch``."""
    history = [
        StatusHistoryEntry(
            timestamp=batch.harvest_date + timedelta(days=3 * i),
            status=ActionStatus.APPROVED if rng.random() > 0.5 else ActionStatus.HOLD,
            updated_by=rng.choice(REVIEWERS),
            note="Routine verification completed" if rng.random() > 0.7 else None,
        )
        for i in range(rng.randint(1, 5))
    ]
    history.sort(key=lambda entry: entry.timestamp, reverse=True)
    head = history[0]

    pending_issues = None
    if head.status == ActionStatus.HOLD:
        pending_issues = [issue for issue in CANDIDATE_ISSUES if rng.random() > 0.5]

    outcome = (
        "There are pending verification issues."
        if pending_issues is not None
        else "All verifications complete."
    )
    return ComplianceBatch(
        id=f"comp-{batch.id}",
        batch_id=batch.id,
        origin=ComplianceOrigin(
            location=batch.location.region,
            country=batch.location.country,
            coordinates=(batch.location.latitude, batch.location.longitude),
        ),
        processing_date=batch.harvest_date
        + timedelta(seconds=rng.random() * 7 * 24 * 60 * 60),
        sustainability_score=batch.sustainability_score,
        certification_status=batch.compliance_status.forced_labor_verification.status,
        quality_parameters=batch.quality,
        compliance_notes=(
            f"Batch {batch.id} from {batch.farm_name} has been processed according "
            f"to standard protocols. {outcome}"
        ),
        action_status=head.status,
        last_updated=head.timestamp,
        updated_by=head.updated_by,
        status_history=history,
        pending_issues=pending_issues,
    )


def derive_compliance_batches(
    batches: list[Batch], rng: random.Random | None = None
) -> list[ComplianceBatch]:
    rng = rng or random.Random()
    return [derive_compliance_batch(batch, rng) for batch in batches]
