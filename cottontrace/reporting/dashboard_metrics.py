"""Dashboard metrics derived from the current batch collection.

Combines compliance counts, sustainability averages, supplier ranking and
alerts into a single overview for the landing dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Sequence

from cottontrace.models import Alert, Batch, CertificationStatus
from cottontrace.pipeline.aggregate import BATCH_PROFILE, count_by, group_by, mean

LOW_GRADES = ("C+", "C")


@dataclass
class DashboardMetrics:
    """Landing dashboard overview."""

    # Compliance overview
    total_batches: int
    compliant_batches: int  # forced-labour verified
    pending_verification: int
    non_compliant_batches: int  # forced-labour verification failed

    # Sustainability
    average_sustainability_score: float | None
    top_suppliers: list[dict] = field(default_factory=list)  # [{'name': ..., 'score': ...}]

    recent_alerts: list[Alert] = field(default_factory=list)

    computed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def rank_suppliers(batches: Sequence[Batch], limit: int = 5) -> list[dict]:
    """Farms ranked by mean sustainability score, best first."""
    by_farm = group_by(batches, lambda b: b.farm_name, lambda b: b.sustainability_score)
    ranked = sorted(by_farm.items(), key=lambda item: item[1].average, reverse=True)
    return [
        {"name": name, "score": round(stats.average, 1), "batches": stats.count}
        for name, stats in ranked[:limit]
    ]


def build_alerts(
    batches: Sequence[Batch], now: datetime, expiry_warning_days: int = 90
) -> list[Alert]:
    """Open alerts for expiring certifications, labour verification and low grades.

    Newest first; ids are assigned after ordering.
    """
    warning_horizon = now + timedelta(days=expiry_warning_days)
    raw: list[dict] = []

    for batch in batches:
        labor = batch.compliance_status.forced_labor_verification
        if labor.status == "failed":
            raw.append({
                "type": "compliance",
                "severity": "high",
                "message": f"Harvest {batch.id} failed forced labor verification",
                "timestamp": labor.verification_date or batch.harvest_date,
                "batch_id": batch.id,
            })
        elif labor.status == "pending":
            raw.append({
                "type": "compliance",
                "severity": "medium",
                "message": f"Harvest {batch.id} awaiting forced labor verification",
                "timestamp": batch.harvest_date,
                "batch_id": batch.id,
            })

        if batch.quality.grade in LOW_GRADES:
            raw.append({
                "type": "quality",
                "severity": "medium",
                "message": f"Harvest {batch.id} below quality threshold (grade {batch.quality.grade})",
                "timestamp": batch.harvest_date,
                "batch_id": batch.id,
            })

        for cert in batch.certifications:
            if cert.effective_status(now) != CertificationStatus.ACTIVE:
                continue
            if cert.expiry_date <= warning_horizon:
                days_left = (cert.expiry_date - now).days
                raw.append({
                    "type": "certification",
                    "severity": "medium" if days_left < 30 else "low",
                    "message": f"Certification {cert.id} approaching expiration ({days_left} days)",
                    "timestamp": now,
                    "batch_id": batch.id,
                })

    raw.sort(key=lambda a: a["timestamp"], reverse=True)
    return [Alert(id=f"ALERT-{n:03d}", **a) for n, a in enumerate(raw, start=1)]


def compute_dashboard_metrics(
    batches: Sequence[Batch],
    now: datetime | None = None,
    top_supplier_count: int = 5,
    cert_expiry_warning_days: int = 90,
) -> DashboardMetrics:
    """Calculate the dashboard overview for ``batches``.

    Args:
        batches: Batches to summarise (typically the whole store)
        now: Reference time for certification expiry checks
        top_supplier_count: How many farms to rank
        cert_expiry_warning_days: Horizon for expiring-certification alerts

    Returns:
        DashboardMetrics; the average is None when there are no batches
    """
    now = now or datetime.now(timezone.utc)
    counts = count_by(batches, BATCH_PROFILE.status, BATCH_PROFILE.status_categories)

    return DashboardMetrics(
        total_batches=len(batches),
        compliant_batches=counts["verified"],
        pending_verification=counts["pending"],
        non_compliant_batches=counts["failed"],
        average_sustainability_score=mean(b.sustainability_score for b in batches),
        top_suppliers=rank_suppliers(batches, top_supplier_count),
        recent_alerts=build_alerts(batches, now, cert_expiry_warning_days),
        computed_at=now,
    )
