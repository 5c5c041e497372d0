"""Auditor verification queue sample."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from cottontrace.models import RequestPriority, RequestStatus, VerificationRequest

# (company, document type, status, priority, auditor, days waiting)
QUEUE_TEMPLATE: list[tuple[str, str, RequestStatus, RequestPriority, str, int]] = [
    ("Sunshine Organic Farms", "Compliance Report", RequestStatus.IN_REVIEW, RequestPriority.HIGH, "Sarah Johnson", 25),
    ("Green Valley Cotton", "FibreTrace Verification", RequestStatus.PENDING, RequestPriority.MEDIUM, "Michael Chen", 20),
    ("Delta Cotton Cooperative", "Module to Bale Verification", RequestStatus.VERIFIED, RequestPriority.LOW, "Emily Rodriguez", 15),
    ("Western Cotton Growers", "Labor Practices Audit", RequestStatus.REJECTED, RequestPriority.HIGH, "James Wilson", 12),
    ("Heartland Farms", "Environmental Impact Report", RequestStatus.PENDING, RequestPriority.HIGH, "Sarah Johnson", 10),
    ("Blue Sky Organics", "Certification Renewal", RequestStatus.IN_REVIEW, RequestPriority.MEDIUM, "Michael Chen", 8),
    ("Golden State Cotton", "Uster HVI 1000 Verification", RequestStatus.PENDING, RequestPriority.LOW, "Emily Rodriguez", 5),
    ("Southern Harvest Co-op", "Supply Chain Audit", RequestStatus.IN_REVIEW, RequestPriority.HIGH, "James Wilson", 3),
    ("Prairie Cotton Fields", "Sustainability Report", RequestStatus.PENDING, RequestPriority.MEDIUM, "Sarah Johnson", 1),
]


def generate_verification_queue(now: datetime | None = None) -> list[VerificationRequest]:
    """Nine outstanding requests, oldest first, submitted relative to ``now``."""
    now = now or datetime.now(timezone.utc)
    queue = []
    for n, (company, document, status, priority, auditor, days) in enumerate(QUEUE_TEMPLATE, start=1):
        submitted = now - timedelta(days=days)
        queue.append(
            VerificationRequest(
                id=f"VR-2024-{n:04d}",
                submission_date=submitted,
                company_name=company,
                document_type=document,
                status=status,
                priority=priority,
                assigned_auditor=auditor,
                time_in_queue=VerificationRequest.days_in_queue(submitted, now),
            )
        )
    return queue
