"""Summary statistics over filtered collections.

Used by the dashboard, analytics and compliance views. Nothing here divides
by zero: averages over empty input are ``None`` and render as "N/A".
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TypeVar

from cottontrace.models import (
    ActionStatus,
    Batch,
    ComplianceBatch,
    IsotopeRecord,
    RequestPriority,
    RequestStatus,
    VerificationRequest,
)

T = TypeVar("T")

VERIFICATION_STATES: tuple[str, ...] = ("verified", "pending", "failed")
ACTION_STATES: tuple[str, ...] = tuple(s.value for s in ActionStatus)
REQUEST_STATES: tuple[str, ...] = tuple(s.value for s in RequestStatus)
REQUEST_PRIORITIES: tuple[str, ...] = tuple(p.value for p in RequestPriority)
ISOTOPE_NAMES: tuple[str, ...] = ("carbon", "nitrogen", "oxygen", "hydrogen")


@dataclass
class GroupStats:
    """Running count and sum for one group key."""

    count: int = 0
    total: float = 0.0

    def add(self, value: float) -> None:
        self.count += 1
        self.total += value

    @property
    def average(self) -> float | None:
        if self.count == 0:
            return None
        return self.total / self.count


def mean(values: Iterable[float]) -> float | None:
    """Arithmetic mean, or None for an empty sequence."""
    items = list(values)
    if not items:
        return None
    return sum(items) / len(items)


def count_by(
    records: Iterable[T],
    key: Callable[[T], Hashable],
    categories: Sequence[Hashable] | None = None,
) -> dict[Any, int]:
    """Count records per category.

    Enumerated ``categories`` are always present (possibly 0) and come first in
    their declared order; any other key appears only once seen, in first-seen
    order.
    """
    counts: dict[Any, int] = {category: 0 for category in categories or ()}
    for record in records:
        k = key(record)
        counts[k] = counts.get(k, 0) + 1
    return counts


def group_by(
    records: Iterable[T],
    key: Callable[[T], Hashable],
    value: Callable[[T], float],
) -> dict[Any, GroupStats]:
    """Group key -> GroupStats, in first-seen key order."""
    groups: dict[Any, GroupStats] = {}
    for record in records:
        groups.setdefault(key(record), GroupStats()).add(value(record))
    return groups


@dataclass
class MonthlyTrend:
    """Per-month means for parallel series, ready for a line chart."""

    keys: list[str] = field(default_factory=list)  # YYYY-MM, ascending
    labels: list[str] = field(default_factory=list)  # MM/YY
    series: dict[str, list[float]] = field(default_factory=dict)


def monthly_trend(
    records: Iterable[T],
    date_key: Callable[[T], datetime],
    series: Mapping[str, Callable[[T], float]],
    limit: int = 100,
) -> MonthlyTrend:
    """Bucket the most recent ``limit`` records by month and average each series.

    Args:
        records: Records to bucket (any order)
        date_key: Timestamp accessor used for ordering and bucketing
        series: Series name -> numeric accessor (the views use up to four)
        limit: Cap on the working set, newest records kept

    Returns:
        MonthlyTrend with buckets sorted by YYYY-MM and relabelled MM/YY
    """
    ordered = sorted(records, key=date_key)
    if len(ordered) > limit:
        ordered = ordered[len(ordered) - limit :]

    buckets: dict[str, list[T]] = {}
    for record in ordered:
        buckets.setdefault(date_key(record).strftime("%Y-%m"), []).append(record)

    keys = sorted(buckets)
    trend = MonthlyTrend(
        keys=keys,
        labels=[f"{k[5:7]}/{k[2:4]}" for k in keys],
    )
    for name, accessor in series.items():
        trend.series[name] = [
            sum(accessor(r) for r in buckets[k]) / len(buckets[k]) for k in keys
        ]
    return trend


# ============================================================================
# Per-entity profiles
# ============================================================================


@dataclass(frozen=True)
class AggregationProfile:
    """Which fields ``aggregate`` reads for one entity type."""

    name: str
    status: Callable[[Any], str]
    status_categories: tuple[str, ...]
    score: Callable[[Any], float]
    group: Callable[[Any], str]


BATCH_PROFILE = AggregationProfile(
    name="batch",
    status=lambda b: b.compliance_status.forced_labor_verification.status,
    status_categories=VERIFICATION_STATES,
    score=lambda b: b.sustainability_score,
    group=lambda b: b.location.region,
)

COMPLIANCE_PROFILE = AggregationProfile(
    name="compliance",
    status=lambda c: c.action_status.value,
    status_categories=ACTION_STATES,
    score=lambda c: c.sustainability_score,
    group=lambda c: c.origin.location,
)

ISOTOPE_PROFILE = AggregationProfile(
    name="isotope",
    status=lambda i: i.verification_status,
    status_categories=VERIFICATION_STATES,
    score=lambda i: i.confidence_score,
    group=lambda i: i.location.region,
)

VERIFICATION_PROFILE = AggregationProfile(
    name="verification",
    status=lambda r: r.status.value,
    status_categories=REQUEST_STATES,
    score=lambda r: r.time_in_queue,
    group=lambda r: r.priority.value,
)

PROFILES: dict[type, AggregationProfile] = {
    Batch: BATCH_PROFILE,
    ComplianceBatch: COMPLIANCE_PROFILE,
    IsotopeRecord: ISOTOPE_PROFILE,
    VerificationRequest: VERIFICATION_PROFILE,
}


@dataclass
class SummaryStats:
    total: int
    status_counts: dict[str, int]
    average_score: float | None
    groups: dict[str, GroupStats]


def aggregate(
    records: Iterable[Any], profile: AggregationProfile | None = None
) -> SummaryStats:
    """Counts by status, mean score and per-group averages.

    The profile is inferred from the first record when omitted; an empty
    collection with no profile summarises as batches.
    """
    rows = list(records)
    if profile is None:
        if not rows:
            profile = BATCH_PROFILE
        else:
            try:
                profile = PROFILES[type(rows[0])]
            except KeyError as exc:
                raise TypeError(
                    f"No aggregation profile for {type(rows[0]).__name__}"
                ) from exc

    return SummaryStats(
        total=len(rows),
        status_counts=count_by(rows, profile.status, profile.status_categories),
        average_score=mean(profile.score(r) for r in rows),
        groups=group_by(rows, profile.group, profile.score),
    )


# ============================================================================
# Entity summaries
# ============================================================================


@dataclass
class IsotopeSummary:
    total: int
    verified: int
    pending: int
    failed: int
    average_confidence: float | None
    average_isotopes: dict[str, float | None]
    region_data: dict[str, GroupStats]


def summarize_isotopes(records: Sequence[IsotopeRecord]) -> IsotopeSummary:
    """Verification counts, mean confidence, mean ratios and confidence by region."""
    counts = count_by(records, ISOTOPE_PROFILE.status, VERIFICATION_STATES)
    return IsotopeSummary(
        total=len(records),
        verified=counts["verified"],
        pending=counts["pending"],
        failed=counts["failed"],
        average_confidence=mean(r.confidence_score for r in records),
        average_isotopes={
            name: mean(getattr(r.isotopes, name) for r in records)
            for name in ISOTOPE_NAMES
        },
        region_data=group_by(
            records, lambda r: r.location.region, lambda r: r.confidence_score
        ),
    )


@dataclass
class ComplianceSummary:
    total: int
    approved: int
    on_hold: int
    with_pending_issues: int
    average_score: float | None
    certification_counts: dict[str, int]


def summarize_compliance(batches: Sequence[ComplianceBatch]) -> ComplianceSummary:
    actions = count_by(batches, COMPLIANCE_PROFILE.status, ACTION_STATES)
    return ComplianceSummary(
        total=len(batches),
        approved=actions[ActionStatus.APPROVED.value],
        on_hold=actions[ActionStatus.HOLD.value],
        with_pending_issues=sum(1 for b in batches if b.pending_issues),
        average_score=mean(b.sustainability_score for b in batches),
        certification_counts=count_by(
            batches, lambda b: b.certification_status, VERIFICATION_STATES
        ),
    )


@dataclass
class QueueSummary:
    total: int
    status_counts: dict[str, int]
    priority_counts: dict[str, int]
    average_days_in_queue: float | None
    oldest_request_id: str | None


def summarize_verification_queue(
    requests: Sequence[VerificationRequest],
) -> QueueSummary:
    oldest = max(requests, key=lambda r: r.time_in_queue, default=None)
    return QueueSummary(
        total=len(requests),
        status_counts=count_by(requests, VERIFICATION_PROFILE.status, REQUEST_STATES),
        priority_counts=count_by(requests, lambda r: r.priority.value, REQUEST_PRIORITIES),
        average_days_in_queue=mean(r.time_in_queue for r in requests),
        oldest_request_id=oldest.id if oldest else None,
    )
