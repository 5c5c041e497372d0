"""Filter predicate evaluation shared by the list, compliance and analytics views.

Each entity has a criteria model (what the user asked for) and a predicate
table (how each criterion reads the record). ``filter_records`` ANDs every
present criterion; absent ones (None, "" or an empty list) place no
constraint.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from cottontrace.models import (
    ActionStatus,
    Batch,
    CertificationType,
    ComplianceBatch,
    IsotopeRecord,
    RequestPriority,
    RequestStatus,
    VerificationRequest,
)

T = TypeVar("T")


class MatchKind(str, Enum):
    SEARCH = "search"  # case-insensitive substring over several fields
    EXACT = "exact"  # case-insensitive equality against one or more fields
    MIN = "min"  # numeric lower bound, inclusive
    DATE_FROM = "date_from"  # inclusive lower date bound
    DATE_TO = "date_to"  # inclusive upper date bound
    ANY_OF = "any_of"  # sub-collection intersects the allowed set


@dataclass(frozen=True)
class Criterion(Generic[T]):
    """How one filter field reads a record.

    SEARCH and EXACT accessors return a tuple of candidate strings; the other
    kinds return a single comparable value (or an iterable for ANY_OF).
    """

    kind: MatchKind
    accessor: Callable[[T], Any]


# ============================================================================
# Criteria models
# ============================================================================


class BatchFilter(BaseModel):
    """Batch list filters."""

    search: str | None = None
    farmer_id: str | None = None
    region: str | None = None
    harvest_date_start: datetime | date | None = None
    harvest_date_end: datetime | date | None = None
    certifications: list[CertificationType] | None = None
    compliance_status: str | None = None
    sustainability_score_min: float | None = None
    quality_grade: str | None = None


class ComplianceFilter(BaseModel):
    """Compliance dashboard filters."""

    search: str | None = None
    origin: str | None = None
    certification_status: str | None = None
    action_status: ActionStatus | None = None
    min_sustainability_score: float | None = None
    processing_date_start: datetime | date | None = None
    processing_date_end: datetime | date | None = None


class IsotopeFilter(BaseModel):
    """Isotope analytics filters."""

    search: str | None = None
    region: str | None = None
    verification_status: str | None = None
    date_start: datetime | date | None = None
    date_end: datetime | date | None = None
    confidence_min: float | None = None


class VerificationFilter(BaseModel):
    """Verification queue filters."""

    search: str | None = None
    status: RequestStatus | None = None
    priority: RequestPriority | None = None


# ============================================================================
# Predicate tables
# ============================================================================

BATCH_PREDICATES: dict[str, Criterion[Batch]] = {
    "search": Criterion(
        MatchKind.SEARCH,
        lambda b: (b.id, b.farm_name, b.location.region, b.location.country),
    ),
    "farmer_id": Criterion(MatchKind.EXACT, lambda b: (b.farmer_id,)),
    "region": Criterion(MatchKind.EXACT, lambda b: (b.location.region,)),
    "harvest_date_start": Criterion(MatchKind.DATE_FROM, lambda b: b.harvest_date),
    "harvest_date_end": Criterion(MatchKind.DATE_TO, lambda b: b.harvest_date),
    "certifications": Criterion(MatchKind.ANY_OF, lambda b: b.certification_types),
    "compliance_status": Criterion(
        MatchKind.EXACT,
        lambda b: (b.compliance_status.forced_labor_verification.status,),
    ),
    "sustainability_score_min": Criterion(
        MatchKind.MIN, lambda b: b.sustainability_score
    ),
    "quality_grade": Criterion(MatchKind.EXACT, lambda b: (b.quality.grade,)),
}

COMPLIANCE_PREDICATES: dict[str, Criterion[ComplianceBatch]] = {
    "search": Criterion(
        MatchKind.SEARCH,
        lambda c: (c.batch_id, c.origin.location, c.origin.country, c.compliance_notes),
    ),
    # Origin matches either the growing region or the country
    "origin": Criterion(MatchKind.EXACT, lambda c: (c.origin.location, c.origin.country)),
    "certification_status": Criterion(
        MatchKind.EXACT, lambda c: (c.certification_status,)
    ),
    "action_status": Criterion(MatchKind.EXACT, lambda c: (c.action_status.value,)),
    "min_sustainability_score": Criterion(
        MatchKind.MIN, lambda c: c.sustainability_score
    ),
    "processing_date_start": Criterion(MatchKind.DATE_FROM, lambda c: c.processing_date),
    "processing_date_end": Criterion(MatchKind.DATE_TO, lambda c: c.processing_date),
}

ISOTOPE_PREDICATES: dict[str, Criterion[IsotopeRecord]] = {
    "search": Criterion(
        MatchKind.SEARCH, lambda i: (i.batch_id, i.farm_name, i.location.region)
    ),
    "region": Criterion(MatchKind.EXACT, lambda i: (i.location.region,)),
    "verification_status": Criterion(
        MatchKind.EXACT, lambda i: (i.verification_status,)
    ),
    "date_start": Criterion(MatchKind.DATE_FROM, lambda i: i.test_date),
    "date_end": Criterion(MatchKind.DATE_TO, lambda i: i.test_date),
    "confidence_min": Criterion(MatchKind.MIN, lambda i: i.confidence_score),
}

VERIFICATION_PREDICATES: dict[str, Criterion[VerificationRequest]] = {
    "search": Criterion(
        MatchKind.SEARCH, lambda r: (r.company_name, r.id, r.document_type)
    ),
    "status": Criterion(MatchKind.EXACT, lambda r: (r.status.value,)),
    "priority": Criterion(MatchKind.EXACT, lambda r: (r.priority.value,)),
}

PREDICATE_TABLES: dict[type[BaseModel], dict[str, Criterion[Any]]] = {
    BatchFilter: BATCH_PREDICATES,
    ComplianceFilter: COMPLIANCE_PREDICATES,
    IsotopeFilter: ISOTOPE_PREDICATES,
    VerificationFilter: VERIFICATION_PREDICATES,
}


# ============================================================================
# Evaluation
# ============================================================================


def is_present(value: Any) -> bool:
    """True if a criterion value constrains the result."""
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) > 0
    return True


def active_criteria(criteria: BaseModel | None) -> dict[str, Any]:
    """Criterion name -> value for every present field, in declaration order."""
    if criteria is None:
        return {}
    return {
        name: getattr(criteria, name)
        for name in type(criteria).model_fields
        if is_present(getattr(criteria, name))
    }


def _text(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    return str(value).lower()


def _as_datetime(value: datetime | date) -> datetime:
    """Normalise a bound; a bare date means midnight UTC of that day."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def _matches(criterion: Criterion[T], record: T, wanted: Any) -> bool:
    kind = criterion.kind
    actual = criterion.accessor(record)

    if kind is MatchKind.SEARCH:
        term = _text(wanted)
        return any(term in _text(candidate) for candidate in actual)
    if kind is MatchKind.EXACT:
        target = _text(wanted)
        return any(_text(candidate) == target for candidate in actual)
    if kind is MatchKind.MIN:
        return actual >= wanted
    if kind is MatchKind.DATE_FROM:
        return _as_datetime(actual) >= _as_datetime(wanted)
    if kind is MatchKind.DATE_TO:
        return _as_datetime(actual) <= _as_datetime(wanted)
    if kind is MatchKind.ANY_OF:
        allowed = {_text(value) for value in wanted}
        return any(_text(value) in allowed for value in actual)
    raise ValueError(f"Unsupported match kind: {kind}")


def filter_records(
    records: Iterable[T],
    criteria: BaseModel | None,
    predicates: dict[str, Criterion[T]] | None = None,
) -> list[T]:
    """Return the records matching every present criterion, input order preserved.

    Args:
        records: Collection to narrow
        criteria: A filter model (BatchFilter, ComplianceFilter, ...) or None
        predicates: Predicate table; looked up from the criteria type if omitted

    Returns:
        New list of matching records (empty list when nothing matches)
    """
    rows = list(records)
    active = active_criteria(criteria)
    if not active:
        return rows

    if predicates is None:
        try:
            predicates = PREDICATE_TABLES[type(criteria)]
        except KeyError as exc:
            raise TypeError(
                f"No predicate table registered for {type(criteria).__name__}"
            ) from exc

    checks = [(predicates[name], value) for name, value in active.items()]
    return [
        record
        for record in rows
        if all(_matches(criterion, record, value) for criterion, value in checks)
    ]


def filter_batches(batches: Sequence[Batch], criteria: BatchFilter | None) -> list[Batch]:
    return filter_records(batches, criteria, BATCH_PREDICATES)


def filter_compliance(
    batches: Sequence[ComplianceBatch], criteria: ComplianceFilter | None
) -> list[ComplianceBatch]:
    return filter_records(batches, criteria, COMPLIANCE_PREDICATES)


def filter_isotopes(
    records: Sequence[IsotopeRecord], criteria: IsotopeFilter | None
) -> list[IsotopeRecord]:
    return filter_records(records, criteria, ISOTOPE_PREDICATES)


def filter_verification_queue(
    requests: Sequence[VerificationRequest], criteria: VerificationFilter | None
) -> list[VerificationRequest]:
    return filter_records(requests, criteria, VERIFICATION_PREDICATES)
