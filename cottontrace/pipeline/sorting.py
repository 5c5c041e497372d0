"""Enumerated sort fields and the stable sort used by every list view."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from cottontrace.models import Batch, ComplianceBatch, IsotopeRecord, VerificationRequest

T = TypeVar("T")


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class BatchSortField(str, Enum):
    ID = "id"
    FARM_NAME = "farm_name"
    HARVEST_DATE = "harvest_date"
    LOCATION = "location"
    QUANTITY = "quantity"
    QUALITY = "quality"
    COMPLIANCE_STATUS = "compliance_status"
    SUSTAINABILITY_SCORE = "sustainability_score"


class ComplianceSortField(str, Enum):
    BATCH_ID = "batch_id"
    ORIGIN = "origin"
    PROCESSING_DATE = "processing_date"
    SUSTAINABILITY_SCORE = "sustainability_score"
    CERTIFICATION_STATUS = "certification_status"
    QUALITY_PARAMETERS = "quality_parameters"
    ACTION_STATUS = "action_status"
    LAST_UPDATED = "last_updated"


class IsotopeSortField(str, Enum):
    BATCH_ID = "batch_id"
    FARM_NAME = "farm_name"
    REGION = "region"
    TEST_DATE = "test_date"
    CONFIDENCE_SCORE = "confidence_score"
    VERIFICATION_STATUS = "verification_status"


class VerificationSortField(str, Enum):
    ID = "id"
    SUBMISSION_DATE = "submission_date"
    COMPANY_NAME = "company_name"
    STATUS = "status"
    PRIORITY = "priority"
    TIME_IN_QUEUE = "time_in_queue"


# Nested fields resolve to a single comparable value. Grades compare as plain
# strings, so "A" < "A-" < "B" < "B+".
BATCH_SORT_KEYS: dict[BatchSortField, Callable[[Batch], Any]] = {
    BatchSortField.ID: lambda b: b.id,
    BatchSortField.FARM_NAME: lambda b: b.farm_name,
    BatchSortField.HARVEST_DATE: lambda b: b.harvest_date,
    BatchSortField.LOCATION: lambda b: b.location.region,
    BatchSortField.QUANTITY: lambda b: b.quantity,
    BatchSortField.QUALITY: lambda b: b.quality.grade,
    BatchSortField.COMPLIANCE_STATUS: lambda b: b.compliance_status.forced_labor_verification.status,
    BatchSortField.SUSTAINABILITY_SCORE: lambda b: b.sustainability_score,
}

COMPLIANCE_SORT_KEYS: dict[ComplianceSortField, Callable[[ComplianceBatch], Any]] = {
    ComplianceSortField.BATCH_ID: lambda c: c.batch_id,
    ComplianceSortField.ORIGIN: lambda c: c.origin.location,
    ComplianceSortField.PROCESSING_DATE: lambda c: c.processing_date,
    ComplianceSortField.SUSTAINABILITY_SCORE: lambda c: c.sustainability_score,
    ComplianceSortField.CERTIFICATION_STATUS: lambda c: c.certification_status,
    ComplianceSortField.QUALITY_PARAMETERS: lambda c: c.quality_parameters.grade,
    ComplianceSortField.ACTION_STATUS: lambda c: c.action_status.value,
    ComplianceSortField.LAST_UPDATED: lambda c: c.last_updated,
}

ISOTOPE_SORT_KEYS: dict[IsotopeSortField, Callable[[IsotopeRecord], Any]] = {
    IsotopeSortField.BATCH_ID: lambda i: i.batch_id,
    IsotopeSortField.FARM_NAME: lambda i: i.farm_name,
    IsotopeSortField.REGION: lambda i: i.location.region,
    IsotopeSortField.TEST_DATE: lambda i: i.test_date,
    IsotopeSortField.CONFIDENCE_SCORE: lambda i: i.confidence_score,
    IsotopeSortField.VERIFICATION_STATUS: lambda i: i.verification_status,
}

VERIFICATION_SORT_KEYS: dict[VerificationSortField, Callable[[VerificationRequest], Any]] = {
    VerificationSortField.ID: lambda r: r.id,
    VerificationSortField.SUBMISSION_DATE: lambda r: r.submission_date,
    VerificationSortField.COMPANY_NAME: lambda r: r.company_name,
    VerificationSortField.STATUS: lambda r: r.status.value,
    VerificationSortField.PRIORITY: lambda r: r.priority.value,
    VerificationSortField.TIME_IN_QUEUE: lambda r: r.time_in_queue,
}

SORT_KEY_TABLES: dict[type[Enum], dict[Any, Callable[[Any], Any]]] = {
    BatchSortField: BATCH_SORT_KEYS,
    ComplianceSortField: COMPLIANCE_SORT_KEYS,
    IsotopeSortField: ISOTOPE_SORT_KEYS,
    VerificationSortField: VERIFICATION_SORT_KEYS,
}

# Every enum member must resolve; a missing accessor fails at import time
for _field_type, _table in SORT_KEY_TABLES.items():
    _missing = set(_field_type) - set(_table)
    if _missing:
        raise RuntimeError(
            f"{_field_type.__name__} has no sort key for: "
            f"{', '.join(sorted(m.value for m in _missing))}"
        )


def sort_key(field: Enum) -> Callable[[Any], Any]:
    """Accessor for an enumerated sort field."""
    try:
        return SORT_KEY_TABLES[type(field)][field]
    except KeyError as exc:
        raise TypeError(f"Unsupported sort field: {field!r}") from exc


def sort_records(
    records: Iterable[T],
    field: Enum,
    direction: SortDirection | str = SortDirection.ASC,
) -> list[T]:
    """Return a new list ordered by ``field``; the input is not mutated.

    Python's sort is stable in both directions (``reverse=True`` keeps equal
    keys in input order), so paging through a sorted view is deterministic.
    """
    direction = SortDirection(direction)
    return sorted(
        records,
        key=sort_key(field),
        reverse=direction is SortDirection.DESC,
    )


@dataclass(frozen=True)
class SortState:
    """Current sort selection for a list view."""

    field: Enum
    direction: SortDirection = SortDirection.ASC

    def toggle(self, field: Enum) -> SortState:
        """Same field flips direction; a different field starts ascending."""
        if field is self.field:
            return SortState(field=self.field, direction=self.direction.flipped())
        return SortState(field=field, direction=SortDirection.ASC)

    def apply(self, records: Iterable[T]) -> list[T]:
        return sort_records(records, self.field, self.direction)
