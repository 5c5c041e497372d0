"""Unit tests for sort comparators and sort state toggling."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from cottontrace.pipeline.sorting import (
    BATCH_SORT_KEYS,
    BatchSortField,
    ComplianceSortField,
    IsotopeSortField,
    SortDirection,
    SortState,
    VerificationSortField,
    sort_key,
    sort_records,
)


def _at(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


class TestSortRecords:
    def test_stable_ascending_on_tied_dates(self, make_batch):
        batches = [
            make_batch(0, id="B", harvest_date=_at(2024, 1, 1)),
            make_batch(1, id="A", harvest_date=_at(2024, 1, 1)),
            make_batch(2, id="C", harvest_date=_at(2023, 12, 31)),
        ]
        result = sort_records(batches, BatchSortField.HARVEST_DATE, SortDirection.ASC)
        assert [b.id for b in result] == ["C", "B", "A"]

    def test_stable_descending_keeps_tie_order(self, make_batch):
        batches = [
            make_batch(0, id="B", harvest_date=_at(2024, 1, 1)),
            make_batch(1, id="A", harvest_date=_at(2024, 1, 1)),
            make_batch(2, id="C", harvest_date=_at(2023, 12, 31)),
        ]
        result = sort_records(batches, BatchSortField.HARVEST_DATE, SortDirection.DESC)
        assert [b.id for b in result] == ["B", "A", "C"]

    def test_input_not_mutated(self, sample_batches):
        original = list(sample_batches)
        sort_records(sample_batches, BatchSortField.SUSTAINABILITY_SCORE, "desc")
        assert sample_batches == original

    @pytest.mark.parametrize("field", list(BatchSortField))
    def test_reverse_of_ascending_equals_descending_for_distinct_keys(self, make_batch, field):
        # Distinct keys on every sortable field
        batches = [
            make_batch(
                i,
                id=f"MODULE-{i}",
                farm_name=f"Farm {i}",
                harvest_date=_at(2024, 1, 1 + i),
                region=f"Region {i}",
                quantity=1000.0 + i,
                grade=grade,
                labor_status=status,
                sustainability_score=60 + i,
            )
            for i, (grade, status) in enumerate(
                [("B", "pending"), ("A", "verified"), ("C", "failed")]
            )
        ]
        ascending = sort_records(batches, field, SortDirection.ASC)
        descending = sort_records(batches, field, SortDirection.DESC)
        assert list(reversed(ascending)) == descending

    def test_grades_sort_as_plain_strings(self, make_batch):
        batches = [make_batch(i, grade=g) for i, g in enumerate(["B+", "A-", "B", "A"])]
        result = sort_records(batches, BatchSortField.QUALITY)
        assert [b.quality.grade for b in result] == ["A", "A-", "B", "B+"]

    def test_location_sorts_by_region(self, make_batch):
        batches = [make_batch(0, region="Texas"), make_batch(1, region="Arizona")]
        result = sort_records(batches, BatchSortField.LOCATION)
        assert [b.location.region for b in result] == ["Arizona", "Texas"]

    def test_direction_accepts_string(self, make_batch):
        batches = [make_batch(0, sustainability_score=60), make_batch(1, sustainability_score=90)]
        result = sort_records(batches, BatchSortField.SUSTAINABILITY_SCORE, "desc")
        assert [b.sustainability_score for b in result] == [90, 60]

    def test_isotopes_by_confidence(self, sample_isotopes):
        result = sort_records(sample_isotopes, IsotopeSortField.CONFIDENCE_SCORE, "asc")
        scores = [r.confidence_score for r in result]
        assert scores == sorted(scores)

    def test_compliance_by_origin(self, make_compliance):
        records = [
            make_compliance(0, batch_overrides={"region": "Texas"}),
            make_compliance(1, batch_overrides={"region": "Georgia"}),
        ]
        result = sort_records(records, ComplianceSortField.ORIGIN)
        assert [r.origin.location for r in result] == ["Georgia", "Texas"]


class TestSortKeys:
    def test_every_batch_field_has_a_key(self):
        assert set(BATCH_SORT_KEYS) == set(BatchSortField)

    @pytest.mark.parametrize(
        "field",
        [*BatchSortField, *ComplianceSortField, *IsotopeSortField, *VerificationSortField],
    )
    def test_sort_key_resolves(self, field):
        assert callable(sort_key(field))

    def test_unknown_field_type_raises(self):
        with pytest.raises(TypeError):
            sort_key(SortDirection.ASC)


class TestSortState:
    def test_same_field_flips_direction(self):
        state = SortState(BatchSortField.HARVEST_DATE, SortDirection.DESC)
        toggled = state.toggle(BatchSortField.HARVEST_DATE)
        assert toggled.direction is SortDirection.ASC
        assert toggled.toggle(BatchSortField.HARVEST_DATE).direction is SortDirection.DESC

    def test_new_field_starts_ascending(self):
        state = SortState(BatchSortField.HARVEST_DATE, SortDirection.DESC)
        toggled = state.toggle(BatchSortField.FARM_NAME)
        assert toggled == SortState(BatchSortField.FARM_NAME, SortDirection.ASC)

    def test_apply(self, make_batch):
        batches = [make_batch(0, farm_name="B"), make_batch(1, farm_name="A")]
        state = SortState(BatchSortField.FARM_NAME)
        assert [b.farm_name for b in state.apply(batches)] == ["A", "B"]
