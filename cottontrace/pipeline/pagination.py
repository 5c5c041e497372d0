"""Fixed-size paging and the list view state that ties the pipeline together."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from cottontrace.pipeline.filters import Criterion, filter_records
from cottontrace.pipeline.sorting import SortDirection, SortState

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One slice of a result set.

    ``first_index``/``last_index`` are the slice bounds (last is exclusive and
    may exceed ``total``; both are 0 for a page out of range); use ``showing_from``/``showing_to`` for display.
    """

    items: list[T]
    page: int
    page_size: int
    first_index: int
    last_index: int
    total_pages: int
    total: int

    @property
    def showing_from(self) -> int:
        return self.first_index + 1 if self.items else 0

    @property
    def showing_to(self) -> int:
        return min(self.last_index, self.total)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def total_pages(count: int, page_size: int) -> int:
    """Number of pages; an empty result still has one (empty) page."""
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    return max(1, math.ceil(count / page_size))


def paginate(records: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice ``records`` into 1-indexed pages.

    Pages outside ``1..total_pages`` come back empty with zero slice bounds;
    callers clamp.

    Raises:
        ValueError: If page_size < 1
    """
    pages = total_pages(len(records), page_size)
    if 1 <= page <= pages:
        last_index = page * page_size
        first_index = last_index - page_size
        items = list(records[first_index:last_index])
    else:
        first_index = last_index = 0
        items = []
    return Page(
        items=items,
        page=page,
        page_size=page_size,
        first_index=first_index,
        last_index=last_index,
        total_pages=pages,
        total=len(records),
    )


def page_window(current: int, total: int, width: int = 5) -> list[int]:
    """Page numbers for the pager buttons, centred on ``current`` where possible."""
    if total <= width:
        return list(range(1, total + 1))
    half = width // 2
    if current <= half + 1:
        start = 1
    elif current >= total - half:
        start = total - width + 1
    else:
        start = current - half
    return list(range(start, start + width))


def clamp_page(page: int, pages: int) -> int:
    return max(1, min(page, pages))


@dataclass
class ListView(Generic[T]):
    """Criteria, sort and page for one list view.

    Every criteria change resets to page 1 so a narrowed result set is never
    viewed through a stale page number.
    """

    criteria: BaseModel
    sort: SortState
    page_size: int = 10
    page: int = 1
    predicates: dict[str, Criterion[Any]] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError("page_size must be at least 1")

    def set_criteria(self, criteria: BaseModel) -> None:
        self.criteria = criteria
        self.page = 1

    def update_filter(self, **changes: Any) -> None:
        """Change individual criteria; ``None`` or "" clears one.

        Raises:
            pydantic.ValidationError: If a value does not fit its criterion
        """
        values = {**self.criteria.model_dump(), **changes}
        cleared = {name: None if value == "" else value for name, value in values.items()}
        self.set_criteria(type(self.criteria).model_validate(cleared))

    def clear_filters(self) -> None:
        self.set_criteria(type(self.criteria)())

    def sort_by(self, field: Any) -> None:
        self.sort = self.sort.toggle(field)

    def set_sort(self, field: Any, direction: SortDirection | str) -> None:
        self.sort = SortState(field=field, direction=SortDirection(direction))

    def visible(self, records: Iterable[T]) -> list[T]:
        """Filtered and sorted rows, all pages."""
        return self.sort.apply(filter_records(records, self.criteria, self.predicates))

    def go_to(self, page: int, records: Iterable[T]) -> int:
        """Move to ``page``, clamped to the pages that exist for ``records``."""
        pages = total_pages(len(self.visible(records)), self.page_size)
        self.page = clamp_page(page, pages)
        return self.page

    def next_page(self, records: Iterable[T]) -> int:
        return self.go_to(self.page + 1, records)

    def previous_page(self, records: Iterable[T]) -> int:
        return self.go_to(self.page - 1, records)

    def current_page(self, records: Iterable[T]) -> Page[T]:
        return paginate(self.visible(records), self.page, self.page_size)

    def export_rows(self, records: Iterable[T]) -> list[T]:
        """Everything the current filters select, independent of the page."""
        return self.visible(records)
