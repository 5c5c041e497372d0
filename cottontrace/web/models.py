"""Shared Pydantic models for the CottonTrace web API.

Request bodies live here; response payloads are the core records themselves
(``cottontrace.models``) or small envelopes built in the route modules.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from cottontrace.models import ActionStatus, ReportFormat, ReportType
from cottontrace.pipeline.aggregate import GroupStats, SummaryStats
from cottontrace.pipeline.filters import BatchFilter
from cottontrace.pipeline.pagination import ListView, Page, page_window
from cottontrace.pipeline.sorting import SortState


# ============================================================================
# Compliance Models
# ============================================================================


class StatusUpdateRequest(BaseModel):
    """Approve or hold a compliance batch.

    Used by: POST /api/compliance/{record_id}/status
    """

    status: ActionStatus
    updated_by: str | None = None  # Falls back to the configured default user
    note: str | None = None


# ============================================================================
# Report Models
# ============================================================================


class ReportRequest(BaseModel):
    """Generate a saved report from batch filters.

    Used by: POST /api/reports
    """

    name: str = Field(min_length=1)
    type: ReportType = ReportType.CUSTOM
    format: ReportFormat = ReportFormat.PDF
    filters: BatchFilter = Field(default_factory=BatchFilter)
    created_by: str | None = None


# ============================================================================
# FibreTrace Models
# ============================================================================


class IsotopePushRequest(BaseModel):
    """Isotope analysis payload forwarded to FibreTrace unchanged."""

    data: dict[str, Any]


# ============================================================================
# Paging envelope
# ============================================================================


class PageResponse(BaseModel):
    """One page of a filtered, sorted list with pager metadata."""

    items: list[Any]
    page: int
    page_size: int
    total: int
    total_pages: int
    showing_from: int
    showing_to: int
    page_window: list[int]

    @classmethod
    def from_page(cls, page: Page, window: list[int]) -> PageResponse:
        return cls(
            items=page.items,
            page=page.page,
            page_size=page.page_size,
            total=page.total,
            total_pages=page.total_pages,
            showing_from=page.showing_from,
            showing_to=page.showing_to,
            page_window=window,
        )


def groups_payload(groups: dict[str, GroupStats]) -> dict[str, dict[str, Any]]:
    """GroupStats keyed by group, with the computed average included."""
    return {
        key: {"count": stats.count, "total": stats.total, "average": stats.average}
        for key, stats in groups.items()
    }


def summary_payload(stats: SummaryStats) -> dict[str, Any]:
    return {
        "total": stats.total,
        "status_counts": stats.status_counts,
        "average_score": stats.average_score,
        "groups": groups_payload(stats.groups),
    }


def build_page(
    records: list,
    criteria: BaseModel,
    sort: SortState,
    page: int,
    page_size: int,
    window: int = 5,
) -> PageResponse:
    """Filter, sort and slice ``records`` into one response page."""
    view = ListView(criteria=criteria, sort=sort, page_size=page_size, page=page)
    current = view.current_page(records)
    return PageResponse.from_page(
        current, page_window(current.page, current.total_pages, window)
    )
