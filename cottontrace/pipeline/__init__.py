"""Filter, sort, aggregate and paginate pipeline shared by every view."""

from cottontrace.pipeline.aggregate import (
    AggregationProfile,
    GroupStats,
    SummaryStats,
    aggregate,
    count_by,
    group_by,
    mean,
    monthly_trend,
)
from cottontrace.pipeline.filters import (
    BatchFilter,
    ComplianceFilter,
    IsotopeFilter,
    VerificationFilter,
    filter_records,
)
from cottontrace.pipeline.pagination import ListView, Page, page_window, paginate
from cottontrace.pipeline.sorting import (
    BatchSortField,
    ComplianceSortField,
    IsotopeSortField,
    SortDirection,
    SortState,
    VerificationSortField,
    sort_records,
)

__all__ = [
    "AggregationProfile",
    "BatchFilter",
    "BatchSortField",
    "ComplianceFilter",
    "ComplianceSortField",
    "GroupStats",
    "IsotopeFilter",
    "IsotopeSortField",
    "ListView",
    "Page",
    "SortDirection",
    "SortState",
    "SummaryStats",
    "VerificationFilter",
    "VerificationSortField",
    "aggregate",
    "count_by",
    "filter_records",
    "group_by",
    "mean",
    "monthly_trend",
    "page_window",
    "paginate",
    "sort_records",
]
