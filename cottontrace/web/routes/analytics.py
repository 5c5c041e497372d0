"""Isotope analytics routes for the CottonTrace API.

Routes:
- GET /api/analytics/isotopes            - Filtered, sorted, paged isotope results
- GET /api/analytics/isotopes/summary    - Verification counts, mean ratios, regions
- GET /api/analytics/isotopes/trend      - Monthly isotope ratio trend (line chart)
- GET /api/analytics/isotopes/charts     - Verification doughnut and region bar charts
- GET /api/analytics/isotopes/export     - Full filtered list as JSON/CSV/XLSX
- GET /api/analytics/isotopes/{batch_id} - Result for one batch
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response, StreamingResponse

from cottontrace.context import ServiceContext
from cottontrace.models import ReportFormat
from cottontrace.pipeline.aggregate import summarize_isotopes
from cottontrace.pipeline.filters import IsotopeFilter, filter_isotopes
from cottontrace.pipeline.sorting import (
    IsotopeSortField,
    SortDirection,
    SortState,
    sort_records,
)
from cottontrace.reporting.charts import (
    isotope_trend_chart,
    region_chart,
    verification_status_chart,
)
from cottontrace.reporting.csv_export import export_csv
from cottontrace.reporting.reports import MEDIA_TYPES, export_filename, render_export
from cottontrace.web.dependencies import attachment_headers, get_context
from cottontrace.web.models import build_page, groups_payload

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


def isotope_filter(
    search: str | None = None,
    region: str | None = None,
    verification_status: str | None = None,
    date_start: date | None = None,
    date_end: date | None = None,
    confidence_min: float | None = Query(default=None, ge=0, le=100),
) -> IsotopeFilter:
    return IsotopeFilter(
        search=search,
        region=region,
        verification_status=verification_status,
        date_start=date_start,
        date_end=date_end,
        confidence_min=confidence_min,
    )


@router.get("/isotopes")
async def list_isotope_records(
    criteria: IsotopeFilter = Depends(isotope_filter),
    sort: IsotopeSortField = IsotopeSortField.TEST_DATE,
    direction: SortDirection = SortDirection.DESC,
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1, le=500),
    ctx: ServiceContext = Depends(get_context),
):
    records = await ctx.isotopes.ensure_loaded()
    return build_page(
        records,
        criteria,
        SortState(sort, direction),
        page,
        page_size or ctx.config.pagination.page_size,
        ctx.config.pagination.window,
    )


@router.get("/isotopes/summary")
async def isotope_summary(
    criteria: IsotopeFilter = Depends(isotope_filter),
    ctx: ServiceContext = Depends(get_context),
):
    """Verification counts, mean confidence, mean ratios and per-region confidence."""
    summary = summarize_isotopes(filter_isotopes(await ctx.isotopes.ensure_loaded(), criteria))
    return {
        "total": summary.total,
        "verified": summary.verified,
        "pending": summary.pending,
        "failed": summary.failed,
        "average_confidence": summary.average_confidence,
        "average_isotopes": summary.average_isotopes,
        "region_data": groups_payload(summary.region_data),
    }


@router.get("/isotopes/trend")
async def isotope_trend(
    criteria: IsotopeFilter = Depends(isotope_filter),
    limit: int | None = Query(default=None, ge=1),
    ctx: ServiceContext = Depends(get_context),
):
    """Monthly mean of each ratio over the most recent tests."""
    records = filter_isotopes(await ctx.isotopes.ensure_loaded(), criteria)
    return isotope_trend_chart(records, limit or ctx.config.analytics.trend_record_limit)


@router.get("/isotopes/charts")
async def isotope_charts(
    criteria: IsotopeFilter = Depends(isotope_filter),
    ctx: ServiceContext = Depends(get_context),
):
    summary = summarize_isotopes(filter_isotopes(await ctx.isotopes.ensure_loaded(), criteria))
    return {
        "verification_status": verification_status_chart(summary),
        "regions": region_chart(summary),
    }


@router.get("/isotopes/export")
async def export_isotopes(
    format: ReportFormat = ReportFormat.CSV,
    criteria: IsotopeFilter = Depends(isotope_filter),
    sort: IsotopeSortField = IsotopeSortField.TEST_DATE,
    direction: SortDirection = SortDirection.DESC,
    ctx: ServiceContext = Depends(get_context),
):
    """Export every isotope result matching the filters."""
    rows = sort_records(
        filter_isotopes(await ctx.isotopes.ensure_loaded(), criteria), sort, direction
    )
    filename = export_filename(
        f"isotope_analysis_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}", format
    )

    if format is ReportFormat.CSV:
        return StreamingResponse(
            export_csv(rows),
            media_type=MEDIA_TYPES[format],
            headers=attachment_headers(filename),
        )

    try:
        content = render_export(rows, format, "Isotope Analysis Report", criteria)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return Response(
        content=content,
        media_type=MEDIA_TYPES[format],
        headers=attachment_headers(filename),
    )


@router.get("/isotopes/{batch_id}")
async def get_isotope_record(batch_id: str, ctx: ServiceContext = Depends(get_context)):
    await ctx.isotopes.ensure_loaded()
    record = ctx.isotopes.for_batch(batch_id)
    return {
        "record": record,
        "out_of_range": record.out_of_range_isotopes(),
    }
