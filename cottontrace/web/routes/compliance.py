"""Compliance routes for the CottonTrace API.

Handles the approve/hold workflow over the compliance view of each batch.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response, StreamingResponse

from cottontrace.context import ServiceContext
from cottontrace.models import ActionStatus, ReportFormat
from cottontrace.pipeline.aggregate import summarize_compliance
from cottontrace.pipeline.filters import ComplianceFilter, filter_compliance
from cottontrace.pipeline.sorting import (
    ComplianceSortField,
    SortDirection,
    SortState,
    sort_records,
)
from cottontrace.reporting.csv_export import export_csv
from cottontrace.reporting.reports import MEDIA_TYPES, export_filename, render_export
from cottontrace.web.dependencies import attachment_headers, get_context
from cottontrace.web.models import StatusUpdateRequest, build_page

router = APIRouter(prefix="/api/compliance", tags=["compliance"])


def compliance_filter(
    search: str | None = None,
    origin: str | None = None,
    certification_status: str | None = None,
    action_status: ActionStatus | None = None,
    min_sustainability_score: float | None = Query(default=None, ge=0, le=100),
    processing_date_start: date | None = None,
    processing_date_end: date | None = None,
) -> ComplianceFilter:
    return ComplianceFilter(
        search=search,
        origin=origin,
        certification_status=certification_status,
        action_status=action_status,
        min_sustainability_score=min_sustainability_score,
        processing_date_start=processing_date_start,
        processing_date_end=processing_date_end,
    )


@router.get("")
async def list_compliance_batches(
    criteria: ComplianceFilter = Depends(compliance_filter),
    sort: ComplianceSortField = ComplianceSortField.PROCESSING_DATE,
    direction: SortDirection = SortDirection.DESC,
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1, le=500),
    ctx: ServiceContext = Depends(get_context),
):
    """One page of compliance batches matching the filters."""
    records = await ctx.compliance.ensure_loaded()
    return build_page(
        records,
        criteria,
        SortState(sort, direction),
        page,
        page_size or ctx.config.pagination.page_size,
        ctx.config.pagination.window,
    )


@router.get("/summary")
async def compliance_summary(
    criteria: ComplianceFilter = Depends(compliance_filter),
    ctx: ServiceContext = Depends(get_context),
):
    """Approved/on-hold counts, open issues and certification status counts."""
    records = filter_compliance(await ctx.compliance.ensure_loaded(), criteria)
    return summarize_compliance(records)


@router.get("/export")
async def export_compliance(
    format: ReportFormat = ReportFormat.CSV,
    criteria: ComplianceFilter = Depends(compliance_filter),
    sort: ComplianceSortField = ComplianceSortField.PROCESSING_DATE,
    direction: SortDirection = SortDirection.DESC,
    ctx: ServiceContext = Depends(get_context),
):
    """Export every compliance batch matching the filters (JSON, CSV or XLSX)."""
    rows = sort_records(
        filter_compliance(await ctx.compliance.ensure_loaded(), criteria),
        sort,
        direction,
    )
    filename = export_filename(
        f"compliance_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}", format
    )

    if format is ReportFormat.CSV:
        return StreamingResponse(
            export_csv(rows),
            media_type=MEDIA_TYPES[format],
            headers=attachment_headers(filename),
        )

    try:
        content = render_export(rows, format, "Compliance Report", criteria)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return Response(
        content=content,
        media_type=MEDIA_TYPES[format],
        headers=attachment_headers(filename),
    )


@router.get("/{record_id}")
async def get_compliance_batch(record_id: str, ctx: ServiceContext = Depends(get_context)):
    """Look up by compliance id or by the underlying batch id."""
    await ctx.compliance.ensure_loaded()
    return ctx.compliance.get(record_id)


@router.get("/{record_id}/history")
async def compliance_history(record_id: str, ctx: ServiceContext = Depends(get_context)):
    """Approve/hold decisions, newest first."""
    await ctx.compliance.ensure_loaded()
    record = ctx.compliance.get(record_id)
    return {
        "batch_id": record.batch_id,
        "action_status": record.action_status,
        "history": record.status_history,
    }


@router.post("/{record_id}/status")
async def update_compliance_status(
    record_id: str,
    body: StatusUpdateRequest,
    ctx: ServiceContext = Depends(get_context),
):
    """Approve or hold a batch; approving clears its pending issues."""
    await ctx.compliance.ensure_loaded()
    return await ctx.compliance.update_action_status(
        record_id,
        body.status,
        updated_by=body.updated_by or ctx.config.default_user,
        note=body.note,
    )
