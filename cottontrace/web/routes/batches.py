"""Batch routes for the CottonTrace API.

Routes:
- GET /api/batches                                  - Filtered, sorted, paged batch list
- GET /api/batches/summary                          - Status counts and averages for the filter
- GET /api/batches/export                           - Full filtered list as JSON/CSV/XLSX/PDF
- GET /api/batches/{batch_id}                       - Batch details
- GET /api/batches/{batch_id}/verification-document - Batch verification PDF
- GET /api/batches/{batch_id}/certifications/{certification_id}/certificate
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response, StreamingResponse

from cottontrace.context import ServiceContext
from cottontrace.models import CertificationType, ReportFormat
from cottontrace.pipeline.aggregate import BATCH_PROFILE, aggregate
from cottontrace.pipeline.filters import BatchFilter, filter_batches
from cottontrace.pipeline.sorting import BatchSortField, SortDirection, SortState, sort_records
from cottontrace.reporting.csv_export import export_csv
from cottontrace.reporting.pdf_export import (
    generate_certificate_pdf,
    generate_verification_document,
)
from cottontrace.reporting.reports import MEDIA_TYPES, export_filename, render_export
from cottontrace.web.dependencies import attachment_headers, get_context
from cottontrace.web.models import build_page, summary_payload

router = APIRouter(prefix="/api/batches", tags=["batches"])


def batch_filter(
    search: str | None = None,
    farmer_id: str | None = None,
    region: str | None = None,
    harvest_date_start: date | None = None,
    harvest_date_end: date | None = None,
    certifications: list[CertificationType] | None = Query(default=None),
    compliance_status: str | None = None,
    sustainability_score_min: float | None = Query(default=None, ge=0, le=100),
    quality_grade: str | None = None,
) -> BatchFilter:
    """Batch filter criteria from query parameters."""
    return BatchFilter(
        search=search,
        farmer_id=farmer_id,
        region=region,
        harvest_date_start=harvest_date_start,
        harvest_date_end=harvest_date_end,
        certifications=certifications,
        compliance_status=compliance_status,
        sustainability_score_min=sustainability_score_min,
        quality_grade=quality_grade,
    )


@router.get("")
async def list_batches(
    criteria: BatchFilter = Depends(batch_filter),
    sort: BatchSortField = BatchSortField.HARVEST_DATE,
    direction: SortDirection = SortDirection.DESC,
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1, le=500),
    ctx: ServiceContext = Depends(get_context),
):
    """One page of batches matching the filters."""
    batches = await ctx.batches.ensure_loaded()
    return build_page(
        batches,
        criteria,
        SortState(sort, direction),
        page,
        page_size or ctx.config.pagination.page_size,
        ctx.config.pagination.window,
    )


@router.get("/summary")
async def batch_summary(
    criteria: BatchFilter = Depends(batch_filter),
    ctx: ServiceContext = Depends(get_context),
):
    """Counts by labour verification status, mean score and per-region averages."""
    batches = filter_batches(await ctx.batches.ensure_loaded(), criteria)
    return summary_payload(aggregate(batches, BATCH_PROFILE))


@router.get("/export")
async def export_batches(
    format: ReportFormat = ReportFormat.JSON,
    criteria: BatchFilter = Depends(batch_filter),
    sort: BatchSortField = BatchSortField.HARVEST_DATE,
    direction: SortDirection = SortDirection.DESC,
    ctx: ServiceContext = Depends(get_context),
):
    """Export every batch matching the filters, not just the visible page."""
    rows = sort_records(
        filter_batches(await ctx.batches.ensure_loaded(), criteria), sort, direction
    )
    filename = export_filename(
        f"batches_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}", format
    )

    if format is ReportFormat.CSV:
        return StreamingResponse(
            export_csv(rows),
            media_type=MEDIA_TYPES[format],
            headers=attachment_headers(filename),
        )

    content = render_export(rows, format, "Batch Traceability Report", criteria)
    return Response(
        content=content,
        media_type=MEDIA_TYPES[format],
        headers=attachment_headers(filename),
    )


@router.get("/{batch_id}")
async def get_batch(batch_id: str, ctx: ServiceContext = Depends(get_context)):
    await ctx.batches.ensure_loaded()
    return ctx.batches.get(batch_id)


@router.get("/{batch_id}/verification-document")
async def batch_verification_document(
    batch_id: str, ctx: ServiceContext = Depends(get_context)
):
    """Batch details verification report (PDF)."""
    await ctx.batches.ensure_loaded()
    batch = ctx.batches.get(batch_id)
    generated_at = datetime.now(timezone.utc)
    document_id = f"VR-{batch.id}-{generated_at.strftime('%Y%m%d%H%M%S')}"

    content = generate_verification_document(batch, document_id, generated_at)
    return Response(
        content=content,
        media_type=MEDIA_TYPES[ReportFormat.PDF],
        headers=attachment_headers(f"batch-verification-{batch.id}.pdf"),
    )


@router.get("/{batch_id}/certifications/{certification_id}/certificate")
async def batch_certificate(
    batch_id: str,
    certification_id: str,
    ctx: ServiceContext = Depends(get_context),
):
    """Cotton passport (PDF) for one of the batch's certifications."""
    await ctx.batches.ensure_loaded()
    batch = ctx.batches.get(batch_id)
    certification = next(
        (c for c in batch.certifications if c.id == certification_id), None
    )
    if certification is None:
        raise HTTPException(
            status_code=404,
            detail=f"Certification '{certification_id}' not found on batch {batch_id}",
        )

    content = generate_certificate_pdf(certification, batch.id, batch.farm_name)
    return Response(
        content=content,
        media_type=MEDIA_TYPES[ReportFormat.PDF],
        headers=attachment_headers(f"cotton-passport-{batch.id}-{certification.id}.pdf"),
    )
