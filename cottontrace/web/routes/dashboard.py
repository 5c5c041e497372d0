"""Dashboard routes for the CottonTrace API.

Landing dashboard metrics, chart payloads and the verification request queue.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from cottontrace.context import ServiceContext
from cottontrace.models import ReportFormat, RequestPriority, RequestStatus
from cottontrace.pipeline.aggregate import summarize_verification_queue
from cottontrace.pipeline.filters import VerificationFilter, filter_verification_queue
from cottontrace.pipeline.sorting import SortDirection, SortState, VerificationSortField
from cottontrace.reporting.charts import compliance_chart
from cottontrace.reporting.dashboard_metrics import compute_dashboard_metrics
from cottontrace.reporting.export_utils import export_dashboard_to_excel
from cottontrace.reporting.reports import MEDIA_TYPES
from cottontrace.web.dependencies import attachment_headers, get_context
from cottontrace.web.models import build_page

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


async def _metrics(ctx: ServiceContext):
    batches = await ctx.batches.ensure_loaded()
    return compute_dashboard_metrics(
        batches,
        top_supplier_count=ctx.config.analytics.top_supplier_count,
        cert_expiry_warning_days=ctx.config.analytics.cert_expiry_warning_days,
    )


@router.get("/metrics")
async def dashboard_metrics(ctx: ServiceContext = Depends(get_context)):
    """Compliance counts, average sustainability, top suppliers and open alerts."""
    return await _metrics(ctx)


@router.get("/charts")
async def dashboard_charts(ctx: ServiceContext = Depends(get_context)):
    metrics = await _metrics(ctx)
    return {"compliance": compliance_chart(metrics)}


@router.get("/export")
async def export_dashboard(ctx: ServiceContext = Depends(get_context)):
    """Dashboard overview as an Excel workbook."""
    content = export_dashboard_to_excel(await _metrics(ctx))
    filename = f"dashboard_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}.xlsx"
    return Response(
        content=content,
        media_type=MEDIA_TYPES[ReportFormat.XLSX],
        headers=attachment_headers(filename),
    )


def verification_filter(
    search: str | None = None,
    status: RequestStatus | None = None,
    priority: RequestPriority | None = None,
) -> VerificationFilter:
    return VerificationFilter(search=search, status=status, priority=priority)


@router.get("/verification-queue")
async def verification_queue(
    criteria: VerificationFilter = Depends(verification_filter),
    sort: VerificationSortField = VerificationSortField.SUBMISSION_DATE,
    direction: SortDirection = SortDirection.DESC,
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1, le=500),
    ctx: ServiceContext = Depends(get_context),
):
    """Document verification requests awaiting audit."""
    requests = await ctx.verification_queue.ensure_loaded()
    return build_page(
        requests,
        criteria,
        SortState(sort, direction),
        page,
        page_size or ctx.config.pagination.page_size,
        ctx.config.pagination.window,
    )


@router.get("/verification-queue/summary")
async def verification_queue_summary(
    criteria: VerificationFilter = Depends(verification_filter),
    ctx: ServiceContext = Depends(get_context),
):
    requests = filter_verification_queue(
        await ctx.verification_queue.ensure_loaded(), criteria
    )
    return summarize_verification_queue(requests)
