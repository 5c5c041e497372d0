"""Saved report routes for the CottonTrace API.

Routes:
- GET  /api/reports                        - Saved reports, newest first
- POST /api/reports                        - Generate a report from batch filters
- GET  /api/reports/{report_id}            - Report metadata
- GET  /api/reports/{report_id}/download   - Rendered report file
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from cottontrace.context import ServiceContext
from cottontrace.models import ReportState
from cottontrace.reporting.reports import MEDIA_TYPES, export_filename, generate_report
from cottontrace.web.dependencies import attachment_headers, get_context
from cottontrace.web.models import ReportRequest

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("")
async def list_reports(ctx: ServiceContext = Depends(get_context)):
    reports = await ctx.reports.ensure_loaded()
    return sorted(reports, key=lambda r: r.created_at, reverse=True)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_report(body: ReportRequest, ctx: ServiceContext = Depends(get_context)):
    """Render a report over the batches matching ``filters``.

    A rendering failure is recorded on the report (status ``failed``) rather
    than returned as an error.
    """
    return await generate_report(
        ctx.reports,
        ctx.batches,
        name=body.name,
        report_type=body.type,
        filters=body.filters,
        report_format=body.format,
        created_by=body.created_by or ctx.config.default_user,
    )


@router.get("/{report_id}")
async def get_report(report_id: str, ctx: ServiceContext = Depends(get_context)):
    await ctx.reports.ensure_loaded()
    return ctx.reports.get(report_id)


@router.get("/{report_id}/download")
async def download_report(report_id: str, ctx: ServiceContext = Depends(get_context)):
    await ctx.reports.ensure_loaded()
    report = ctx.reports.get(report_id)
    if report.status is not ReportState.COMPLETED:
        raise HTTPException(
            status_code=409,
            detail=f"Report {report_id} is {report.status.value}, not completed",
        )

    content = ctx.reports.content(report_id)
    return Response(
        content=content,
        media_type=MEDIA_TYPES[report.format],
        headers=attachment_headers(export_filename(report.id.lower(), report.format)),
    )
