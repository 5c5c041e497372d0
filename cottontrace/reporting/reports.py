"""Format dispatch for exports and saved-report generation."""

from __future__ import annotations

import logging
from typing import Sequence

from pydantic import BaseModel

from cottontrace.exceptions import CottonTraceError
from cottontrace.models import Batch, Report, ReportFormat, ReportType
from cottontrace.pipeline.filters import BatchFilter, filter_batches
from cottontrace.pipeline.sorting import BatchSortField, SortDirection, sort_records
from cottontrace.reporting.csv_export import export_csv_text
from cottontrace.reporting.export import export_json
from cottontrace.reporting.export_utils import export_records_to_excel
from cottontrace.reporting.pdf_export import generate_batch_report_pdf
from cottontrace.stores import BatchStore, ReportStore
from cottontrace.utils.performance import ExportTimer

logger = logging.getLogger(__name__)

MEDIA_TYPES = {
    ReportFormat.JSON: "application/json",
    ReportFormat.CSV: "text/csv",
    ReportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ReportFormat.PDF: "application/pdf",
}


def render_export(
    records: Sequence[BaseModel],
    report_format: ReportFormat,
    title: str,
    filters: BaseModel | None = None,
    generated_by: str = "CottonTrace",
) -> bytes:
    """Render the full filtered collection in the requested format.

    Raises:
        ValueError: For PDF output of anything other than batches
    """
    if report_format is ReportFormat.PDF and records and not isinstance(records[0], Batch):
        raise ValueError("PDF export is only available for batches")

    with ExportTimer(report_format.value, rows=len(records)) as timer:
        if report_format is ReportFormat.JSON:
            content = export_json(records, filters).encode("utf-8")
        elif report_format is ReportFormat.CSV:
            content = export_csv_text(records).encode("utf-8")
        elif report_format is ReportFormat.XLSX:
            content = export_records_to_excel(records, title, filters, generated_by)
        else:
            content = generate_batch_report_pdf(records, title, filters, generated_by)
        timer.size = len(content)
    return content


def export_filename(stem: str, report_format: ReportFormat) -> str:
    return f"{stem}.{report_format.value}"


async def generate_report(
    reports: ReportStore,
    batches: BatchStore,
    name: str,
    report_type: ReportType,
    filters: BatchFilter,
    report_format: ReportFormat,
    created_by: str,
) -> Report:
    """Create a saved report and render it against the current batches.

    The report is recorded as ``generating`` first and then marked completed
    or failed; a failure is kept on the report rather than raised.
    """
    await reports.ensure_loaded()
    report = reports.create(
        name=name,
        report_type=report_type,
        filters=filters.model_dump(mode="json", exclude_none=True),
        report_format=report_format,
        created_by=created_by,
    )
    try:
        rows = sort_records(
            filter_batches(await batches.ensure_loaded(), filters),
            BatchSortField.HARVEST_DATE,
            SortDirection.DESC,
        )
        content = render_export(rows, report_format, name, filters, created_by)
    except (CottonTraceError, ValueError) as e:
        return reports.fail(report.id, str(e))

    logger.info(f"Report {report.id} rendered with {len(rows)} batches")
    return reports.complete(report.id, content)
