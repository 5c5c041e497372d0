"""
Excel export utilities for traceability views.

Provides styled workbook export for batch, compliance and isotope lists and
for the dashboard overview.
"""

import io
from datetime import datetime, timezone
from typing import Any, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from pydantic import BaseModel

from cottontrace.pipeline.aggregate import aggregate
from cottontrace.reporting.dashboard_metrics import DashboardMetrics
from cottontrace.reporting.export import to_rows


def _sanitize_sheet_name(name: str) -> str:
    """Ensure Excel sheet name is valid and within length."""
    safe = "".join("-" if ch in '[]:*?/\\' else ch for ch in name).strip()
    if not safe:
        safe = "Sheet"
    return safe[:31]


def format_score(value: float | None) -> str:
    """Format a 0-100 score for export."""
    if value is None:
        return "N/A"
    return f"{value:.1f}"


def format_percentage(value: float | None) -> str:
    """Format percentage value for export."""
    if value is None:
        return "N/A"
    return f"{value:.1f}%"


def format_count(value: int | None) -> str:
    """Format count value for export."""
    if value is None:
        return "0"
    return str(value)


def describe_filters(filters: BaseModel | None) -> str:
    """One-line summary of the active filters."""
    if filters is None:
        return "None"
    active = filters.model_dump(mode="json", exclude_none=True)
    active = {k: v for k, v in active.items() if v not in ("", [])}
    if not active:
        return "None"
    return "; ".join(f"{k}={v}" for k, v in active.items())


class ExcelExporter:
    """Excel workbook exporter with styling."""

    def __init__(self, title: str, scope: str, generated_by: str = "CottonTrace"):
        self.wb = Workbook()
        self.title = title
        self.scope = scope
        self.generated_by = generated_by
        self.timestamp = datetime.now(timezone.utc)

        # Remove default sheet
        if "Sheet" in self.wb.sheetnames:
            self.wb.remove(self.wb["Sheet"])

        self.header_fill = PatternFill(start_color="10B981", end_color="10B981", fill_type="solid")
        self.header_font = Font(bold=True, color="FFFFFF", size=12)
        self.border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

    def add_metadata_sheet(self, record_count: int | None = None):
        """Add metadata sheet with export information."""
        ws = self.wb.create_sheet(_sanitize_sheet_name("Export Info"), 0)

        ws['A1'] = self.title
        ws['A1'].font = Font(bold=True, size=16, color="10B981")

        ws['A3'] = "Filters:"
        ws['B3'] = self.scope
        ws['A4'] = "Records:"
        ws['B4'] = format_count(record_count)
        ws['A5'] = "Generated:"
        ws['B5'] = self.timestamp.strftime("%Y-%m-%d %H:%M:%S UTC")
        ws['A6'] = "Generated By:"
        ws['B6'] = self.generated_by
        ws['A7'] = "System:"
        ws['B7'] = "CottonTrace Traceability Platform"

        for row in range(3, 8):
            ws[f'A{row}'].font = Font(bold=True)

        ws.column_dimensions['A'].width = 20
        ws.column_dimensions['B'].width = 60

    def add_table_sheet(self, name: str, data: list[dict[str, Any]]):
        """Add a sheet with one row per record."""
        ws = self.wb.create_sheet(_sanitize_sheet_name(name))

        if not data:
            ws['A1'] = "No data available"
            return

        headers = list(data[0].keys())
        for col_idx, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.fill = self.header_fill
            cell.font = self.header_font
            cell.alignment = Alignment(horizontal='center', vertical='center')
            cell.border = self.border

        for row_idx, row_data in enumerate(data, start=2):
            for col_idx, header in enumerate(headers, start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=row_data.get(header, ""))
                cell.border = self.border
                cell.alignment = Alignment(horizontal='left', vertical='center')

        for col_idx in range(1, len(headers) + 1):
            ws.column_dimensions[get_column_letter(col_idx)].width = 20

        # Freeze header row
        ws.freeze_panes = 'A2'

    def save(self) -> bytes:
        """Save workbook to bytes."""
        buffer = io.BytesIO()
        self.wb.save(buffer)
        buffer.seek(0)
        return buffer.getvalue()


def export_records_to_excel(
    records: Sequence[BaseModel],
    title: str,
    filters: BaseModel | None = None,
    generated_by: str = "CottonTrace",
) -> bytes:
    """Workbook with export info, a summary sheet and the full record list."""
    exporter = ExcelExporter(title, describe_filters(filters), generated_by)
    exporter.add_metadata_sheet(len(records))

    if records:
        stats = aggregate(records)
        summary = [{"Metric": "Total Records", "Value": format_count(stats.total)}]
        summary += [
            {"Metric": f"Status: {status}", "Value": format_count(count)}
            for status, count in stats.status_counts.items()
        ]
        summary.append({"Metric": "Average Score", "Value": format_score(stats.average_score)})
        exporter.add_table_sheet("Summary", summary)

        exporter.add_table_sheet(
            "By Group",
            [
                {"Group": key, "Count": group.count, "Average Score": format_score(group.average)}
                for key, group in stats.groups.items()
            ],
        )

    exporter.add_table_sheet("Records", to_rows(records))
    return exporter.save()


def export_dashboard_to_excel(metrics: DashboardMetrics) -> bytes:
    """Export dashboard metrics to Excel."""
    exporter = ExcelExporter("Traceability Dashboard", "All batches")
    exporter.add_metadata_sheet(metrics.total_batches)

    total = metrics.total_batches
    compliance_rate = (metrics.compliant_batches / total * 100) if total else None
    exporter.add_table_sheet(
        "KPI Summary",
        [
            {"Metric": "Total Batches", "Value": format_count(metrics.total_batches)},
            {"Metric": "Compliant Batches", "Value": format_count(metrics.compliant_batches)},
            {"Metric": "Pending Verification", "Value": format_count(metrics.pending_verification)},
            {"Metric": "Non-Compliant Batches", "Value": format_count(metrics.non_compliant_batches)},
            {"Metric": "Compliance Rate", "Value": format_percentage(compliance_rate)},
            {
                "Metric": "Average Sustainability Score",
                "Value": format_score(metrics.average_sustainability_score),
            },
        ],
    )
    exporter.add_table_sheet(
        "Top Suppliers",
        [
            {"Supplier": s["name"], "Average Score": format_score(s["score"]), "Batches": s["batches"]}
            for s in metrics.top_suppliers
        ],
    )
    exporter.add_table_sheet(
        "Alerts",
        [
            {
                "Alert": alert.id,
                "Type": alert.type,
                "Severity": alert.severity,
                "Message": alert.message,
                "Batch": alert.batch_id or "",
                "Timestamp": alert.timestamp.strftime("%Y-%m-%d %H:%M"),
            }
            for alert in metrics.recent_alerts
        ],
    )
    return exporter.save()
