"""Saved report history."""

from __future__ import annotations

from datetime import datetime, timezone

from cottontrace.models import Report, ReportFormat, ReportState, ReportType


def generate_reports() -> list[Report]:
    return [
        Report(
            id="REP-001",
            name="Q3 Compliance Report",
            created_at=datetime(2023, 9, 1, 10, 30, tzinfo=timezone.utc),
            created_by="John Smith",
            type=ReportType.COMPLIANCE,
            filters={"harvest_date_start": "2023-07-01", "harvest_date_end": "2023-09-30"},
            format=ReportFormat.PDF,
            url="https://example.com/reports/REP-001.pdf",
            status=ReportState.COMPLETED,
        ),
        Report(
            id="REP-002",
            name="Sustainability Metrics 2023",
            created_at=datetime(2023, 9, 15, 14, 45, tzinfo=timezone.utc),
            created_by="John Smith",
            type=ReportType.SUSTAINABILITY,
            filters={"sustainability_score_min": 80},
            format=ReportFormat.CSV,
            url="https://example.com/reports/REP-002.csv",
            status=ReportState.COMPLETED,
        ),
        Report(
            id="REP-003",
            name="California Region Traceability",
            created_at=datetime(2023, 9, 20, 9, 15, tzinfo=timezone.utc),
            created_by="John Smith",
            type=ReportType.TRACEABILITY,
            filters={"region": "California"},
            format=ReportFormat.PDF,
            status=ReportState.GENERATING,
        ),
    ]
