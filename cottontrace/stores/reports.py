from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from cottontrace.exceptions import RecordNotFoundError, StoreLoadError
from cottontrace.mock_data import generate_reports
from cottontrace.models import Report, ReportFormat, ReportState, ReportType
from cottontrace.stores.base import Store

logger = logging.getLogger(__name__)


class ReportStore(Store[Report]):
    """Saved reports and the rendered artifact for each completed one."""

    name = "reports"
    error_message = "Failed to fetch reports"

    def __init__(self, latency_ms: int = 0):
        super().__init__(latency_ms=latency_ms)
        self._content: dict[str, bytes] = {}

    async def fetch(self) -> list[Report]:
        return generate_reports()

    def get(self, report_id: str) -> Report:
        for report in self._items:
            if report.id == report_id:
                return report
        raise RecordNotFoundError("Report", report_id)

    def _next_id(self) -> str:
        numbers = [
            int(r.id.split("-")[-1]) for r in self._items if r.id.split("-")[-1].isdigit()
        ]
        return f"REP-{max(numbers, default=0) + 1:03d}"

    def _replace(self, report: Report) -> Report:
        self._items = [report if r.id == report.id else r for r in self._items]
        return report

    def create(
        self,
        name: str,
        report_type: ReportType,
        filters: dict[str, Any],
        report_format: ReportFormat,
        created_by: str,
        created_at: datetime | None = None,
    ) -> Report:
        """Append a report in the ``generating`` state.

        Raises:
            StoreLoadError: If the saved reports have not been loaded
        """
        if not self.state.is_populated:
            raise StoreLoadError(self.name, "Reports are not loaded")
        report = Report(
            id=self._next_id(),
            name=name,
            created_at=created_at or datetime.now(timezone.utc),
            created_by=created_by,
            type=report_type,
            filters=filters,
            format=report_format,
        )
        self._items = [*self._items, report]
        logger.info(f"Report {report.id} ({report.format.value}) queued by {created_by}")
        return report

    def complete(self, report_id: str, content: bytes) -> Report:
        report = self.get(report_id)
        self._content[report_id] = content
        return self._replace(
            report.model_copy(
                update={
                    "status": ReportState.COMPLETED,
                    "url": f"/api/reports/{report_id}/download",
                }
            )
        )

    def fail(self, report_id: str, message: str) -> Report:
        report = self.get(report_id)
        logger.error(f"Report {report_id} failed: {message}")
        return self._replace(
            report.model_copy(update={"status": ReportState.FAILED, "error": message})
        )

    def content(self, report_id: str) -> bytes:
        """Rendered artifact of a completed report."""
        self.get(report_id)
        try:
            return self._content[report_id]
        except KeyError:
            raise RecordNotFoundError("Report content", report_id) from None
