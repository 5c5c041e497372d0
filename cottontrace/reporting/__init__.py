"""Reporting module for CottonTrace.

Dashboard metrics, chart payloads and JSON/CSV/Excel/PDF exports over
filtered (never paginated) collections.
"""

from cottontrace.reporting.dashboard_metrics import DashboardMetrics, compute_dashboard_metrics
from cottontrace.reporting.reports import MEDIA_TYPES, generate_report, render_export

__all__ = [
    "DashboardMetrics",
    "MEDIA_TYPES",
    "compute_dashboard_metrics",
    "generate_report",
    "render_export",
]
