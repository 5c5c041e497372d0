"""Chart-ready payloads (labels plus datasets) for the dashboard and analytics views."""

from __future__ import annotations

from typing import Any, Sequence

from cottontrace.models import IsotopeRecord
from cottontrace.pipeline.aggregate import IsotopeSummary, monthly_trend
from cottontrace.reporting.dashboard_metrics import DashboardMetrics

GREEN = (34, 197, 94)
YELLOW = (234, 179, 8)
RED = (239, 68, 68)
BLUE = (59, 130, 246)
EMERALD = (16, 185, 129)
AMBER = (245, 158, 11)
VIOLET = (139, 92, 246)

ISOTOPE_SERIES = [
    ("carbon", "δ13C", BLUE),
    ("nitrogen", "δ15N", EMERALD),
    ("oxygen", "δ18O", AMBER),
    ("hydrogen", "δ2H", VIOLET),
]


def _rgba(rgb: tuple[int, int, int], alpha: float) -> str:
    return f"rgba({rgb[0]}, {rgb[1]}, {rgb[2]}, {alpha})"


def _rgb(rgb: tuple[int, int, int]) -> str:
    return f"rgb({rgb[0]}, {rgb[1]}, {rgb[2]})"


def _status_dataset(label: str, data: list[int]) -> dict[str, Any]:
    palette = [GREEN, YELLOW, RED]
    return {
        "label": label,
        "data": data,
        "backgroundColor": [_rgba(c, 0.6) for c in palette],
        "borderColor": [_rgb(c) for c in palette],
        "borderWidth": 1,
    }


def compliance_chart(metrics: DashboardMetrics) -> dict[str, Any]:
    """Bar chart of batch compliance status."""
    return {
        "labels": ["Compliant", "Pending", "Non-Compliant"],
        "datasets": [
            _status_dataset(
                "Batch Compliance Status",
                [
                    metrics.compliant_batches,
                    metrics.pending_verification,
                    metrics.non_compliant_batches,
                ],
            )
        ],
    }


def verification_status_chart(summary: IsotopeSummary) -> dict[str, Any]:
    """Doughnut chart of isotope verification outcomes."""
    return {
        "labels": ["Verified", "Pending", "Failed"],
        "datasets": [
            _status_dataset("Verification Status", [summary.verified, summary.pending, summary.failed])
        ],
    }


def region_chart(summary: IsotopeSummary) -> dict[str, Any]:
    labels = list(summary.region_data)
    return {
        "labels": labels,
        "datasets": [
            {
                "label": "Sample Count",
                "data": [summary.region_data[r].count for r in labels],
                "backgroundColor": _rgba(BLUE, 0.6),
                "borderColor": _rgb(BLUE),
                "borderWidth": 1,
            },
            {
                "label": "Avg. Confidence (%)",
                "data": [summary.region_data[r].average or 0 for r in labels],
                "backgroundColor": _rgba(EMERALD, 0.6),
                "borderColor": _rgb(EMERALD),
                "borderWidth": 1,
            },
        ],
    }


def isotope_trend_chart(records: Sequence[IsotopeRecord], limit: int = 100) -> dict[str, Any]:
    """Monthly mean of each isotope ratio over the most recent ``limit`` tests."""
    trend = monthly_trend(
        records,
        date_key=lambda r: r.test_date,
        series={name: (lambda r, n=name: getattr(r.isotopes, n)) for name, _, _ in ISOTOPE_SERIES},
        limit=limit,
    )
    return {
        "labels": trend.labels,
        "datasets": [
            {
                "label": label,
                "data": trend.series[name],
                "borderColor": _rgb(color),
                "backgroundColor": _rgba(color, 0.1),
                "tension": 0.3,
                "fill": True,
            }
            for name, label, color in ISOTOPE_SERIES
        ],
    }
