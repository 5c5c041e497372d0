"""CottonTrace web route modules.

Each module exports a ``router`` (APIRouter instance) that ``create_app``
includes. Handlers receive the ServiceContext through
``cottontrace.web.dependencies.get_context``.
"""

from cottontrace.web.routes import (
    analytics,
    batches,
    compliance,
    dashboard,
    fibretrace,
    health,
    reports,
)

__all__ = [
    "analytics",
    "batches",
    "compliance",
    "dashboard",
    "fibretrace",
    "health",
    "reports",
]
