"""Health check API routes.

Reports the load state of every store without triggering a fetch.
"""

from fastapi import APIRouter, Depends, status

from cottontrace.context import ServiceContext
from cottontrace.web.dependencies import get_context

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check(ctx: ServiceContext = Depends(get_context)):
    """Check application health."""
    stores = {
        store.name: store.state.status.value
        for store in (
            ctx.batches,
            ctx.compliance,
            ctx.isotopes,
            ctx.verification_queue,
            ctx.reports,
        )
    }
    degraded = any(state == "error" for state in stores.values())
    return {
        "status": "degraded" if degraded else "ok",
        "stores": stores,
        "fibretrace_mode": "mock" if ctx.fibretrace.mock_mode else "live",
    }
