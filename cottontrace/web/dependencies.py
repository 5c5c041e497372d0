"""Shared dependencies for CottonTrace web routes.

Dependencies are injected using FastAPI's Depends() system.

Usage:
    from fastapi import Depends
    from cottontrace.web.dependencies import get_context

    @router.get("/api/batches")
    async def list_batches(ctx: ServiceContext = Depends(get_context)):
        return await ctx.batches.ensure_loaded()
"""

from __future__ import annotations

from fastapi import Request

from cottontrace.context import ServiceContext


def get_context(request: Request) -> ServiceContext:
    """Service context attached to the running application by ``create_app``."""
    return request.app.state.context


def attachment_headers(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f"attachment; filename={filename}"}
