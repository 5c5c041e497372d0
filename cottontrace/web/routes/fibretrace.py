"""FibreTrace integration routes.

Every call returns the client's ``ApiResponse``. A failed remote call is
answered with 502 and that same body; it only affects the batch involved.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from cottontrace.context import ServiceContext
from cottontrace.integration import ApiResponse
from cottontrace.web.dependencies import get_context
from cottontrace.web.models import IsotopePushRequest

router = APIRouter(prefix="/api/fibretrace", tags=["fibretrace"])


def _respond(response: ApiResponse):
    if response.success:
        return response
    return JSONResponse(status_code=502, content=response.model_dump(mode="json"))


@router.get("/batches")
async def list_remote_batches(
    page: int | None = Query(default=None, ge=1),
    limit: int | None = Query(default=None, ge=1),
    region: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    ctx: ServiceContext = Depends(get_context),
):
    """Batches registered with FibreTrace."""
    return _respond(
        await ctx.fibretrace.get_all_batches(
            page=page, limit=limit, region=region, date_from=date_from, date_to=date_to
        )
    )


@router.get("/batches/{batch_id}")
async def pull_batch(batch_id: str, ctx: ServiceContext = Depends(get_context)):
    """Pull the FibreTrace record for a batch and update its sync status."""
    return _respond(await ctx.sync.pull(batch_id))


@router.post("/batches/{batch_id}/push")
async def push_batch(batch_id: str, ctx: ServiceContext = Depends(get_context)):
    """Push a local batch to FibreTrace."""
    await ctx.batches.ensure_loaded()
    batch = ctx.batches.get(batch_id)
    return _respond(await ctx.sync.push(batch))


@router.get("/batches/{batch_id}/isotopes")
async def get_remote_isotopes(batch_id: str, ctx: ServiceContext = Depends(get_context)):
    return _respond(await ctx.fibretrace.get_isotope_data(batch_id))


@router.post("/batches/{batch_id}/isotopes")
async def push_isotopes(
    batch_id: str,
    body: IsotopePushRequest,
    ctx: ServiceContext = Depends(get_context),
):
    return _respond(await ctx.fibretrace.push_isotope_data(batch_id, body.data))


@router.get("/verify/{batch_id}")
async def verify_batch(batch_id: str, ctx: ServiceContext = Depends(get_context)):
    """Ask FibreTrace to verify a batch's authenticity."""
    return _respond(await ctx.fibretrace.verify_batch(batch_id))


@router.get("/sync-status")
async def sync_status(ctx: ServiceContext = Depends(get_context)):
    """Sync status of every local batch."""
    batches = await ctx.batches.ensure_loaded()
    ctx.sync.track(b.id for b in batches)
    return ctx.sync.statuses()


@router.get("/sync-status/{batch_id}")
async def batch_sync_status(batch_id: str, ctx: ServiceContext = Depends(get_context)):
    return ctx.sync.status(batch_id)
