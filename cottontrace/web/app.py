"""FastAPI application for the CottonTrace traceability API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from cottontrace import __version__
from cottontrace.context import ServiceContext
from cottontrace.core.logging import configure_logging
from cottontrace.exceptions import (
    InvalidStatusTransitionError,
    RecordNotFoundError,
    StoreLoadError,
)
from cottontrace.web.routes import (
    analytics,
    batches,
    compliance,
    dashboard,
    fibretrace,
    health,
    reports,
)

logger = structlog.get_logger()


# Request Logging Middleware
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        structlog.contextvars.clear_contextvars()

        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        structlog.contextvars.bind_contextvars(request_id=request_id)

        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)

            logger.info(
                "request_completed",
                status_code=response.status_code,
            )
            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as exc:
            logger.error("request_failed", error=str(exc))
            raise


# Exception Handlers
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def store_load_error_handler(request: Request, exc: StoreLoadError):
    """A store failed to load; the client may retry later."""
    logger.warning("store_unavailable", store=exc.store, message=exc.message)
    return JSONResponse(status_code=503, content={"detail": exc.message})


async def not_found_handler(request: Request, exc: RecordNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def invalid_transition_handler(request: Request, exc: InvalidStatusTransitionError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


def create_app(context: ServiceContext | None = None) -> FastAPI:
    """Build the API around ``context`` (a fresh one from config if omitted).

    The context's stores start empty and load on first use; shutdown cancels
    pending fetches and closes the FibreTrace client.
    """
    ctx = context or ServiceContext.from_config()
    configure_logging(ctx.config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("app_started", version=__version__)
        yield
        await ctx.aclose()
        logger.info("app_stopped")

    app = FastAPI(
        title="CottonTrace API",
        description="Cotton traceability, compliance and isotope verification",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.context = ctx

    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StoreLoadError, store_load_error_handler)
    app.add_exception_handler(RecordNotFoundError, not_found_handler)
    app.add_exception_handler(InvalidStatusTransitionError, invalid_transition_handler)

    # Include Routers
    app.include_router(health.router)
    app.include_router(batches.router)
    app.include_router(compliance.router)
    app.include_router(analytics.router)
    app.include_router(dashboard.router)
    app.include_router(fibretrace.router)
    app.include_router(reports.router)

    return app
