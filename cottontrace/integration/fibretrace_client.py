"""FibreTrace partner API client.

Every operation returns an ``ApiResponse``; failures come back as
``success=False`` with a message and never raise, so a failed push or verify
only affects the batch it was made for.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

import httpx
from pydantic import BaseModel

from cottontrace.config import FibreTraceConfig

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "An error occurred with the FibreTrace API"
NO_RESPONSE_MESSAGE = "No response received from FibreTrace API"


class ApiResponse(BaseModel):
    """Envelope returned by every client call."""

    success: bool
    data: Any = None
    message: str | None = None
    status: int | None = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def mock_batch_data(batch_id: str) -> dict[str, Any]:
    return {
        "batchId": batch_id,
        "farmName": "Sample Farm",
        "harvestDate": _now(),
        "location": {
            "latitude": 34.0522,
            "longitude": -118.2437,
            "region": "California",
            "country": "USA",
        },
        "quantity": 5000,
        "quality": {
            "grade": "A",
            "fiberLength": 1.2,
            "strength": 28.5,
            "micronaire": 4.2,
            "color": "White",
            "trashContent": 0.8,
        },
        "lastUpdated": _now(),
    }


def mock_isotope_data(batch_id: str) -> dict[str, Any]:
    return {
        "id": f"ISO-{batch_id}",
        "isotopicValues": {
            "deltaC13": -25.4,
            "deltaN15": 5.2,
            "deltaO18": 15.7,
            "deltaH2": -105.3,
        },
        "regionalMatchConfidence": 92,
        "sampleCollectionDate": _now(),
        "testingFacility": {
            "name": "FibreTrace Analytics Lab",
            "location": "San Francisco, CA",
            "certificationId": "FT-LAB-001",
        },
        "verificationStatus": "verified",
        "verificationNotes": "All isotope values match the expected range for the declared origin.",
    }


def mock_verification(batch_id: str) -> dict[str, Any]:
    return {
        "batchId": batch_id,
        "verified": True,
        "timestamp": _now(),
        "verificationMethod": "Isotope Analysis",
        "confidence": 95,
    }


def error_response(exc: Exception) -> ApiResponse:
    """Map a failed call onto a ``success=False`` response."""
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        try:
            body = response.json()
        except ValueError:
            body = None
        message = body.get("message") if isinstance(body, dict) else None
        logger.error(f"FibreTrace API Error: {response.status_code} {body}")
        return ApiResponse(
            success=False,
            status=response.status_code,
            message=message or DEFAULT_ERROR_MESSAGE,
            data=body,
        )
    if isinstance(exc, httpx.RequestError):
        logger.error(f"FibreTrace API Error: No response received ({exc!r})")
        return ApiResponse(success=False, message=NO_RESPONSE_MESSAGE)
    logger.error(f"FibreTrace API Error: {exc}")
    return ApiResponse(success=False, message=str(exc) or DEFAULT_ERROR_MESSAGE)


class FibreTraceClient:
    """Async client for the FibreTrace traceability API.

    In mock mode (the default) reads return canned payloads and writes
    simulate processing time; no network traffic is made.
    """

    def __init__(
        self,
        config: FibreTraceConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or FibreTraceConfig()
        self.client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
            transport=transport,
            headers={
                "Authorization": f"Bearer {self.config.api_key or ''}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    @property
    def mock_mode(self) -> bool:
        return self.config.mock_mode

    async def _simulate_processing(self) -> None:
        if self.config.mock_latency_ms:
            await asyncio.sleep(self.config.mock_latency_ms / 1000)

    async def _call(
        self,
        operation: str,
        live: Callable[[], Awaitable[httpx.Response]],
        mock: Callable[[], Any],
        simulate_processing: bool = False,
    ) -> ApiResponse:
        try:
            if self.mock_mode:
                if simulate_processing:
                    await self._simulate_processing()
                return ApiResponse(success=True, data=mock())

            response = await live()
            response.raise_for_status()
            return ApiResponse(
                success=True,
                data=response.json() if response.content else None,
                status=response.status_code,
            )
        except Exception as e:
            logger.debug(f"FibreTrace {operation} failed", exc_info=True)
            return error_response(e)

    async def get_batch_data(self, batch_id: str) -> ApiResponse:
        return await self._call(
            "get_batch_data",
            lambda: self.client.get(f"/batches/{batch_id}"),
            lambda: mock_batch_data(batch_id),
        )

    async def get_isotope_data(self, batch_id: str) -> ApiResponse:
        return await self._call(
            "get_isotope_data",
            lambda: self.client.get(f"/batches/{batch_id}/isotope-analysis"),
            lambda: mock_isotope_data(batch_id),
        )

    async def push_batch_data(self, batch_data: dict[str, Any]) -> ApiResponse:
        return await self._call(
            "push_batch_data",
            lambda: self.client.post("/batches", json=batch_data),
            lambda: {
                "message": "Batch data successfully pushed to FibreTrace",
                "batchId": batch_data.get("batchId"),
                "timestamp": _now(),
            },
            simulate_processing=True,
        )

    async def update_batch_data(self, batch_id: str, batch_data: dict[str, Any]) -> ApiResponse:
        return await self._call(
            "update_batch_data",
            lambda: self.client.put(f"/batches/{batch_id}", json=batch_data),
            lambda: {
                "message": "Batch data successfully updated in FibreTrace",
                "batchId": batch_id,
                "timestamp": _now(),
            },
            simulate_processing=True,
        )

    async def push_isotope_data(self, batch_id: str, isotope_data: dict[str, Any]) -> ApiResponse:
        return await self._call(
            "push_isotope_data",
            lambda: self.client.post(f"/batches/{batch_id}/isotope-analysis", json=isotope_data),
            lambda: {
                "message": "Isotope data successfully pushed to FibreTrace",
                "batchId": batch_id,
                "timestamp": _now(),
            },
            simulate_processing=True,
        )

    async def verify_batch(self, batch_id: str) -> ApiResponse:
        return await self._call(
            "verify_batch",
            lambda: self.client.get(f"/verify/{batch_id}"),
            lambda: mock_verification(batch_id),
        )

    async def get_all_batches(
        self,
        page: int | None = None,
        limit: int | None = None,
        region: str | None = None,
        date_from: str | None = None,
        date_to: str | None = None,
    ) -> ApiResponse:
        params = {
            key: value
            for key, value in {
                "page": page,
                "limit": limit,
                "region": region,
                "dateFrom": date_from,
                "dateTo": date_to,
            }.items()
            if value is not None
        }
        return await self._call(
            "get_all_batches",
            lambda: self.client.get("/batches", params=params),
            lambda: {
                "batches": [
                    mock_batch_data("BATCH-001"),
                    mock_batch_data("BATCH-002"),
                    mock_batch_data("BATCH-003"),
                ],
                "pagination": {"total": 3, "page": page or 1, "limit": limit or 10},
            },
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> FibreTraceClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
