"""Per-batch FibreTrace synchronisation tracking."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable

from cottontrace.integration.fibretrace_client import ApiResponse, FibreTraceClient
from cottontrace.models import Batch

logger = logging.getLogger(__name__)


class SyncState(str, Enum):
    NOT_SYNCED = "not_synced"
    SYNCING = "syncing"
    SYNCED = "synced"
    ERROR = "error"


@dataclass(frozen=True)
class SyncStatus:
    batch_id: str
    status: SyncState = SyncState.NOT_SYNCED
    last_synced: datetime | None = None
    message: str | None = None


def to_fibretrace_payload(batch: Batch) -> dict[str, Any]:
    """Batch in the partner API's camelCase shape."""
    return {
        "batchId": batch.id,
        "farmName": batch.farm_name,
        "harvestDate": batch.harvest_date.isoformat(),
        "location": {
            "latitude": batch.location.latitude,
            "longitude": batch.location.longitude,
            "region": batch.location.region,
            "country": batch.location.country,
        },
        "quantity": batch.quantity,
        "quality": {
            "grade": batch.quality.grade,
            "fiberLength": batch.quality.fiber_length,
            "strength": batch.quality.strength,
            "micronaire": batch.quality.micronaire,
            "color": batch.quality.color,
            "trashContent": batch.quality.trash_content,
        },
        "certifications": [
            {
                "id": cert.id,
                "name": cert.name,
                "issuer": cert.issuer,
                "issueDate": cert.issue_date.isoformat(),
                "expiryDate": cert.expiry_date.isoformat(),
                "status": cert.status.value,
                "type": cert.type.value,
            }
            for cert in batch.certifications
        ],
        "sustainabilityScore": batch.sustainability_score,
    }


class SyncTracker:
    """Tracks push/pull outcomes batch by batch.

    A failure only moves the affected batch to ``error``; every other batch
    keeps its status.
    """

    def __init__(self, client: FibreTraceClient):
        self.client = client
        self._statuses: dict[str, SyncStatus] = {}

    def track(self, batch_ids: Iterable[str]) -> None:
        """Start tracking batches not seen before as ``not_synced``."""
        for batch_id in batch_ids:
            self._statuses.setdefault(batch_id, SyncStatus(batch_id=batch_id))

    def status(self, batch_id: str) -> SyncStatus:
        return self._statuses.get(batch_id, SyncStatus(batch_id=batch_id))

    def statuses(self) -> list[SyncStatus]:
        return list(self._statuses.values())

    def _record(self, batch_id: str, response: ApiResponse, success_message: str, failure_message: str) -> None:
        if response.success:
            self._statuses[batch_id] = SyncStatus(
                batch_id=batch_id,
                status=SyncState.SYNCED,
                last_synced=datetime.now(timezone.utc),
                message=success_message,
            )
            logger.info(f"{batch_id}: {success_message}")
        else:
            previous = self._statuses.get(batch_id)
            self._statuses[batch_id] = SyncStatus(
                batch_id=batch_id,
                status=SyncState.ERROR,
                last_synced=previous.last_synced if previous else None,
                message=response.message or failure_message,
            )
            logger.warning(f"{batch_id}: {response.message or failure_message}")

    async def push(self, batch: Batch) -> ApiResponse:
        previous = self.status(batch.id)
        self._statuses[batch.id] = SyncStatus(
            batch_id=batch.id,
            status=SyncState.SYNCING,
            last_synced=previous.last_synced,
        )
        response = await self.client.push_batch_data(to_fibretrace_payload(batch))
        self._record(
            batch.id,
            response,
            "Successfully synced with FibreTrace",
            "Failed to sync with FibreTrace",
        )
        return response

    async def pull(self, batch_id: str) -> ApiResponse:
        response = await self.client.get_batch_data(batch_id)
        self._record(
            batch_id,
            response,
            "Successfully pulled data from FibreTrace",
            "Failed to pull data from FibreTrace",
        )
        return response
