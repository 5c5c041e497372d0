from __future__ import annotations

import asyncio
import logging
import random
from datetime import datetime, timezone

from cottontrace.exceptions import (
    InvalidStatusTransitionError,
    RecordNotFoundError,
    StoreLoadError,
)
from cottontrace.mock_data import derive_compliance_batches
from cottontrace.models import ActionStatus, ComplianceBatch
from cottontrace.stores.base import Store
from cottontrace.stores.batches import BatchStore

logger = logging.getLogger(__name__)


class ComplianceStore(Store[ComplianceBatch]):
    """Compliance view of the batch store with approve/hold history."""

    name = "compliance batches"
    error_message = "Failed to fetch compliance batches"

    def __init__(self, batches: BatchStore, rng: random.Random, latency_ms: int = 0):
        super().__init__(latency_ms=latency_ms)
        self.batches = batches
        self.rng = rng
        self._update_lock = asyncio.Lock()

    async def fetch(self) -> list[ComplianceBatch]:
        return derive_compliance_batches(await self.batches.ensure_loaded(), self.rng)

    def get(self, record_id: str) -> ComplianceBatch:
        """Look up by compliance id (``comp-...``) or underlying batch id."""
        for record in self._items:
            if record_id in (record.id, record.batch_id):
                return record
        raise RecordNotFoundError("Compliance batch", record_id)

    async def update_action_status(
        self,
        record_id: str,
        status: ActionStatus,
        updated_by: str,
        note: str | None = None,
        at: datetime | None = None,
    ) -> ComplianceBatch:
        """Record an approve/hold decision as the new head of the history.

        Updates run one at a time in call order.

        Raises:
            StoreLoadError: If the store has never been populated
            RecordNotFoundError: If no record matches ``record_id``
            InvalidStatusTransitionError: If ``at`` precedes the current head entry
        """
        async with self._update_lock:
            # Committed records stay updatable while a forced refresh is in flight
            if not self._committed.is_populated:
                raise StoreLoadError(self.name, "Compliance batches are not loaded")

            current = self.get(record_id)
            at = at or datetime.now(timezone.utc)
            if at.tzinfo is None:
                at = at.replace(tzinfo=timezone.utc)
            if at < current.status_history[0].timestamp:
                raise InvalidStatusTransitionError(
                    f"Status change for {current.batch_id} at {at.isoformat()} predates "
                    f"the latest entry ({current.status_history[0].timestamp.isoformat()})"
                )

            updated = current.with_status(status, updated_by, note, at)
            self._items = [updated if r.id == current.id else r for r in self._items]
            logger.info(
                f"Compliance status for {current.batch_id} set to {status.value} by {updated_by}"
            )
            return updated
