from __future__ import annotations

import random
from datetime import datetime

from cottontrace.exceptions import RecordNotFoundError
from cottontrace.mock_data import generate_batches
from cottontrace.models import Batch
from cottontrace.stores.base import Store


class BatchStore(Store[Batch]):
    name = "batches"
    error_message = "Failed to fetch batches"

    def __init__(
        self,
        rng: random.Random,
        count: int = 24,
        latency_ms: int = 0,
        now: datetime | None = None,
    ):
        super().__init__(latency_ms=latency_ms)
        self.rng = rng
        self.count = count
        self.now = now
        self.selected: Batch | None = None

    async def fetch(self) -> list[Batch]:
        return generate_batches(self.count, self.rng, self.now)

    def get(self, batch_id: str) -> Batch:
        for batch in self._items:
            if batch.id == batch_id:
                return batch
        raise RecordNotFoundError("Batch", batch_id)

    def select(self, batch_id: str) -> Batch | None:
        """Mark a batch as selected; unknown ids clear the selection."""
        self.selected = next((b for b in self._items if b.id == batch_id), None)
        return self.selected
