from __future__ import annotations

import random
from datetime import datetime

from cottontrace.exceptions import RecordNotFoundError
from cottontrace.mock_data import generate_isotope_records
from cottontrace.models import IsotopeRecord
from cottontrace.stores.base import Store


class IsotopeStore(Store[IsotopeRecord]):
    name = "isotope records"
    error_message = "Failed to fetch isotope data"

    def __init__(
        self,
        rng: random.Random,
        count: int = 20,
        latency_ms: int = 0,
        now: datetime | None = None,
    ):
        super().__init__(latency_ms=latency_ms)
        self.rng = rng
        self.count = count
        self.now = now

    async def fetch(self) -> list[IsotopeRecord]:
        return generate_isotope_records(self.count, self.rng, self.now)

    def for_batch(self, batch_id: str) -> IsotopeRecord:
        for record in self._items:
            if record.batch_id == batch_id:
                return record
        raise RecordNotFoundError("Isotope record", batch_id)
