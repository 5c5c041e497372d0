from __future__ import annotations

from datetime import datetime

from cottontrace.mock_data import generate_verification_queue
from cottontrace.models import VerificationRequest
from cottontrace.stores.base import Store


class VerificationQueueStore(Store[VerificationRequest]):
    name = "verification requests"
    error_message = "Failed to fetch verification queue"

    def __init__(self, latency_ms: int = 0, now: datetime | None = None):
        super().__init__(latency_ms=latency_ms)
        self.now = now

    async def fetch(self) -> list[VerificationRequest]:
        return generate_verification_queue(self.now)
