"""Service context: the stores and clients one application instance owns.

Handlers and CLI commands receive a context instead of reaching for
module-level singletons, so each test can build an isolated one.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime

from cottontrace.config import AppConfig, get_config
from cottontrace.integration import FibreTraceClient, SyncTracker
from cottontrace.stores import (
    BatchStore,
    ComplianceStore,
    IsotopeStore,
    ReportStore,
    VerificationQueueStore,
)


@dataclass
class ServiceContext:
    config: AppConfig
    batches: BatchStore
    compliance: ComplianceStore
    isotopes: IsotopeStore
    verification_queue: VerificationQueueStore
    reports: ReportStore
    fibretrace: FibreTraceClient
    sync: SyncTracker

    @classmethod
    def from_config(
        cls,
        config: AppConfig | None = None,
        now: datetime | None = None,
        fibretrace: FibreTraceClient | None = None,
    ) -> ServiceContext:
        """Build a context with fresh stores.

        A configured ``mock_data.seed`` makes every generated collection
        reproducible; ``now`` pins relative dates (queue ages, expiry).
        """
        config = config or get_config()
        rng = random.Random(config.mock_data.seed)
        latency = config.mock_data.latency_ms
        client = fibretrace or FibreTraceClient(config.fibretrace)

        batches = BatchStore(
            rng=random.Random(rng.random()),
            count=config.mock_data.batch_count,
            latency_ms=latency,
            now=now,
        )
        return cls(
            config=config,
            batches=batches,
            compliance=ComplianceStore(
                batches, rng=random.Random(rng.random()), latency_ms=latency
            ),
            isotopes=IsotopeStore(
                rng=random.Random(rng.random()),
                count=config.mock_data.isotope_count,
                latency_ms=latency,
                now=now,
            ),
            verification_queue=VerificationQueueStore(latency_ms=latency, now=now),
            reports=ReportStore(latency_ms=latency),
            fibretrace=client,
            sync=SyncTracker(client),
        )

    def cancel_all(self) -> None:
        """Abandon every in-flight fetch."""
        for store in (
            self.batches,
            self.compliance,
            self.isotopes,
            self.verification_queue,
            self.reports,
        ):
            store.cancel()

    async def aclose(self) -> None:
        self.cancel_all()
        await self.fibretrace.close()
