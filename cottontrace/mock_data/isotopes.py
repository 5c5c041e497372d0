"""IRMS isotope analysis samples."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

from cottontrace.mock_data.batches import FARM_NAMES, REGIONS
from cottontrace.models import (
    GeoLocation,
    IsotopeRecord,
    IsotopeReferences,
    IsotopeValues,
    ReferenceRange,
)

TESTING_FACILITIES = [
    "FibreTrace Analytics Lab",
    "Global Cotton Testing Center",
    "Isotope Research Institute",
]
VERIFICATION_STATES = ["verified", "pending", "failed"]

# Reference ranges sit slightly wider than the generated values
REFERENCE_VALUES = IsotopeReferences(
    carbon=ReferenceRange(min=-29, max=-21),
    nitrogen=ReferenceRange(min=1, max=9),
    oxygen=ReferenceRange(min=8, max=22),
    hydrogen=ReferenceRange(min=-125, max=-75),
)


def generate_isotope_records(
    count: int = 20, rng: random.Random | None = None, now: datetime | None = None
) -> list[IsotopeRecord]:
    """Isotope samples for ``count`` batches harvested during 2023.

    The first 15 samples are only ever verified or pending; failures appear in
    the tail of the sample.
    """
    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)
    records = []
    for i in range(count):
        harvest = datetime(2023, rng.randint(1, 12), rng.randint(1, 28), tzinfo=timezone.utc)
        region = rng.choice(list(REGIONS))
        status = VERIFICATION_STATES[rng.randrange(2 if i < 15 else 3)]
        records.append(
            IsotopeRecord(
                id=f"ISOTOPE-{i + 1:03d}",
                batch_id=f"BATCH-{i + 1:03d}",
                farm_name=rng.choice(FARM_NAMES),
                harvest_date=harvest,
                location=GeoLocation(
                    latitude=30 + rng.random() * 10,
                    longitude=-120 + rng.random() * 30,
                    region=region,
                    country="USA",
                ),
                isotopes=IsotopeValues(
                    carbon=-28 + rng.random() * 6,
                    nitrogen=2 + rng.random() * 6,
                    oxygen=10 + rng.random() * 10,
                    hydrogen=-120 + rng.random() * 40,
                ),
                reference_values=REFERENCE_VALUES,
                verification_status=status,
                confidence_score=rng.randrange(30) + 70,
                testing_facility=rng.choice(TESTING_FACILITIES),
                test_date=harvest + timedelta(days=5),
                last_updated=now - timedelta(seconds=rng.random() * 10 * 86400),
            )
        )
    return records
