"""Mock backing stores: randomised, realistically shaped sample collections.

Every generator takes an explicit ``random.Random`` (and ``now`` where dates
are relative) so a seeded run reproduces the same sample.
"""

from cottontrace.mock_data.batches import generate_batch, generate_batches
from cottontrace.mock_data.compliance import derive_compliance_batch, derive_compliance_batches
from cottontrace.mock_data.isotopes import generate_isotope_records
from cottontrace.mock_data.reports import generate_reports
from cottontrace.mock_data.verification import generate_verification_queue

__all__ = [
    "derive_compliance_batch",
    "derive_compliance_batches",
    "generate_batch",
    "generate_batches",
    "generate_isotope_records",
    "generate_reports",
    "generate_verification_queue",
]
