"""Stateful owners of the record collections."""

from cottontrace.stores.base import CallableStore, LoadState, LoadStatus, Store
from cottontrace.stores.batches import BatchStore
from cottontrace.stores.compliance import ComplianceStore
from cottontrace.stores.isotopes import IsotopeStore
from cottontrace.stores.reports import ReportStore
from cottontrace.stores.verification import VerificationQueueStore

__all__ = [
    "BatchStore",
    "CallableStore",
    "ComplianceStore",
    "IsotopeStore",
    "LoadState",
    "LoadStatus",
    "ReportStore",
    "Store",
    "VerificationQueueStore",
]
