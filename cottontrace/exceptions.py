"""Exception types raised by CottonTrace stores and services.

The filter/sort/aggregate/paginate pipeline never raises for typed input;
these are for the stateful edges (stores, compliance mutations, lookups).
"""

from __future__ import annotations


class CottonTraceError(Exception):
    """Base class for all CottonTrace errors."""


class StoreLoadError(CottonTraceError):
    """A store fetch failed; the store is left in its error state."""

    def __init__(self, store: str, message: str):
        self.store = store
        self.message = message
        super().__init__(f"{store}: {message}")


class RecordNotFoundError(CottonTraceError):
    """Lookup by identifier found nothing in the owning store."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} '{record_id}' not found")


class InvalidStatusTransitionError(CottonTraceError):
    """A requested status change is not allowed for the record."""
