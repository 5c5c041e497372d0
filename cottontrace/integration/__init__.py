"""FibreTrace partner integration."""

from cottontrace.integration.fibretrace_client import ApiResponse, FibreTraceClient
from cottontrace.integration.sync import SyncState, SyncStatus, SyncTracker, to_fibretrace_payload

__all__ = [
    "ApiResponse",
    "FibreTraceClient",
    "SyncState",
    "SyncStatus",
    "SyncTracker",
    "to_fibretrace_payload",
]
