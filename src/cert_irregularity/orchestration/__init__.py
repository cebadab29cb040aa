"""Review orchestration around the pure classifier.

This package provides:
- Coalescing, debounced refresh scheduling
- The review session (group lifecycle, write guard, re-classification)
- Protocols for the external sources and write executor
"""

from cert_irregularity.orchestration.scheduler import RefreshScheduler
from cert_irregularity.orchestration.session import (
    ExclusionSource,
    GroupState,
    RecordSource,
    ReviewSession,
    TypeCatalogSource,
    WriteExecutor,
)

__all__ = [
    "ExclusionSource",
    "GroupState",
    "RecordSource",
    "RefreshScheduler",
    "ReviewSession",
    "TypeCatalogSource",
    "WriteExecutor",
]
