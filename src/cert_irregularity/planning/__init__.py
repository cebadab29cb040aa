"""Write-set planning for finding groups.

This package provides:
- Standardization of record groups onto a catalog type
- Consolidation of duplicate catalog types onto a survivor
- Merging of exact-duplicate records into the most recent one

Planners never write; they validate the request and return the write-set.
"""

from cert_irregularity.planning.consolidation import (
    ConsolidationPlan,
    Repoint,
    count_matching_records,
    plan_consolidation,
    plan_group_consolidation,
    recommend_survivor,
)
from cert_irregularity.planning.merge import MergePlan, plan_merge
from cert_irregularity.planning.standardization import (
    StandardizationPlan,
    plan_standardization,
)

__all__ = [
    # Standardization
    "StandardizationPlan",
    "plan_standardization",
    # Consolidation
    "ConsolidationPlan",
    "Repoint",
    "count_matching_records",
    "plan_consolidation",
    "plan_group_consolidation",
    "recommend_survivor",
    # Merge
    "MergePlan",
    "plan_merge",
]
