"""Certification Irregularity Detection Engine.

Classifies certification records and catalog types into ranked groups of
likely duplicates or inconsistencies, and plans the write-sets that resolve
them (standardize, consolidate, merge).

Usage:
    from cert_irregularity import classify, plan_standardization

    # Pure classification over in-memory collections
    groups = classify(records, types)

    # Plan a fix for the most severe record group
    plan = plan_standardization(groups[0], groups[0].suggested_type)

    # Or drive a full review against external sources
    session = ReviewSession(record_source, type_source, executor)
    groups = asyncio.run(session.refresh())
"""

# =============================================================================
# CONFIGURATION
# =============================================================================
from .config import DetectionConfig, RefreshConfig

# =============================================================================
# DETECTION
# =============================================================================
from .detection import (
    FindingStats,
    IrregularityClassifier,
    classify,
    filter_by_severity,
    parse_records,
    parse_types,
    remove_name,
    severity_counts,
    summarize,
)

# =============================================================================
# EXCEPTIONS
# =============================================================================
from .exceptions import (
    ComputationDefectError,
    InputError,
    InvalidTransitionError,
    IrregularityError,
    PartialWriteError,
    PlannerContractError,
    WriteConflictError,
    WriteInProgressError,
)

# =============================================================================
# MATCHING
# =============================================================================
from .matching import are_similar, levenshtein_distance, normalize, similarity

# =============================================================================
# MODELS
# =============================================================================
from .models import (
    CertificationRecord,
    CertificationType,
    DuplicateExclusion,
    ExclusionType,
    FindingGroup,
    Severity,
)

# =============================================================================
# ORCHESTRATION
# =============================================================================
from .orchestration import GroupState, RefreshScheduler, ReviewSession

# =============================================================================
# PLANNING
# =============================================================================
from .planning import (
    ConsolidationPlan,
    MergePlan,
    StandardizationPlan,
    plan_consolidation,
    plan_group_consolidation,
    plan_merge,
    plan_standardization,
    recommend_survivor,
)

# =============================================================================
# REPORTING
# =============================================================================
from .reporting import IrregularityReport, build_report

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "DetectionConfig",
    "RefreshConfig",
    # Detection
    "FindingStats",
    "IrregularityClassifier",
    "classify",
    "filter_by_severity",
    "parse_records",
    "parse_types",
    "remove_name",
    "severity_counts",
    "summarize",
    # Exceptions
    "ComputationDefectError",
    "InputError",
    "InvalidTransitionError",
    "IrregularityError",
    "PartialWriteError",
    "PlannerContractError",
    "WriteConflictError",
    "WriteInProgressError",
    # Matching
    "are_similar",
    "levenshtein_distance",
    "normalize",
    "similarity",
    # Models
    "CertificationRecord",
    "CertificationType",
    "DuplicateExclusion",
    "ExclusionType",
    "FindingGroup",
    "Severity",
    # Orchestration
    "GroupState",
    "RefreshScheduler",
    "ReviewSession",
    # Planning
    "ConsolidationPlan",
    "MergePlan",
    "StandardizationPlan",
    "plan_consolidation",
    "plan_group_consolidation",
    "plan_merge",
    "plan_standardization",
    "recommend_survivor",
    # Reporting
    "IrregularityReport",
    "build_report",
    # Version
    "__version__",
]
