"""Irregularity detection over certification records and catalog types.

This package provides:
- Input validation (records and types skipped with InputError)
- The four-pass duplicate classifier
- Duplicate exclusion lookup
- Group filtering, counts and view-local edits
"""

from cert_irregularity.detection.classifier import (
    IrregularityClassifier,
    classify,
    most_common_function,
)
from cert_irregularity.detection.exclusions import ExclusionIndex
from cert_irregularity.detection.inputs import ParseResult, parse_records, parse_types
from cert_irregularity.detection.ranking import (
    ALL_SEVERITIES,
    FindingStats,
    filter_by_severity,
    records_implicated,
    remove_name,
    severity_counts,
    summarize,
)

__all__ = [
    # Classification
    "IrregularityClassifier",
    "classify",
    "most_common_function",
    # Inputs
    "ParseResult",
    "parse_records",
    "parse_types",
    # Exclusions
    "ExclusionIndex",
    # Ranking
    "ALL_SEVERITIES",
    "FindingStats",
    "filter_by_severity",
    "records_implicated",
    "remove_name",
    "severity_counts",
    "summarize",
]
