"""Pydantic models for the certification irregularity engine.

This package contains:
- Input models (certification records and catalog types)
- Output models (severity, finding groups, duplicate exclusions)
"""

from cert_irregularity.models.certification import CertificationRecord, CertificationType
from cert_irregularity.models.findings import (
    STANDARDIZABLE_SEVERITIES,
    DuplicateExclusion,
    ExclusionType,
    FindingGroup,
    Severity,
)

__all__ = [
    # Inputs
    "CertificationRecord",
    "CertificationType",
    # Findings
    "STANDARDIZABLE_SEVERITIES",
    "DuplicateExclusion",
    "ExclusionType",
    "FindingGroup",
    "Severity",
]
