"""Finding group and exclusion models.

This module defines the engine's output types:
- Severity: closed four-variant enumeration with a fixed priority
- FindingGroup: a transient cluster of records (or catalog types) that look
  like the same real-world certification
- DuplicateExclusion: a pair a reviewer marked as "not a duplicate"
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from cert_irregularity.models.certification import CertificationRecord, CertificationType


class Severity(str, Enum):
    """Severity of a finding group, in presentation/fix priority order."""

    DUPLICATE_TYPE = "duplicate_type"
    EXACT = "exact"
    SIMILAR = "similar"
    FUNCTION_MISMATCH = "function_mismatch"

    @property
    def rank(self) -> int:
        """Sort rank; lower ranks are shown and fixed first."""
        return _SEVERITY_RANK[self]

    @classmethod
    def _missing_(cls, value: object) -> "Severity | None":
        # Older dashboard builds used these spellings
        if isinstance(value, str):
            return _LEGACY_SEVERITY_NAMES.get(value)
        return None


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.DUPLICATE_TYPE: 0,
    Severity.EXACT: 1,
    Severity.SIMILAR: 2,
    Severity.FUNCTION_MISMATCH: 3,
}

_LEGACY_SEVERITY_NAMES: dict[str, Severity] = {
    "exact_duplicate": Severity.EXACT,
    "similar_names": Severity.SIMILAR,
    "function_variation": Severity.FUNCTION_MISMATCH,
}

# Severities whose records can be rewritten to a catalog type
STANDARDIZABLE_SEVERITIES: frozenset[Severity] = frozenset(
    {Severity.EXACT, Severity.SIMILAR, Severity.FUNCTION_MISMATCH}
)


class FindingGroup(BaseModel):
    """A cluster of records or catalog types flagged by the classifier.

    Created fresh on every classification run and never persisted. View-local
    edits (removing a name) produce new groups; ``index`` stays the number
    assigned at classification time.

    Attributes:
        index: Stable 1-based group number.
        severity: Finding severity.
        names: Distinct raw names implicated, in discovery order.
        records: Records involved (empty for duplicate_type findings).
        types: Catalog types involved (duplicate_type findings only).
        suggested_type: Best-guess catalog type to standardize toward.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(default=0, description="Stable 1-based group number")
    severity: Severity = Field(description="Finding severity")
    names: tuple[str, ...] = Field(description="Distinct raw names")
    records: tuple[CertificationRecord, ...] = Field(default=(), description="Records involved")
    types: tuple[CertificationType, ...] = Field(
        default=(), description="Catalog types involved"
    )
    suggested_type: CertificationType | None = Field(
        default=None, description="Suggested standardization target"
    )

    @property
    def members(self) -> tuple[CertificationRecord, ...]:
        """Records implicated by this group."""
        return self.records

    @computed_field
    @property
    def record_ids(self) -> list[str]:
        """Identifiers of the implicated records."""
        return [record.id for record in self.records]

    @computed_field
    @property
    def distinct_name_count(self) -> int:
        """Number of distinct raw names in the group."""
        return len(set(self.names))


class ExclusionType(str, Enum):
    """Kind of entity an exclusion pair refers to."""

    CERTIFICATION = "certification"
    CERTIFICATION_TYPE = "certification_type"


class DuplicateExclusion(BaseModel):
    """A pair of ids a reviewer marked as "not a duplicate".

    The pair is unordered; ids are stored sorted.

    Attributes:
        exclusion_type: Whether the ids are records or catalog types.
        item1_id: Smaller identifier of the pair.
        item2_id: Larger identifier of the pair.
        reason: Optional reviewer note.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    exclusion_type: ExclusionType = Field(description="Entity kind of the pair")
    item1_id: str = Field(description="First identifier")
    item2_id: str = Field(description="Second identifier")
    reason: str | None = Field(default=None, description="Reviewer note")

    @model_validator(mode="before")
    @classmethod
    def _sort_pair(cls, data: object) -> object:
        if isinstance(data, dict) and "item1_id" in data and "item2_id" in data:
            first, second = sorted((str(data["item1_id"]), str(data["item2_id"])))
            data = {**data, "item1_id": first, "item2_id": second}
        return data

    def matches(self, exclusion_type: ExclusionType, id1: str, id2: str) -> bool:
        """Check whether this exclusion covers the given pair in either order."""
        first, second = sorted((id1, id2))
        return (
            self.exclusion_type == exclusion_type
            and self.item1_id == first
            and self.item2_id == second
        )
