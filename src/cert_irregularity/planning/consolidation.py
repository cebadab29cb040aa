"""Consolidation planning for duplicate catalog types.

Given a set of duplicate catalog types and the one a reviewer chose to keep,
computes which record names must be repointed to the survivor and which
types must be deactivated. Types are never deleted; deactivated entries stay
for audit and history.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from cert_irregularity.exceptions import PlannerContractError
from cert_irregularity.models import (
    CertificationRecord,
    CertificationType,
    FindingGroup,
    Severity,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Repoint:
    """Rename records carrying ``old_name`` to ``new_name``."""

    old_name: str
    new_name: str


@dataclass(frozen=True)
class ConsolidationPlan:
    """Migration write-set for one group of duplicate types.

    Attributes:
        survivor_id: Type that is kept.
        records_to_repoint: Old identifiers to rename to the survivor's full name.
        types_to_deactivate: Types to deactivate (never delete).
        group_index: Number of the group this plan resolves, when known.
    """

    survivor_id: str
    records_to_repoint: tuple[Repoint, ...]
    types_to_deactivate: tuple[str, ...]
    group_index: int = 0


def plan_consolidation(
    types: Sequence[CertificationType],
    survivor_id: str,
    *,
    group_index: int = 0,
) -> ConsolidationPlan:
    """Plan the migration of duplicate catalog types onto one survivor.

    Args:
        types: Duplicate types, including the survivor.
        survivor_id: Identifier of the type to keep.
        group_index: Number of the originating group.

    Returns:
        The write-set to hand to the executor.

    Raises:
        PlannerContractError: If fewer than two types are given or the
            survivor is not among them.
    """
    if len(types) < 2:
        msg = "Consolidation needs at least two types"
        raise PlannerContractError(msg)

    survivor = next((t for t in types if t.id == survivor_id), None)
    if survivor is None:
        msg = f"Survivor {survivor_id} is not part of the duplicate set"
        raise PlannerContractError(msg)

    new_name = survivor.full_name or survivor.name
    repoints: list[Repoint] = []
    deactivate: list[str] = []

    for cert_type in types:
        if cert_type.id == survivor.id:
            continue
        for old_name in dict.fromkeys((cert_type.full_name, cert_type.name)):
            if old_name and old_name != new_name:
                repoints.append(Repoint(old_name=old_name, new_name=new_name))
        deactivate.append(cert_type.id)

    plan = ConsolidationPlan(
        survivor_id=survivor.id,
        records_to_repoint=tuple(dict.fromkeys(repoints)),
        types_to_deactivate=tuple(deactivate),
        group_index=group_index,
    )

    logger.info(
        "Consolidation planned",
        survivor=survivor.id,
        repoints=len(plan.records_to_repoint),
        deactivate=len(plan.types_to_deactivate),
    )

    return plan


def plan_group_consolidation(group: FindingGroup, survivor_id: str) -> ConsolidationPlan:
    """Plan consolidation for a duplicate_type finding group.

    Args:
        group: A duplicate_type group.
        survivor_id: Identifier of the type to keep.

    Returns:
        The write-set to hand to the executor.

    Raises:
        PlannerContractError: If the group is not a duplicate_type group.
    """
    if group.severity is not Severity.DUPLICATE_TYPE:
        msg = f"Group {group.index}: only duplicate_type findings can be consolidated"
        raise PlannerContractError(msg)
    return plan_consolidation(group.types, survivor_id, group_index=group.index)


def count_matching_records(
    types: Sequence[CertificationType],
    records: Sequence[CertificationRecord],
) -> dict[str, int]:
    """Count records whose raw name equals each type's full name or name.

    Args:
        types: Duplicate types.
        records: All certification records.

    Returns:
        Mapping of type id to matching record count.
    """
    counts: dict[str, int] = {}
    for cert_type in types:
        identifiers = {cert_type.full_name, cert_type.name} - {""}
        counts[cert_type.id] = sum(1 for record in records if record.name in identifiers)
    return counts


def recommend_survivor(
    types: Sequence[CertificationType],
    records: Sequence[CertificationRecord],
) -> str | None:
    """Recommend the type with the most matching records.

    Ties are left to the reviewer instead of guessing.

    Args:
        types: Duplicate types.
        records: All certification records.

    Returns:
        Identifier of the recommended survivor, or None on a tie.
    """
    counts = count_matching_records(types, records)
    if not counts:
        return None

    best = max(counts.values())
    leaders = [type_id for type_id, count in counts.items() if count == best]
    if len(leaders) > 1:
        logger.debug("No survivor recommended, counts are tied", tied=leaders, count=best)
        return None
    return leaders[0]
