"""Merge planning for exact-duplicate record groups.

The most recent record of the group is kept and the rest are removed.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from cert_irregularity.exceptions import PlannerContractError
from cert_irregularity.models import CertificationRecord, FindingGroup, Severity


@dataclass(frozen=True)
class MergePlan:
    """Record to keep and records to remove for one exact-duplicate group."""

    group_index: int
    keep_id: str
    remove_ids: tuple[str, ...]


def _recency(record: CertificationRecord) -> datetime:
    created = record.created_at
    if created is None:
        return datetime.min
    # Naive timestamps are taken as UTC
    if created.tzinfo is not None:
        created = created.astimezone(UTC).replace(tzinfo=None)
    return created


def plan_merge(group: FindingGroup) -> MergePlan:
    """Plan the merge of an exact-duplicate group.

    The record with the latest ``created_at`` is kept; ties and missing
    timestamps resolve to the earliest member in group order.

    Args:
        group: An exact group.

    Returns:
        The merge write-set.

    Raises:
        PlannerContractError: If the group is not an exact group of 2+ records.
    """
    if group.severity is not Severity.EXACT:
        msg = f"Group {group.index}: only exact duplicates can be merged"
        raise PlannerContractError(msg)
    if len(group.records) < 2:
        msg = f"Group {group.index} has nothing to merge"
        raise PlannerContractError(msg)

    keep_position = 0
    for position, record in enumerate(group.records):
        if _recency(record) > _recency(group.records[keep_position]):
            keep_position = position

    return MergePlan(
        group_index=group.index,
        keep_id=group.records[keep_position].id,
        remove_ids=tuple(
            r.id for position, r in enumerate(group.records) if position != keep_position
        ),
    )
