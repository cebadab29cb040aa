"""Filtering, counting and view-local editing of finding groups.

Everything here operates on an already-classified group list and never
touches storage.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from cert_irregularity.models import FindingGroup, Severity

logger = structlog.get_logger(__name__)

ALL_SEVERITIES = "all"


@dataclass
class FindingStats:
    """Aggregate figures for the dashboard cards.

    Attributes:
        total_records: Records that were classified.
        implicated_records: Records inside any group.
        unique_names: Distinct raw names, summed over groups.
        group_count: Number of groups.
        by_severity: Group count per severity value.
    """

    total_records: int = 0
    implicated_records: int = 0
    unique_names: int = 0
    group_count: int = 0
    by_severity: dict[str, int] = field(default_factory=dict)


def filter_by_severity(
    groups: Sequence[FindingGroup],
    severity: Severity | str = ALL_SEVERITIES,
) -> list[FindingGroup]:
    """Return the groups of one severity, preserving order.

    Args:
        groups: Classified groups.
        severity: A Severity, its value, or "all".

    Returns:
        Order-preserving subsequence of ``groups``.

    Raises:
        ValueError: If ``severity`` is not a known severity or "all".
    """
    if severity == ALL_SEVERITIES:
        return list(groups)
    wanted = Severity(severity)
    return [group for group in groups if group.severity is wanted]


def severity_counts(groups: Sequence[FindingGroup]) -> dict[str, int]:
    """Count groups per severity, in priority order, including zeros.

    Args:
        groups: Classified groups.

    Returns:
        Mapping of severity value to group count.
    """
    counts = {severity.value: 0 for severity in sorted(Severity, key=lambda s: s.rank)}
    for group in groups:
        counts[group.severity.value] += 1
    return counts


def records_implicated(groups: Sequence[FindingGroup]) -> int:
    """Total number of records across all groups.

    Args:
        groups: Classified groups.

    Returns:
        Sum of group member counts.
    """
    return sum(len(group.members) for group in groups)


def summarize(groups: Sequence[FindingGroup], total_records: int) -> FindingStats:
    """Compute dashboard statistics for a classification run.

    Args:
        groups: Classified groups.
        total_records: Number of records that were classified.

    Returns:
        Aggregate statistics.
    """
    return FindingStats(
        total_records=total_records,
        implicated_records=records_implicated(groups),
        unique_names=sum(len(group.names) for group in groups),
        group_count=len(groups),
        by_severity=severity_counts(groups),
    )


def remove_name(
    groups: Sequence[FindingGroup],
    group_index: int,
    name: str,
) -> list[FindingGroup]:
    """Drop one name from a displayed group.

    Records typed with exactly that raw name leave the group too (for
    duplicate-type groups, the types carrying that label). A group left with
    fewer than 2 distinct names is removed entirely. Nothing is written back
    to storage.

    Args:
        groups: Groups currently on display.
        group_index: Stable number of the group to edit.
        name: Raw name to remove.

    Returns:
        New group list; other groups are returned unchanged.
    """
    result: list[FindingGroup] = []

    for group in groups:
        if group.index != group_index or name not in group.names:
            result.append(group)
            continue

        names = tuple(n for n in group.names if n != name)
        if len(set(names)) < 2:
            logger.info("Group dismissed after name removal", group=group.index, name=name)
            continue

        result.append(
            group.model_copy(
                update={
                    "names": names,
                    "records": tuple(r for r in group.records if r.name != name),
                    "types": tuple(t for t in group.types if t.label != name),
                }
            )
        )

    return result
