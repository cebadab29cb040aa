"""Duplicate and inconsistency classification for certifications.

Four ordered passes over the full record/type collections:

1. Exact duplicates: same normalized name, function and owner
2. Similar names: >80% edit similarity, same function and owner
3. Function mismatch: same name and owner, different functions
4. Duplicate catalog types: near-identical entries on one platform

Each record lands in at most one group; a processed set is carried across
passes 1-3. Catalog types are checked independently over the full list.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from itertools import combinations
from typing import Any

import structlog

from cert_irregularity.config import DetectionConfig
from cert_irregularity.detection.exclusions import ExclusionIndex
from cert_irregularity.detection.inputs import parse_records, parse_types
from cert_irregularity.exceptions import ComputationDefectError
from cert_irregularity.matching import (
    are_similar,
    contains_either_way,
    levenshtein_distance,
    names_are_equivalent,
    normalize,
)
from cert_irregularity.models import (
    CertificationRecord,
    CertificationType,
    DuplicateExclusion,
    ExclusionType,
    FindingGroup,
    Severity,
)

logger = structlog.get_logger(__name__)


def _distinct(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


def _consume(processed: set[int], positions: list[int]) -> None:
    """Mark record positions as grouped; a position may be consumed once."""
    if processed.intersection(positions):
        msg = f"records at positions {sorted(processed.intersection(positions))} grouped twice"
        raise ComputationDefectError(msg)
    processed.update(positions)


def most_common_function(records: Sequence[CertificationRecord]) -> str:
    """Return the raw function used most often, ties going to first occurrence.

    Args:
        records: Group members.

    Returns:
        Raw function value, or "" for an empty group.
    """
    if not records:
        return ""
    counts = Counter(record.function for record in records)
    # max() keeps the first maximal key, and Counter preserves insertion order
    return max(counts, key=counts.__getitem__)


class IrregularityClassifier:
    """Classifier for certification irregularities.

    Stateless apart from its configuration; ``classify`` is a pure function
    of its inputs and returns the same groups in the same order every time.

    Example:
        >>> classifier = IrregularityClassifier()
        >>> groups = classifier.classify(records, types)
        >>> print(f"Found {len(groups)} groups")
    """

    def __init__(self, config: DetectionConfig | None = None) -> None:
        """Initialize the classifier.

        Args:
            config: Detection thresholds. Defaults to DetectionConfig().
        """
        self.config = config or DetectionConfig()

    def classify(
        self,
        records: Iterable[CertificationRecord | dict[str, Any]],
        types: Iterable[CertificationType | dict[str, Any]],
        exclusions: Iterable[DuplicateExclusion] = (),
    ) -> list[FindingGroup]:
        """Classify records and catalog types into finding groups.

        Malformed entities are skipped (and logged) rather than aborting.

        Args:
            records: Certification records, as models or raw mappings.
            types: Catalog types, as models or raw mappings.
            exclusions: Pairs marked as "not a duplicate".

        Returns:
            Finding groups sorted by severity, numbered from 1.

        Raises:
            ComputationDefectError: If an internal invariant is violated.
        """
        parsed_records = parse_records(records).items
        parsed_types = parse_types(types).items
        excluded = ExclusionIndex(exclusions)

        active_types = [t for t in parsed_types if t.is_active]
        processed: set[int] = set()

        groups: list[FindingGroup] = []
        groups.extend(self._find_exact(parsed_records, active_types, processed, excluded))
        groups.extend(self._find_similar(parsed_records, active_types, processed, excluded))
        groups.extend(self._find_function_mismatch(parsed_records, processed, excluded))
        groups.extend(self._find_duplicate_types(parsed_types, excluded))

        self._check_invariants(groups)

        ordered = sorted(groups, key=lambda group: group.severity.rank)
        numbered = [
            group.model_copy(update={"index": position})
            for position, group in enumerate(ordered, start=1)
        ]

        logger.info(
            "Classification complete",
            records=len(parsed_records),
            types=len(parsed_types),
            groups=len(numbered),
            exclusions=len(excluded),
        )

        return numbered

    # ─── Pass 1: exact duplicates ─────────────────────────────────────────

    def _find_exact(
        self,
        records: list[CertificationRecord],
        active_types: list[CertificationType],
        processed: set[int],
        excluded: ExclusionIndex,
    ) -> list[FindingGroup]:
        groups = []

        for i, anchor in enumerate(records):
            if i in processed:
                continue

            member_positions = [i]

            for j in range(i + 1, len(records)):
                candidate = records[j]
                if j in processed:
                    continue
                if (
                    names_are_equivalent(candidate.name, anchor.name)
                    and names_are_equivalent(candidate.function, anchor.function)
                    and candidate.owner_id == anchor.owner_id
                    and not excluded.is_excluded(
                        ExclusionType.CERTIFICATION, anchor.id, candidate.id
                    )
                ):
                    member_positions.append(j)

            if len(member_positions) < 2:
                continue

            _consume(processed, member_positions)
            members = tuple(records[p] for p in member_positions)
            names = _distinct(record.name for record in members)
            groups.append(
                FindingGroup(
                    severity=Severity.EXACT,
                    names=names,
                    records=members,
                    suggested_type=self._suggest_for_exact(names[0], active_types),
                )
            )

        logger.debug("Exact-duplicate pass complete", groups=len(groups))
        return groups

    @staticmethod
    def _suggest_for_exact(
        first_name: str,
        active_types: list[CertificationType],
    ) -> CertificationType | None:
        for cert_type in active_types:
            if contains_either_way(cert_type.full_name, first_name):
                return cert_type
        return None

    # ─── Pass 2: similar names ────────────────────────────────────────────

    def _find_similar(
        self,
        records: list[CertificationRecord],
        active_types: list[CertificationType],
        processed: set[int],
        excluded: ExclusionIndex,
    ) -> list[FindingGroup]:
        groups = []
        threshold = self.config.similarity_threshold

        for i, anchor in enumerate(records):
            if i in processed:
                continue

            member_positions = [i]

            for j in range(i + 1, len(records)):
                candidate = records[j]
                if j in processed:
                    continue
                if (
                    names_are_equivalent(candidate.function, anchor.function)
                    and candidate.owner_id == anchor.owner_id
                    and are_similar(anchor.name, candidate.name, threshold)
                    and not excluded.is_excluded(
                        ExclusionType.CERTIFICATION, anchor.id, candidate.id
                    )
                ):
                    member_positions.append(j)

            members = tuple(records[p] for p in member_positions)
            names = _distinct(record.name for record in members)
            if len(names) < 2:
                continue

            _consume(processed, member_positions)
            groups.append(
                FindingGroup(
                    severity=Severity.SIMILAR,
                    names=names,
                    records=members,
                    suggested_type=self._suggest_for_similar(
                        names[0], most_common_function(members), active_types
                    ),
                )
            )

        logger.debug("Similar-name pass complete", groups=len(groups))
        return groups

    @staticmethod
    def _suggest_for_similar(
        first_name: str,
        function: str,
        active_types: list[CertificationType],
    ) -> CertificationType | None:
        wanted = f"{first_name} - {function}"
        for cert_type in active_types:
            if any(contains_either_way(alias, first_name) for alias in cert_type.aliases):
                return cert_type
            if contains_either_way(f"{cert_type.name} - {cert_type.function}", wanted):
                return cert_type
        return None

    # ─── Pass 3: function mismatch ────────────────────────────────────────

    def _find_function_mismatch(
        self,
        records: list[CertificationRecord],
        processed: set[int],
        excluded: ExclusionIndex,
    ) -> list[FindingGroup]:
        buckets: dict[tuple[str, str], list[int]] = {}
        for position, record in enumerate(records):
            if position in processed:
                continue
            key = (normalize(record.name), record.owner_id)
            buckets.setdefault(key, []).append(position)

        groups = []
        for positions in buckets.values():
            if len(positions) < 2:
                continue

            members = tuple(records[p] for p in positions)
            if not self._has_function_conflict(members, excluded):
                continue

            _consume(processed, positions)
            groups.append(
                FindingGroup(
                    severity=Severity.FUNCTION_MISMATCH,
                    names=(members[0].name,),
                    records=members,
                )
            )

        logger.debug("Function-mismatch pass complete", groups=len(groups))
        return groups

    @staticmethod
    def _has_function_conflict(
        members: tuple[CertificationRecord, ...],
        excluded: ExclusionIndex,
    ) -> bool:
        if len({normalize(record.function) for record in members}) < 2:
            return False
        return any(
            not names_are_equivalent(first.function, second.function)
            and not excluded.is_excluded(ExclusionType.CERTIFICATION, first.id, second.id)
            for first, second in combinations(members, 2)
        )

    # ─── Pass 4: duplicate catalog types ──────────────────────────────────

    def _find_duplicate_types(
        self,
        types: list[CertificationType],
        excluded: ExclusionIndex,
    ) -> list[FindingGroup]:
        buckets: dict[tuple[str, str], list[CertificationType]] = {}
        for cert_type in types:
            key = (cert_type.platform_id, normalize(cert_type.name))
            buckets.setdefault(key, []).append(cert_type)

        groups = []
        for bucket in buckets.values():
            if len(bucket) < 2:
                continue
            if not any(
                self._types_collide(first, second, excluded)
                for first, second in combinations(bucket, 2)
            ):
                continue

            groups.append(
                FindingGroup(
                    severity=Severity.DUPLICATE_TYPE,
                    names=tuple(cert_type.label for cert_type in bucket),
                    types=tuple(bucket),
                )
            )

        logger.debug("Duplicate-type pass complete", groups=len(groups))
        return groups

    def _types_collide(
        self,
        first: CertificationType,
        second: CertificationType,
        excluded: ExclusionIndex,
    ) -> bool:
        if excluded.is_excluded(ExclusionType.CERTIFICATION_TYPE, first.id, second.id):
            return False

        distance = levenshtein_distance(first.comparable_name, second.comparable_name)
        if distance <= self.config.max_type_name_distance:
            return True

        first_aliases = {normalize(alias) for alias in first.aliases} - {""}
        second_aliases = {normalize(alias) for alias in second.aliases} - {""}
        return bool(first_aliases & second_aliases)

    # ─── Invariants ───────────────────────────────────────────────────────

    @staticmethod
    def _check_invariants(groups: list[FindingGroup]) -> None:
        for group in groups:
            members = group.types if group.severity is Severity.DUPLICATE_TYPE else group.records
            if len(members) < 2:
                msg = f"{group.severity.value} group with fewer than 2 members"
                raise ComputationDefectError(msg)


def classify(
    records: Iterable[CertificationRecord | dict[str, Any]],
    types: Iterable[CertificationType | dict[str, Any]],
    *,
    exclusions: Iterable[DuplicateExclusion] = (),
    config: DetectionConfig | None = None,
) -> list[FindingGroup]:
    """Classify certification records and catalog types.

    Convenience wrapper around IrregularityClassifier.

    Args:
        records: Certification records, as models or raw mappings.
        types: Catalog types, as models or raw mappings.
        exclusions: Pairs marked as "not a duplicate".
        config: Detection thresholds.

    Returns:
        Finding groups sorted by severity, numbered from 1.
    """
    return IrregularityClassifier(config).classify(records, types, exclusions)
