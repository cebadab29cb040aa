"""Lookup of reviewer-confirmed "not a duplicate" pairs."""

from collections.abc import Iterable

from cert_irregularity.models import DuplicateExclusion, ExclusionType


class ExclusionIndex:
    """Pair-keyed lookup over duplicate exclusions.

    Example:
        >>> index = ExclusionIndex([DuplicateExclusion(
        ...     exclusion_type="certification", item1_id="b", item2_id="a")])
        >>> index.is_excluded(ExclusionType.CERTIFICATION, "a", "b")
        True
    """

    def __init__(self, exclusions: Iterable[DuplicateExclusion] = ()) -> None:
        """Initialize the index.

        Args:
            exclusions: Exclusion pairs to index.
        """
        self._by_pair: dict[tuple[str, str], list[DuplicateExclusion]] = {}
        for exclusion in exclusions:
            key = (exclusion.item1_id, exclusion.item2_id)
            self._by_pair.setdefault(key, []).append(exclusion)

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._by_pair.values())

    def is_excluded(self, exclusion_type: ExclusionType, id1: str, id2: str) -> bool:
        """Check if a pair was marked as not a duplicate.

        Args:
            exclusion_type: Kind of entity the ids refer to.
            id1: First identifier.
            id2: Second identifier.

        Returns:
            True if the pair is excluded, in either order.
        """
        first, second = sorted((id1, id2))
        return any(
            exclusion.matches(exclusion_type, id1, id2)
            for exclusion in self._by_pair.get((first, second), ())
        )
