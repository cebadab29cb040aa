"""Edit-distance similarity between certification names.

Similarity is ``(max_len - distance) / max_len`` over the normalized forms,
using unit-cost Levenshtein distance from rapidfuzz.
"""

from rapidfuzz.distance import Levenshtein

from cert_irregularity.config import SIMILARITY_THRESHOLD
from cert_irregularity.exceptions import ComputationDefectError
from cert_irregularity.matching.normalizer import normalize


def levenshtein_distance(name1: str | None, name2: str | None) -> int:
    """Edit distance between the normalized forms of two names.

    Substitution, insertion and deletion each cost 1.

    Args:
        name1: First name.
        name2: Second name.

    Returns:
        Number of single-character edits.
    """
    return Levenshtein.distance(normalize(name1), normalize(name2))


def similarity(name1: str | None, name2: str | None) -> float:
    """Similarity between two names in [0, 1].

    Two empty normalized strings are identical (1.0).

    Args:
        name1: First name.
        name2: Second name.

    Returns:
        Similarity score.

    Raises:
        ComputationDefectError: If the score falls outside [0, 1].

    Example:
        >>> round(similarity("GCP Architect", "GCP Architecte"), 3)
        0.929
    """
    first = normalize(name1)
    second = normalize(name2)
    max_len = max(len(first), len(second))
    if max_len == 0:
        return 1.0

    score = (max_len - Levenshtein.distance(first, second)) / max_len
    if not 0.0 <= score <= 1.0:
        msg = f"similarity out of range for {first!r} / {second!r}: {score}"
        raise ComputationDefectError(msg)
    return score


def are_similar(
    name1: str | None,
    name2: str | None,
    threshold: float = SIMILARITY_THRESHOLD,
) -> bool:
    """Check if two names are similar but not normalized-identical.

    Identical normalized names are exact matches, handled upstream, so
    they are never "similar".

    Args:
        name1: First name.
        name2: Second name.
        threshold: Exclusive lower bound on similarity.

    Returns:
        True if ``threshold < similarity < 1.0``.
    """
    if normalize(name1) == normalize(name2):
        return False
    score = similarity(name1, name2)
    return threshold < score < 1.0
