"""Certification name normalization utilities.

``normalize`` is the only text transform used by comparison logic: two raw
strings are "the same" for matching purposes iff their normalized forms are
equal.
"""

import re

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize(name: str | None) -> str:
    """Normalize a display name for comparison.

    Applies standard normalization:
    - Lowercase
    - Remove every character that is not a word character or whitespace
    - Collapse runs of whitespace to a single space
    - Trim

    Punctuation is removed before whitespace is collapsed so the result is
    idempotent (``"a - b"`` becomes ``"a b"``, never ``"a  b"``).

    Args:
        name: Raw name, possibly None.

    Returns:
        Normalized name.

    Example:
        >>> normalize("  AWS Certified   Solutions-Architect ")
        'aws certified solutionsarchitect'
        >>> normalize("PMP®")
        'pmp'
    """
    if not name:
        return ""

    normalized = _NON_WORD.sub("", name.lower())
    normalized = _WHITESPACE.sub(" ", normalized)

    return normalized.strip()


def names_are_equivalent(name1: str | None, name2: str | None) -> bool:
    """Check if two names are equivalent after normalization.

    Args:
        name1: First name.
        name2: Second name.

    Returns:
        True if names are equivalent.
    """
    return normalize(name1) == normalize(name2)


def contains_either_way(text1: str | None, text2: str | None) -> bool:
    """Check substring containment in either direction over normalized forms.

    An empty side never matches; otherwise an empty catalog field would
    "contain" every name.

    Args:
        text1: First string.
        text2: Second string.

    Returns:
        True if either normalized string contains the other.
    """
    first = normalize(text1)
    second = normalize(text2)
    if not first or not second:
        return False
    return first in second or second in first
