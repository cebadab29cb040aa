"""Name normalization and similarity scoring."""

from cert_irregularity.matching.normalizer import (
    contains_either_way,
    names_are_equivalent,
    normalize,
)
from cert_irregularity.matching.similarity import are_similar, levenshtein_distance, similarity

__all__ = [
    "are_similar",
    "contains_either_way",
    "levenshtein_distance",
    "names_are_equivalent",
    "normalize",
    "similarity",
]
