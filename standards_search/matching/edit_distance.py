"""
Edit-distance scoring for register strings.

Uses Levenshtein distance for approximate string comparison and derives a
normalized similarity score from it.
"""

import Levenshtein


def distance(a: str, b: str) -> int:
    """
    Levenshtein edit distance (unit-cost insertion, deletion, substitution).

    Args:
        a: First string
        b: Second string

    Returns:
        Minimum number of single-character edits turning a into b
    """
    return Levenshtein.distance(a or '', b or '')


def similarity(a: str, b: str) -> float:
    """
    Normalized similarity derived from edit distance.

    Defined as 1 - distance / max(len(a), len(b)), and 1.0 when both
    strings are empty.

    Note this is not ``Levenshtein.ratio``, which scores insertions and
    deletions only and normalizes by the summed length.

    Returns:
        Similarity in [0.0, 1.0], where 1.0 is identical

    Examples:
        >>> round(similarity("glucse", "glucose"), 3)
        0.857
    """
    a = a or ''
    b = b or ''
    if a == b:
        return 1.0
    longest = max(len(a), len(b))
    return 1.0 - Levenshtein.distance(a, b) / longest


def similarity_at_least(a: str, b: str, threshold: float) -> bool:
    """
    Check similarity(a, b) >= threshold, skipping the distance when possible.

    The edit distance is at least the length difference, so when the length
    difference alone already pushes the score under the threshold the full
    computation is not needed.
    """
    a = a or ''
    b = b or ''
    if a == b:
        return True
    longest = max(len(a), len(b))
    if 1.0 - abs(len(a) - len(b)) / longest < threshold:
        return False
    return similarity(a, b) >= threshold
