"""
Duplicate detection for standards registration.

Compares a name about to be registered against the names already in the
register and returns the closest ones, so an operator can be warned about
a probable duplicate. Detection only informs; it never blocks registration.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from standards_search.exceptions import ConfigurationError
from standards_search.matching.edit_distance import similarity
from standards_search.matching.types import SimilarityCandidate, check_threshold
from standards_search.models import Record
from standards_search.normalization.text_normalizer import TextNormalizer

logger = logging.getLogger(__name__)

DEFAULT_DUPLICATE_THRESHOLD = 0.82
DEFAULT_MAX_RESULTS = 5


class DuplicateFinder:
    """
    Ranks existing record names by similarity to a candidate name.
    """

    def __init__(self, normalizer: Optional[TextNormalizer] = None):
        """
        Initialize the duplicate finder.

        Args:
            normalizer: TextNormalizer instance (creates new if None)
        """
        self.normalizer = normalizer or TextNormalizer()

    def find_similar(self, name: str, records: Iterable[Record],
                     threshold: float = DEFAULT_DUPLICATE_THRESHOLD,
                     max_results: int = DEFAULT_MAX_RESULTS) -> List[SimilarityCandidate]:
        """
        Find existing records whose name resembles a candidate name.

        Args:
            name: Name about to be registered
            records: Current register records
            threshold: Minimum similarity score (0.0-1.0)
            max_results: Maximum number of candidates to return

        Returns:
            Candidates sorted by score (highest first); ties keep register order

        Raises:
            ConfigurationError: If threshold is outside [0, 1] or max_results
                is negative
        """
        threshold = check_threshold(threshold)
        if isinstance(max_results, bool) or not isinstance(max_results, int) or max_results < 0:
            raise ConfigurationError(f"max_results must be a non-negative integer, got {max_results!r}")

        normalized_name = self.normalizer.normalize(name)
        if not normalized_name or max_results == 0:
            return []

        scored: List[Tuple[float, Record]] = []
        for record in records:
            score = similarity(normalized_name, self.normalizer.normalize(record.name))
            if score >= threshold:
                scored.append((score, record))

        # sort() is stable, so equal scores stay in register order
        scored.sort(key=lambda item: item[0], reverse=True)

        candidates = [
            SimilarityCandidate(name=record.name, identifier=record.identifier, score=score)
            for score, record in scored[:max_results]
        ]

        if candidates:
            logger.debug(
                f"'{name}' resembles {len(scored)} registered standard(s); "
                f"best '{candidates[0].name}' ({candidates[0].score:.3f})"
            )
        return candidates
