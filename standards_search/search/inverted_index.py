"""
Inverted index over register records.

Maps normalized word tokens to the positions of the records containing
them. The index is rebuilt from scratch whenever the corpus changes and is
used for prefix suggestions (autocomplete); query matching scans the corpus
directly because fuzzy matches cannot be resolved by exact token lookup.
"""

import logging
from typing import Dict, FrozenSet, Iterator, List, Optional, Sequence, Set

from standards_search.models import Record, SearchField
from standards_search.normalization.text_normalizer import TextNormalizer

logger = logging.getLogger(__name__)

DEFAULT_SUGGESTION_LIMIT = 5


class InvertedIndex:
    """
    Token -> record position postings for one corpus snapshot.

    Every position in every posting is a valid index into the record
    sequence the index was built from. Instances are never updated in
    place; build a new one for a new corpus.
    """

    INDEXED_FIELDS = tuple(SearchField)

    def __init__(self, postings: Optional[Dict[str, FrozenSet[int]]] = None,
                 size: int = 0):
        self._postings: Dict[str, FrozenSet[int]] = postings or {}
        self.size = size

    @classmethod
    def build(cls, records: Sequence[Record],
              normalizer: Optional[TextNormalizer] = None) -> "InvertedIndex":
        """
        Build an index from a record sequence.

        Each indexable field is normalized and split on whitespace; tokens
        of a single character are skipped.

        Args:
            records: Corpus in position order
            normalizer: TextNormalizer instance (creates new if None)

        Returns:
            New InvertedIndex covering exactly these records
        """
        normalizer = normalizer or TextNormalizer()
        postings: Dict[str, Set[int]] = {}

        for position, record in enumerate(records):
            for field in cls.INDEXED_FIELDS:
                for token in normalizer.tokenize(record.text_value(field)):
                    postings.setdefault(token, set()).add(position)

        frozen = {token: frozenset(positions) for token, positions in postings.items()}
        return cls(frozen, size=len(records))

    def postings(self, token: str) -> FrozenSet[int]:
        """Positions of records containing a (normalized) token."""
        return self._postings.get(token, frozenset())

    def tokens(self) -> Iterator[str]:
        """Indexed tokens in first-seen corpus order."""
        return iter(self._postings)

    def __len__(self) -> int:
        return len(self._postings)

    def __contains__(self, token: object) -> bool:
        return token in self._postings

    def suggest(self, prefix: str, records: Sequence[Record],
                limit: int = DEFAULT_SUGGESTION_LIMIT,
                normalizer: Optional[TextNormalizer] = None) -> List[str]:
        """
        Suggest record names for an autocomplete prefix.

        Scans tokens that start with the normalized prefix (a token equal
        to the prefix itself is skipped) and collects the distinct names of
        the records in their postings, in first-seen order.

        Args:
            prefix: Text typed so far
            records: The corpus this index was built from
            limit: Maximum number of names to return
            normalizer: TextNormalizer instance (creates new if None)

        Returns:
            Up to ``limit`` distinct record names
        """
        if len(records) != self.size:
            raise ValueError(
                f"Index covers {self.size} records but {len(records)} were supplied; rebuild the index"
            )

        normalizer = normalizer or TextNormalizer()
        normalized_prefix = normalizer.normalize(prefix)
        if not normalized_prefix or limit <= 0:
            return []

        suggestions: List[str] = []
        seen: Set[str] = set()
        for token, positions in self._postings.items():
            if token == normalized_prefix or not token.startswith(normalized_prefix):
                continue
            for position in sorted(positions):
                name = records[position].name
                if name and name not in seen:
                    seen.add(name)
                    suggestions.append(name)
                    if len(suggestions) >= limit:
                        return suggestions
        return suggestions
