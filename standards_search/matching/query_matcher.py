"""
Query matching module for register records.

Resolves exact or fuzzy text queries against the searchable fields of a
record, using edit-distance similarity for approximate matches.
"""

import logging
from typing import Iterable, List, Optional

from standards_search.matching.edit_distance import similarity_at_least
from standards_search.matching.types import Query
from standards_search.models import Record
from standards_search.normalization.text_normalizer import TextNormalizer

logger = logging.getLogger(__name__)


class QueryMatcher:
    """
    Matches records against a text query.

    Exact mode requires one searchable field to equal the whole normalized
    query. Fuzzy mode splits the query into words and requires every word
    to be similar (above the query threshold) to at least one field, either
    to the whole field value or to one of its words.
    """

    def __init__(self, normalizer: Optional[TextNormalizer] = None):
        """
        Initialize the query matcher.

        Args:
            normalizer: TextNormalizer instance (creates new if None)
        """
        self.normalizer = normalizer or TextNormalizer()

    def match(self, record: Record, query: Query) -> bool:
        """
        Check whether a record satisfies a query.

        Args:
            record: Record to test
            query: Query to resolve

        Returns:
            True if the record matches (always True for empty query text)
        """
        prepared_query = self._prepare(query.text, query.case_sensitive)
        if not prepared_query:
            return True

        fields = query.search_fields

        if query.exact:
            return any(
                self._prepare(record.text_value(field), query.case_sensitive) == prepared_query
                for field in fields
            )

        words = self.normalizer.tokenize(query.text, case_sensitive=query.case_sensitive)
        if not words:
            return True

        values = [self._prepare(record.text_value(field), query.case_sensitive) for field in fields]
        values = [value for value in values if value]

        return all(
            any(self._word_matches(word, value, query.threshold) for value in values)
            for word in words
        )

    def filter(self, records: Iterable[Record], query: Query) -> List[Record]:
        """Return the records matching a query, in input order."""
        records = list(records)
        if not self._prepare(query.text, query.case_sensitive):
            return records
        matched = [record for record in records if self.match(record, query)]
        logger.debug(
            f"Query '{query.text}' ({'exact' if query.exact else 'fuzzy'}): "
            f"{len(matched)}/{len(records)} records matched"
        )
        return matched

    def _prepare(self, text: str, case_sensitive: bool) -> str:
        if case_sensitive:
            return self.normalizer.collapse(text)
        return self.normalizer.normalize(text)

    def _word_matches(self, word: str, value: str, threshold: float) -> bool:
        """Compare a query word to a field value and to each of its words."""
        if similarity_at_least(word, value, threshold):
            return True
        if ' ' not in value:
            return False
        return any(similarity_at_least(word, token, threshold) for token in value.split(' '))

