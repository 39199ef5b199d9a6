"""
Record matching package.

Provides:
- Edit-distance scoring (Levenshtein distance and normalized similarity)
- Query matching (exact and fuzzy) against record fields
- Duplicate detection for names about to be registered
"""

from standards_search.matching.duplicate_finder import DuplicateFinder
from standards_search.matching.edit_distance import distance, similarity, similarity_at_least
from standards_search.matching.query_matcher import QueryMatcher
from standards_search.matching.types import Query, SimilarityCandidate

__all__ = [
    "DuplicateFinder",
    "QueryMatcher",
    "Query",
    "SimilarityCandidate",
    "distance",
    "similarity",
    "similarity_at_least",
]
