"""
Register search package.

Provides the inverted index, the filter and sort engines, and the
SearchEngine facade that runs the match -> filter -> sort pipeline over a
corpus snapshot.
"""

from standards_search.search.engine import (
    SearchEngine,
    filter_standards,
    search_standards,
    search_stats,
    sort_standards,
)
from standards_search.search.filters import apply_filters
from standards_search.search.inverted_index import InvertedIndex
from standards_search.search.sorting import apply_sort
from standards_search.search.types import (
    DateFilter,
    DatePreset,
    FilterSpec,
    NumericRange,
    SearchResult,
    SearchStats,
    SortDirection,
    SortSpec,
)

__all__ = [
    "SearchEngine",
    "search_standards",
    "filter_standards",
    "sort_standards",
    "search_stats",
    "apply_filters",
    "apply_sort",
    "InvertedIndex",
    "DateFilter",
    "DatePreset",
    "FilterSpec",
    "NumericRange",
    "SearchResult",
    "SearchStats",
    "SortDirection",
    "SortSpec",
]
