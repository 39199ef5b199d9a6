"""
Chemical Standards Register Search - Source Package

Main modules:
- normalization: Text normalization and registry (CAS) id validation
- matching: Edit distance, query matching and duplicate detection
- search: Inverted index, filters, sorting and the search engine facade
- utils: Configuration management
"""

from standards_search.exceptions import ConfigurationError, RecordError, StandardsSearchError
from standards_search.models import Measurement, Record, StandardStatus
from standards_search.search.engine import SearchEngine

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "RecordError",
    "StandardsSearchError",
    "Measurement",
    "Record",
    "StandardStatus",
    "SearchEngine",
]
