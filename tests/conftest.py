"""
Pytest configuration and shared fixtures for standards search tests.

Provides:
- Sample register records built from backend rows
- A search engine preloaded with the sample corpus
- Normalizer, validator and matcher instances
"""

from typing import List

import pytest

from standards_search.matching.duplicate_finder import DuplicateFinder
from standards_search.matching.query_matcher import QueryMatcher
from standards_search.models import Record
from standards_search.normalization.registry_id import RegistryIdValidator
from standards_search.normalization.text_normalizer import TextNormalizer
from standards_search.search.engine import SearchEngine
from tests.fixtures.test_data import REFERENCE_NOW, REGISTER_ROWS, make_record


# ============================================================================
# RECORD FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def register_rows():
    """Backend rows for the sample register (fresh copies)."""
    return [dict(row) for row in REGISTER_ROWS]


@pytest.fixture(scope="function")
def records(register_rows) -> List[Record]:
    """Sample register converted to Records."""
    return [Record.from_dict(row) for row in register_rows]


@pytest.fixture(scope="function")
def glucose_corpus() -> List[Record]:
    """Three-record corpus used for the fuzzy matching example."""
    return [
        make_record('G-1', 'Glucose Standard'),
        make_record('G-2', 'Glucose Solution'),
        make_record('G-3', 'Protein Standard'),
    ]


@pytest.fixture(scope="function")
def fixed_now():
    """Reference time for date preset tests."""
    return REFERENCE_NOW


# ============================================================================
# ENGINE FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def engine(records) -> SearchEngine:
    """Search engine preloaded with the sample register."""
    return SearchEngine(records)


@pytest.fixture(scope="function")
def empty_engine() -> SearchEngine:
    """Search engine with an empty corpus."""
    return SearchEngine()


# ============================================================================
# COMPONENT FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def text_normalizer() -> TextNormalizer:
    """Fresh text normalizer instance."""
    return TextNormalizer()


@pytest.fixture(scope="function")
def registry_validator() -> RegistryIdValidator:
    """Fresh registry id validator instance."""
    return RegistryIdValidator()


@pytest.fixture(scope="function")
def query_matcher(text_normalizer) -> QueryMatcher:
    """Fresh query matcher instance."""
    return QueryMatcher(normalizer=text_normalizer)


@pytest.fixture(scope="function")
def duplicate_finder(text_normalizer) -> DuplicateFinder:
    """Fresh duplicate finder instance."""
    return DuplicateFinder(normalizer=text_normalizer)
