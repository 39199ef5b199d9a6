"""
Invariant Test Suite for the standards search engine

These tests encode properties that must hold for any corpus and any query,
rather than checking individual examples.

Invariant categories:
  1. Result containment and ordering
  2. Filter composition (intersection, idempotence)
  3. Sort stability and missing-value placement
  4. Index consistency
  5. Empty-corpus behaviour
  6. Snapshot isolation under concurrent corpus replacement
  7. Config file / built-in defaults agreement

Run:  pytest tests/test_invariants.py -v
"""

import threading
from pathlib import Path

import pytest
import yaml

from standards_search.matching.types import Query
from standards_search.models import SortField
from standards_search.search.engine import SearchEngine
from standards_search.search.filters import apply_filters
from standards_search.search.sorting import apply_sort
from standards_search.search.types import DateFilter, FilterSpec, NumericRange, SortSpec
from standards_search.utils.config_manager import ConfigManager
from tests.fixtures.test_data import ids, make_record


CONFIG_PATH = Path(__file__).parent.parent / "config" / "search_config.yaml"

QUERIES = ["", "glucose", "glucse", "standard solution", "merck", "7439-92-1", "zzzz"]

FILTER_SPECS = [
    FilterSpec(status=["In-Use"]),
    FilterSpec(manufacturer=["Sigma-Aldrich", "Merck"]),
    FilterSpec(test_group=["Heavy Metals"], concentration=NumericRange(500, 1000)),
    FilterSpec(expiry=DateFilter("expiring_90")),
    FilterSpec(received=DateFilter(start="2025-01-01")),
]


# ============================================================================
# 1. RESULT CONTAINMENT AND ORDERING
# ============================================================================

class TestResultContainment:

    @pytest.mark.parametrize("text", QUERIES)
    def test_results_subset_of_corpus(self, engine, text):
        result = engine.search(text)
        assert set(ids(result.records)) <= set(ids(engine.records))
        assert result.filtered == len(result.records) <= result.total == len(engine)

    @pytest.mark.parametrize("text", QUERIES)
    def test_search_is_deterministic(self, engine, fixed_now, text):
        first = engine.search(text, FilterSpec(status=["Unopened", "In-Use"]), now=fixed_now)
        second = engine.search(text, FilterSpec(status=["Unopened", "In-Use"]), now=fixed_now)
        assert ids(first.records) == ids(second.records)

    def test_fuzzy_superset_of_exact(self, engine, records):
        """Any record matched exactly on its name is also matched fuzzily."""
        for record in records:
            exact = ids(engine.search(Query(record.name, exact=True)).records)
            fuzzy = ids(engine.search(Query(record.name)).records)
            assert set(exact) <= set(fuzzy)

    def test_lower_threshold_never_loses_matches(self, engine):
        for text in ("glucse", "cadmum", "aflatoxn"):
            strict = set(ids(engine.search(Query(text, threshold=0.9)).records))
            loose = set(ids(engine.search(Query(text, threshold=0.7)).records))
            assert strict <= loose


# ============================================================================
# 2. FILTER COMPOSITION
# ============================================================================

class TestFilterComposition:

    @pytest.mark.parametrize("spec", FILTER_SPECS)
    def test_idempotent(self, records, fixed_now, spec):
        once = apply_filters(records, spec, now=fixed_now)
        twice = apply_filters(once, spec, now=fixed_now)
        assert once == twice

    @pytest.mark.parametrize("spec", FILTER_SPECS)
    def test_preserves_input_order(self, records, fixed_now, spec):
        result = ids(apply_filters(records, spec, now=fixed_now))
        positions = [ids(records).index(identifier) for identifier in result]
        assert positions == sorted(positions)

    def test_combination_is_intersection(self, records, fixed_now):
        for first in FILTER_SPECS:
            for second in FILTER_SPECS:
                left = set(ids(apply_filters(records, first, now=fixed_now)))
                right = set(ids(apply_filters(records, second, now=fixed_now)))
                combined = apply_filters(apply_filters(records, first, now=fixed_now), second, now=fixed_now)
                assert set(ids(combined)) == left & right

    def test_filter_then_search_equals_search_then_filter(self, engine, records, fixed_now):
        spec = FilterSpec(manufacturer=["Sigma-Aldrich"])
        via_engine = engine.search("standard", spec, now=fixed_now)
        manual = apply_filters(
            [r for r in records if r in engine.search("standard").records], spec, now=fixed_now
        )
        assert set(ids(via_engine.records)) == set(ids(manual))


# ============================================================================
# 3. SORT STABILITY
# ============================================================================

class TestSortInvariants:

    @pytest.mark.parametrize("field", list(SortField))
    @pytest.mark.parametrize("direction", ["ascending", "descending"])
    def test_sort_is_permutation(self, records, field, direction):
        result = apply_sort(records, SortSpec(field, direction))
        assert sorted(ids(result)) == sorted(ids(records))

    @pytest.mark.parametrize("field", list(SortField))
    @pytest.mark.parametrize("direction", ["ascending", "descending"])
    def test_sort_is_idempotent(self, records, field, direction):
        spec = SortSpec(field, direction)
        once = apply_sort(records, spec)
        assert apply_sort(once, spec) == once

    @pytest.mark.parametrize("field", list(SortField))
    def test_missing_values_last(self, records, field):
        for direction in ("ascending", "descending"):
            result = apply_sort(records, SortSpec(field, direction))
            flags = [r.sort_value(field) is None for r in result]
            assert flags == sorted(flags)

    def test_equal_keys_keep_input_order(self):
        corpus = [make_record(str(i), "Same Name") for i in range(10)]
        for direction in ("ascending", "descending"):
            assert ids(apply_sort(corpus, SortSpec("name", direction))) == [str(i) for i in range(10)]


# ============================================================================
# 4. INDEX CONSISTENCY
# ============================================================================

class TestIndexConsistency:

    def test_index_matches_corpus(self, engine):
        assert engine.index.size == len(engine.records)
        for token in engine.index.tokens():
            for position in engine.index.postings(token):
                assert 0 <= position < len(engine.records)

    def test_index_rebuilt_on_replace(self, engine, records):
        engine.set_corpus(records[:3])
        assert engine.index.size == 3
        for token in engine.index.tokens():
            assert max(engine.index.postings(token)) < 3

    def test_suggestions_come_from_corpus(self, engine, records):
        names = {r.name for r in records}
        for prefix in ("gl", "st", "sigma", "me", "fr", "ca"):
            assert set(engine.suggest(prefix, limit=20)) <= names


# ============================================================================
# 5. EMPTY CORPUS
# ============================================================================

class TestEmptyCorpus:

    @pytest.mark.parametrize("text", QUERIES)
    def test_search(self, empty_engine, text):
        result = empty_engine.search(text, FilterSpec(status=["In-Use"]), SortSpec("lab_expiry", "desc"))
        assert result.records == []
        assert result.total == 0
        assert result.filtered == 0

    def test_other_operations(self, empty_engine, fixed_now):
        assert empty_engine.suggest("glu") == []
        assert empty_engine.find_similar("Glucose Standard") == []
        assert empty_engine.expired(now=fixed_now) == []
        assert empty_engine.expiring_soon(now=fixed_now) == []
        assert all(values == [] for values in empty_engine.get_filter_options().values())


# ============================================================================
# 6. SNAPSHOT ISOLATION
# ============================================================================

class TestSnapshotIsolation:

    def test_readers_see_whole_snapshots(self, records):
        """A search sees either the old corpus or the new one, never a mix."""
        small = records[:2]
        engine = SearchEngine(records)
        errors = []
        stop = threading.Event()

        def reader():
            while not stop.is_set():
                result = engine.search()
                if result.total not in (len(records), len(small)):
                    errors.append(f"unexpected total {result.total}")
                if result.filtered != result.total:
                    errors.append(f"filtered {result.filtered} != total {result.total}")
                suggestions = engine.suggest("st", limit=20)
                if not set(suggestions) <= {r.name for r in records}:
                    errors.append(f"unexpected suggestions {suggestions}")

        def writer():
            for i in range(50):
                engine.set_corpus(small if i % 2 else records)
            stop.set()

        threads = [threading.Thread(target=reader) for _ in range(4)]
        threads.append(threading.Thread(target=writer))
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert errors == []


# ============================================================================
# 7. CONFIG CENTRALIZATION
# ============================================================================

class TestConfigDefaults:

    def test_config_file_matches_defaults(self):
        """The shipped YAML file and the built-in defaults agree."""
        with open(CONFIG_PATH, "r", encoding="utf-8") as f:
            shipped = yaml.safe_load(f)
        assert shipped == ConfigManager.DEFAULT_CONFIG

    def test_threshold_ordering(self):
        """Duplicate warnings are at least as strict as search matching."""
        config = ConfigManager.from_default_path()
        assert config.get_threshold('duplicate') >= config.get_threshold('fuzzy')
