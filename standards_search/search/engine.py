"""
Search engine for the chemical standards register.

Coordinates the search pipeline over one corpus snapshot:

  Step 1: Query matching (exact or fuzzy)
  Step 2: Filters (membership, numeric ranges, date windows)
  Step 3: Stable, type-aware sort

and exposes the entry points used outside the pipeline: prefix suggestions,
duplicate detection at registration and registry id validation.

The corpus and its inverted index form an immutable snapshot. Replacing the
corpus builds a new snapshot off to the side and publishes it with a single
reference assignment, so readers on other threads always see a complete old
or a complete new snapshot.
"""

import logging
import threading
import time
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from standards_search.exceptions import ConfigurationError
from standards_search.matching.duplicate_finder import DuplicateFinder
from standards_search.matching.query_matcher import QueryMatcher
from standards_search.matching.types import Query, SimilarityCandidate
from standards_search.models import FilterField, Record, StandardStatus, reference_time
from standards_search.normalization.registry_id import RegistryIdValidator
from standards_search.normalization.text_normalizer import TextNormalizer
from standards_search.search.filters import apply_filters
from standards_search.search.inverted_index import InvertedIndex
from standards_search.search.sorting import apply_sort
from standards_search.search.types import FilterSpec, SearchResult, SearchStats, SortSpec
from standards_search.utils.config_manager import ConfigManager

logger = logging.getLogger(__name__)

RecordLike = Union[Record, Mapping[str, Any]]


@dataclass(frozen=True)
class _Snapshot:
    """A corpus and the index built from it, published together."""
    records: Tuple[Record, ...]
    index: InvertedIndex


_EMPTY_SNAPSHOT = _Snapshot(records=(), index=InvertedIndex())


class SearchEngine:
    """
    Search, filter and duplicate-detection engine for one register corpus.

    Each instance owns its corpus; there is no shared module state, so
    several engines (e.g. one per test) can coexist.
    """

    def __init__(self,
                 records: Optional[Iterable[RecordLike]] = None,
                 config: Optional[ConfigManager] = None,
                 normalizer: Optional[TextNormalizer] = None,
                 query_matcher: Optional[QueryMatcher] = None,
                 duplicate_finder: Optional[DuplicateFinder] = None,
                 registry_validator: Optional[RegistryIdValidator] = None):
        """
        Initialize the search engine.

        Args:
            records: Initial corpus (empty if None)
            config: ConfigManager supplying default thresholds and limits
                (built-in defaults if None)
            normalizer: TextNormalizer instance (creates new if None)
            query_matcher: QueryMatcher instance (creates new if None)
            duplicate_finder: DuplicateFinder instance (creates new if None)
            registry_validator: RegistryIdValidator instance (creates new if None)
        """
        self.config = config or ConfigManager()
        self.normalizer = normalizer or TextNormalizer()
        self.query_matcher = query_matcher or QueryMatcher(self.normalizer)
        self.duplicate_finder = duplicate_finder or DuplicateFinder(self.normalizer)
        self.registry_validator = registry_validator or RegistryIdValidator()

        self._write_lock = threading.Lock()
        self._snapshot = _EMPTY_SNAPSHOT

        if records is not None:
            self.set_corpus(records)

    # ------------------------------------------------------------------
    # Corpus management
    # ------------------------------------------------------------------

    def set_corpus(self, records: Iterable[RecordLike]) -> None:
        """
        Replace the corpus and rebuild the index.

        Rows given as mappings are converted with Record.from_dict.

        Raises:
            RecordError: If a row cannot be converted
        """
        start = time.perf_counter()
        corpus = tuple(r if isinstance(r, Record) else Record.from_dict(r) for r in records)
        self._warn_duplicate_identifiers(corpus)

        snapshot = _Snapshot(records=corpus, index=InvertedIndex.build(corpus, self.normalizer))
        with self._write_lock:
            self._snapshot = snapshot

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Indexed {len(corpus)} records ({len(snapshot.index)} tokens) in {elapsed_ms:.1f}ms"
        )

    def clear(self) -> None:
        """Drop the corpus and index."""
        with self._write_lock:
            self._snapshot = _EMPTY_SNAPSHOT
        logger.info("Search index cleared")

    @property
    def records(self) -> Tuple[Record, ...]:
        """The current corpus (immutable)."""
        return self._snapshot.records

    @property
    def index(self) -> InvertedIndex:
        """The index of the current corpus."""
        return self._snapshot.index

    def __len__(self) -> int:
        return len(self._snapshot.records)

    # ------------------------------------------------------------------
    # Search pipeline
    # ------------------------------------------------------------------

    def search(self,
               query: Union[Query, str, None] = None,
               filters: Optional[FilterSpec] = None,
               sort: Optional[SortSpec] = None,
               now: Optional[datetime] = None) -> SearchResult:
        """
        Run the match -> filter -> sort pipeline over the current corpus.

        Args:
            query: Query or plain query text (None matches everything);
                plain text uses the configured fuzzy threshold
            filters: Filters to apply (None applies nothing)
            sort: Sort order (defaults to the configured sort)
            now: Reference time for date presets (defaults to current UTC time)

        Returns:
            SearchResult holding a new list of records and the counts

        Raises:
            ConfigurationError: If the query threshold or sort field is invalid
        """
        snapshot = self._snapshot

        query = self._coerce_query(query)
        filters = filters or FilterSpec()
        sort = sort or self._default_sort()

        matched = self.query_matcher.filter(snapshot.records, query)
        filtered = apply_filters(matched, filters, now=now)
        ordered = apply_sort(filtered, sort)

        logger.debug(
            f"Search '{query.text}': {len(snapshot.records)} -> {len(matched)} matched "
            f"-> {len(filtered)} filtered, sorted by {sort.field.value} {sort.direction.value}"
        )

        return SearchResult(
            records=ordered,
            total=len(snapshot.records),
            filtered=len(ordered),
            query=query,
            filters=filters,
            sort=sort,
        )

    def suggest(self, prefix: str, limit: Optional[int] = None) -> List[str]:
        """
        Autocomplete record names for a typed prefix.

        Args:
            prefix: Text typed so far
            limit: Maximum suggestions (configured default if None)
        """
        snapshot = self._snapshot
        if limit is None:
            limit = self.config.get_param('suggestions', 'limit')
        if limit < 0:
            raise ConfigurationError(f"limit must be non-negative, got {limit}")
        return snapshot.index.suggest(prefix, snapshot.records, limit=limit, normalizer=self.normalizer)

    def find_similar(self, name: str,
                     threshold: Optional[float] = None,
                     max_results: Optional[int] = None) -> List[SimilarityCandidate]:
        """
        Find registered standards whose name resembles ``name``.

        Intended to warn an operator before registering a probable duplicate.

        Args:
            name: Name about to be registered
            threshold: Minimum similarity (configured default if None)
            max_results: Maximum candidates (configured default if None)
        """
        snapshot = self._snapshot
        if threshold is None:
            threshold = self.config.get_threshold('duplicate')
        if max_results is None:
            max_results = self.config.get_param('duplicates', 'max_results')
        return self.duplicate_finder.find_similar(
            name, snapshot.records, threshold=threshold, max_results=max_results
        )

    def validate_registry_id(self, registry_id: Any) -> bool:
        """Check format and check digit of a registry (CAS) id."""
        return self.registry_validator.validate(registry_id)

    def get_filter_options(self) -> Dict[FilterField, List[str]]:
        """
        Distinct values of each filterable field, for filter-selection UIs.

        Values are listed in first-seen corpus order; blanks are dropped.
        """
        snapshot = self._snapshot
        options: Dict[FilterField, List[str]] = {}
        for filter_field in FilterField:
            seen: Dict[str, None] = {}
            for record in snapshot.records:
                value = getattr(record, filter_field.value)
                if isinstance(value, StandardStatus):
                    value = value.value
                if value:
                    seen.setdefault(value, None)
            options[filter_field] = list(seen)
        return options

    # ------------------------------------------------------------------
    # Direct lookups
    # ------------------------------------------------------------------

    def search_by_registry_id(self, registry_id: str) -> List[Record]:
        """
        Records whose registry id equals ``registry_id``.

        Unhyphenated ids ("7439921") and ids embedded in text
        ("CAS: 7439-92-1") are resolved to the hyphenated form first.
        """
        wanted = (registry_id or '').strip()
        if not wanted:
            return []
        wanted = self.canonical_registry_id(wanted) or wanted
        return [r for r in self._snapshot.records if r.registry_id == wanted]

    def canonical_registry_id(self, text: Any) -> Optional[str]:
        """
        Hyphenated, checksum-valid registry id read from user input.

        Accepts a bare digit string, a hyphenated id, or free text with an
        id in it. Returns None when no valid id can be read.
        """
        return self.registry_validator.format(text) or self.registry_validator.extract(text)

    def search_by_manufacturer(self, manufacturer: str) -> List[Record]:
        """Records whose normalized manufacturer contains the normalized text."""
        wanted = self.normalizer.normalize(manufacturer)
        if not wanted:
            return []
        return [
            r for r in self._snapshot.records
            if wanted in self.normalizer.normalize(r.manufacturer)
        ]

    def search_by_status(self, status: Union[StandardStatus, str]) -> List[Record]:
        """
        Records with the given status.

        Raises:
            ConfigurationError: If the status is unknown
        """
        try:
            wanted = StandardStatus.parse(status)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        return [r for r in self._snapshot.records if r.status is wanted]

    def expiring_soon(self, days: Optional[int] = None,
                      now: Optional[datetime] = None) -> List[Record]:
        """
        Records whose lab expiry falls after ``now`` and within ``days``.

        Args:
            days: Look-ahead window (configured default if None)
            now: Reference time (defaults to current UTC time)
        """
        if days is None:
            days = self.config.get_param('filters', 'expiring_soon_days')
        if days < 0:
            raise ConfigurationError(f"days must be non-negative, got {days}")
        now = reference_time(now)
        horizon = now + timedelta(days=days)
        return [
            r for r in self._snapshot.records
            if r.lab_expiry is not None and now < r.lab_expiry <= horizon
        ]

    def expired(self, now: Optional[datetime] = None) -> List[Record]:
        """Records whose lab expiry is before ``now``."""
        now = reference_time(now)
        return [
            r for r in self._snapshot.records
            if r.lab_expiry is not None and r.lab_expiry < now
        ]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _coerce_query(self, query: Union[Query, str, None]) -> Query:
        if isinstance(query, Query):
            return query
        return Query(text=query or "", threshold=self.config.get_threshold('fuzzy'))

    def _default_sort(self) -> SortSpec:
        return SortSpec(
            field=self.config.get_param('sorting', 'field'),
            direction=self.config.get_param('sorting', 'direction'),
        )

    @staticmethod
    def _warn_duplicate_identifiers(records: Tuple[Record, ...]) -> None:
        counts = Counter(r.identifier for r in records)
        duplicates = sorted(identifier for identifier, n in counts.items() if n > 1)
        if duplicates:
            logger.warning(
                f"{len(duplicates)} identifier(s) appear more than once in the corpus: "
                f"{', '.join(duplicates[:10])}"
            )


def search_stats(result: SearchResult) -> SearchStats:
    """Per-status and per-manufacturer counts over a search result."""
    status_counts = Counter(r.status.value for r in result.records)
    manufacturer_counts = Counter(r.manufacturer for r in result.records if r.manufacturer)
    return SearchStats(
        total=result.total,
        filtered=result.filtered,
        status_counts=dict(status_counts),
        manufacturer_counts=dict(manufacturer_counts),
    )


def search_standards(records: Iterable[RecordLike],
                     query: Union[Query, str, None] = None,
                     filters: Optional[FilterSpec] = None,
                     sort: Optional[SortSpec] = None) -> SearchResult:
    """One-off search over a record collection with a throwaway engine."""
    return SearchEngine(records).search(query, filters, sort)


def filter_standards(records: Iterable[RecordLike],
                     filters: FilterSpec,
                     sort: Optional[SortSpec] = None) -> SearchResult:
    """One-off filter (no query text) over a record collection."""
    return SearchEngine(records).search(None, filters, sort)


def sort_standards(records: Iterable[RecordLike], sort: SortSpec) -> List[Record]:
    """Sort a record collection without building an index."""
    corpus = [r if isinstance(r, Record) else Record.from_dict(r) for r in records]
    return apply_sort(corpus, sort)
