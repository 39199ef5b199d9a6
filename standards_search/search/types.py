"""
Type definitions for the search pipeline.

Defines filter, sort and result structures exchanged between the search
engine and its callers.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Collection, Dict, FrozenSet, List, Optional

from standards_search.exceptions import ConfigurationError, RecordError
from standards_search.matching.types import Query
from standards_search.models import FilterField, Record, SortField, StandardStatus, parse_datetime


class DatePreset(Enum):
    """Named date windows, evaluated against the current time."""
    EXPIRED = "expired"
    EXPIRING_30 = "expiring_30"
    EXPIRING_60 = "expiring_60"
    EXPIRING_90 = "expiring_90"
    CUSTOM = "custom"

    @property
    def days(self) -> Optional[int]:
        """Window length for the expiring_N presets."""
        return {
            DatePreset.EXPIRING_30: 30,
            DatePreset.EXPIRING_60: 60,
            DatePreset.EXPIRING_90: 90,
        }.get(self)


class SortDirection(Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    @classmethod
    def parse(cls, value: Any) -> "SortDirection":
        if isinstance(value, cls):
            return value
        aliases = {'asc': cls.ASCENDING, 'desc': cls.DESCENDING}
        key = str(value).strip().lower()
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            raise ConfigurationError(f"Unknown sort direction '{value}'") from None


@dataclass(frozen=True)
class NumericRange:
    """Inclusive numeric range; either bound may be omitted."""
    min: Optional[float] = None
    max: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        """True when min > max, i.e. nothing can match."""
        return self.min is not None and self.max is not None and self.min > self.max

    def contains(self, value: Optional[float]) -> bool:
        if value is None or self.is_empty:
            return False
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True


@dataclass(frozen=True)
class DateFilter:
    """
    A date window, either a named preset or a custom inclusive range.

    For custom ranges a plain ``date`` end bound covers that whole day.
    """
    preset: DatePreset = DatePreset.CUSTOM
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def __post_init__(self):
        if not isinstance(self.preset, DatePreset):
            try:
                object.__setattr__(self, 'preset', DatePreset(str(self.preset).strip().lower()))
            except ValueError:
                raise ConfigurationError(f"Unknown date preset '{self.preset}'") from None
        object.__setattr__(self, 'start', _coerce_bound(self.start, end_of_day=False))
        object.__setattr__(self, 'end', _coerce_bound(self.end, end_of_day=True))

    def matches(self, value: Optional[datetime], now: datetime) -> bool:
        """
        Check a record date against the window.

        Records without the date never match.
        """
        if value is None:
            return False
        if self.preset is DatePreset.EXPIRED:
            return value < now
        if self.preset is not DatePreset.CUSTOM:
            return now <= value <= now + timedelta(days=self.preset.days)
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value > self.end:
            return False
        return True

    @property
    def is_empty(self) -> bool:
        """True for a custom range with start after end."""
        return (self.preset is DatePreset.CUSTOM and self.start is not None
                and self.end is not None and self.start > self.end)


def _coerce_bound(value: Any, end_of_day: bool) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.max if end_of_day else time.min)
    try:
        return parse_datetime(value, field='date filter bound')
    except RecordError as e:
        raise ConfigurationError(str(e)) from e


@dataclass
class FilterSpec:
    """
    Conjunction of optional predicates applied to a result set.

    Empty or None membership sets and None ranges impose no constraint.
    """
    status: Optional[Collection[Any]] = None
    manufacturer: Optional[Collection[str]] = None
    supplier: Optional[Collection[str]] = None
    test_group: Optional[Collection[str]] = None
    material_type: Optional[Collection[str]] = None
    storage_condition: Optional[Collection[str]] = None
    received: Optional[DateFilter] = None
    expiry: Optional[DateFilter] = None
    concentration: Optional[NumericRange] = None
    packing_size: Optional[NumericRange] = None

    def __post_init__(self):
        # a single value stands for a one-element set, not its characters
        for filter_field in FilterField:
            values = getattr(self, filter_field.value)
            if isinstance(values, (str, StandardStatus)):
                setattr(self, filter_field.value, frozenset({values}))
        if self.status:
            try:
                self.status = frozenset(StandardStatus.parse(s) for s in self.status)
            except ValueError as e:
                raise ConfigurationError(str(e)) from e

    def memberships(self) -> Dict[FilterField, FrozenSet[Any]]:
        """Configured set-membership predicates keyed by field."""
        active = {}
        for filter_field in FilterField:
            values = getattr(self, filter_field.value)
            if values:
                active[filter_field] = frozenset(values)
        return active

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for UI echo."""
        result: Dict[str, Any] = {}
        for filter_field, values in self.memberships().items():
            result[filter_field.value] = sorted(
                v.value if isinstance(v, StandardStatus) else str(v) for v in values
            )
        for name in ('received', 'expiry'):
            window = getattr(self, name)
            if window is not None:
                result[name] = {
                    'preset': window.preset.value,
                    'start': window.start.isoformat() if window.start else None,
                    'end': window.end.isoformat() if window.end else None,
                }
        for name in ('concentration', 'packing_size'):
            numeric = getattr(self, name)
            if numeric is not None:
                result[name] = {'min': numeric.min, 'max': numeric.max}
        return result


@dataclass
class SortSpec:
    """Sort field and direction; defaults to name ascending."""
    field: SortField = SortField.NAME
    direction: SortDirection = SortDirection.ASCENDING

    def __post_init__(self):
        self.field = SortField.parse(self.field)
        self.direction = SortDirection.parse(self.direction)

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESCENDING


@dataclass
class SearchResult:
    """
    Output of the search pipeline.

    Attributes:
        records: Matching records, filtered and sorted (a new list owned by
            the caller; the records themselves are immutable and shared)
        total: Size of the corpus searched
        filtered: Number of records returned
        query: Query that produced the result
        filters: Filters that produced the result
        sort: Sort that produced the result
    """
    records: List[Record]
    total: int
    filtered: int
    query: Query
    filters: FilterSpec
    sort: SortSpec

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class SearchStats:
    """Summary counts over a search result."""
    total: int
    filtered: int
    status_counts: Dict[str, int] = field(default_factory=dict)
    manufacturer_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total": self.total,
            "filtered": self.filtered,
            "status_counts": dict(self.status_counts),
            "manufacturer_counts": dict(self.manufacturer_counts),
        }
