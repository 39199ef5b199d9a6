"""
Filter engine for register search results.

Applies a FilterSpec as an AND-composition of independent predicates:
set membership on categorical fields, inclusive numeric ranges and date
windows (named presets or custom ranges).
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from standards_search.models import FilterField, Record, StandardStatus, reference_time
from standards_search.search.types import DateFilter, FilterSpec, NumericRange

logger = logging.getLogger(__name__)

Predicate = Callable[[Record], bool]


def apply_filters(records: Iterable[Record], spec: Optional[FilterSpec],
                  now: Optional[datetime] = None) -> List[Record]:
    """
    Filter records by a FilterSpec.

    Args:
        records: Records to filter
        spec: Filters to apply (None applies nothing)
        now: Reference time for date presets (defaults to the current UTC
            time; aware values are converted to naive UTC)

    Returns:
        Records passing every configured predicate, in input order. A range
        with min > max (or start > end) matches nothing.
    """
    records = list(records)
    if spec is None:
        return records

    predicates = build_predicates(spec, reference_time(now))
    if not predicates:
        return records

    result = [record for record in records if all(p(record) for p in predicates)]
    logger.debug(f"Filters ({len(predicates)} predicates): {len(result)}/{len(records)} records kept")
    return result


def build_predicates(spec: FilterSpec, now: datetime) -> List[Predicate]:
    """Translate a FilterSpec into a list of record predicates."""
    predicates: List[Predicate] = []

    for filter_field, allowed in spec.memberships().items():
        predicates.append(_membership(filter_field, allowed))

    if spec.received is not None:
        predicates.append(_date_window(spec.received, now, lambda r: r.date_received))
    if spec.expiry is not None:
        predicates.append(_date_window(spec.expiry, now, lambda r: r.lab_expiry))

    if spec.concentration is not None:
        predicates.append(_numeric_range(
            spec.concentration, lambda r: r.concentration.value if r.concentration else None
        ))
    if spec.packing_size is not None:
        predicates.append(_numeric_range(
            spec.packing_size, lambda r: r.packing_size.value if r.packing_size else None
        ))

    return predicates


def _membership(filter_field: FilterField, allowed) -> Predicate:
    if filter_field is FilterField.STATUS:
        statuses = {StandardStatus.parse(s) for s in allowed}
        return lambda record: record.status in statuses
    return lambda record: getattr(record, filter_field.value) in allowed


def _date_window(window: DateFilter, now: datetime, getter) -> Predicate:
    if window.is_empty:
        return lambda record: False
    return lambda record: window.matches(getter(record), now)


def _numeric_range(numeric: NumericRange, getter) -> Predicate:
    return lambda record: numeric.contains(getter(record))
