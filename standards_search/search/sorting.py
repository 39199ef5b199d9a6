"""
Sort engine for register search results.

Orders records by a SortSpec with type-aware keys: dates chronologically,
measurements numerically and everything else as normalized text.
"""

from typing import Any, Callable, Iterable, List, Optional

from standards_search.models import FieldType, Record, SortField
from standards_search.normalization.text_normalizer import normalize_text
from standards_search.search.types import SortSpec


def sort_key(field: SortField) -> Callable[[Record], Any]:
    """Key function comparing a field by its declared type."""
    if field.field_type is FieldType.NUMBER:
        return lambda record: float(record.sort_value(field))
    if field.field_type is FieldType.DATE:
        return lambda record: record.sort_value(field)
    return lambda record: normalize_text(record.sort_value(field))


def apply_sort(records: Iterable[Record], sort: Optional[SortSpec] = None) -> List[Record]:
    """
    Sort records by a SortSpec.

    The sort is stable in both directions: records with equal keys keep
    their input order, so repeated calls on the same input give the same
    output. Records without a value for the sort field follow all valued
    records, in input order, whichever the direction.

    Args:
        records: Records to order
        sort: Field and direction (defaults to name ascending)

    Returns:
        New sorted list
    """
    sort = sort or SortSpec()
    field = sort.field

    present: List[Record] = []
    missing: List[Record] = []
    for record in records:
        if record.sort_value(field) is None:
            missing.append(record)
        else:
            present.append(record)

    # reverse=True keeps equal elements in original order
    ordered = sorted(present, key=sort_key(field), reverse=sort.descending)
    return ordered + missing
