"""
Data model for the chemical standards register.

Defines the Record entity handed to the search engine by the record
provider, its status enumeration, and the closed enumerations of fields
that can be searched, filtered and sorted on.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from standards_search.exceptions import ConfigurationError, RecordError


class StandardStatus(Enum):
    """Lifecycle status of a chemical standard."""
    UNOPENED = "Unopened"
    IN_USE = "In-Use"
    DISPOSED = "Disposed"

    @classmethod
    def parse(cls, value: Any) -> "StandardStatus":
        """
        Resolve a status from an enum member or a loosely formatted string.

        Case, spaces, hyphens and underscores are ignored, so "InUse",
        "in use" and "In-Use" all resolve to IN_USE.

        Raises:
            ValueError: If the value names no known status
        """
        if isinstance(value, cls):
            return value
        key = re.sub(r'[\s_-]+', '', str(value or '')).lower()
        for member in cls:
            if re.sub(r'-', '', member.value).lower() == key:
                return member
        raise ValueError(f"Unknown status '{value}'")


class FieldType(Enum):
    """Comparison type of a record field."""
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"


class SearchField(Enum):
    """Text fields that are indexed and searched by query text."""
    NAME = "name"
    MANUFACTURER = "manufacturer"
    SUPPLIER = "supplier"
    REGISTRY_ID = "registry_id"
    LOT = "lot"
    TEST_GROUP = "test_group"
    MATERIAL_TYPE = "material_type"
    STORAGE_CONDITION = "storage_condition"

    @classmethod
    def parse(cls, value: Any) -> "SearchField":
        if isinstance(value, cls):
            return value
        try:
            return cls(_FIELD_ALIASES.get(value, value))
        except ValueError:
            raise ConfigurationError(f"Unknown search field '{value}'") from None


class FilterField(Enum):
    """Categorical fields that support set-membership filtering."""
    STATUS = "status"
    MANUFACTURER = "manufacturer"
    SUPPLIER = "supplier"
    TEST_GROUP = "test_group"
    MATERIAL_TYPE = "material_type"
    STORAGE_CONDITION = "storage_condition"


class SortField(Enum):
    """Fields a result set can be ordered by."""
    IDENTIFIER = "identifier"
    NAME = "name"
    MANUFACTURER = "manufacturer"
    SUPPLIER = "supplier"
    REGISTRY_ID = "registry_id"
    LOT = "lot"
    TEST_GROUP = "test_group"
    MATERIAL_TYPE = "material_type"
    STORAGE_CONDITION = "storage_condition"
    STATUS = "status"
    CONCENTRATION = "concentration"
    PACKING_SIZE = "packing_size"
    DATE_RECEIVED = "date_received"
    CERTIFICATE_EXPIRY = "certificate_expiry"
    LAB_EXPIRY = "lab_expiry"

    @property
    def field_type(self) -> FieldType:
        if self in (SortField.CONCENTRATION, SortField.PACKING_SIZE):
            return FieldType.NUMBER
        if self in (SortField.DATE_RECEIVED, SortField.CERTIFICATE_EXPIRY, SortField.LAB_EXPIRY):
            return FieldType.DATE
        return FieldType.TEXT

    @classmethod
    def parse(cls, value: Any) -> "SortField":
        if isinstance(value, cls):
            return value
        try:
            return cls(_FIELD_ALIASES.get(value, value))
        except ValueError:
            raise ConfigurationError(f"Unknown sort field '{value}'") from None


# Register column names used by the spreadsheet backend
_FIELD_ALIASES = {
    'id_no': 'identifier',
    'cas': 'registry_id',
    'storage': 'storage_condition',
    'material': 'material_type',
    'lab_expiry_date': 'lab_expiry',
}


@dataclass(frozen=True)
class Measurement:
    """A numeric quantity with its unit (e.g. 1000 mg/L, 50 mL)."""
    value: float
    unit: str = ""

    def __str__(self) -> str:
        return f"{self.value:g} {self.unit}".strip()


@dataclass(frozen=True)
class Record:
    """
    One chemical standard in the register.

    Records are immutable so that a corpus snapshot can be shared between
    concurrent readers without copying.
    """
    identifier: str
    name: str
    manufacturer: str = ""
    supplier: str = ""
    registry_id: Optional[str] = None
    lot: str = ""
    test_group: str = ""
    material_type: str = ""
    storage_condition: str = ""
    status: StandardStatus = StandardStatus.UNOPENED
    concentration: Optional[Measurement] = None
    packing_size: Optional[Measurement] = None
    date_received: Optional[datetime] = None
    certificate_expiry: Optional[datetime] = None
    lab_expiry: Optional[datetime] = None

    def text_value(self, field: SearchField) -> str:
        """Raw string value of a searchable field ('' when missing)."""
        return getattr(self, field.value) or ''

    def sort_value(self, field: SortField) -> Any:
        """
        Comparable value of a sortable field, or None when missing.

        Measurements resolve to their numeric value and statuses to their
        display string.
        """
        value = getattr(self, field.value)
        if isinstance(value, Measurement):
            return value.value
        if isinstance(value, StandardStatus):
            return value.value
        if value == '':
            return None
        return value

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> "Record":
        """
        Build a Record from a register row.

        Accepts both the backend column names (id_no, cas, storage,
        material, lab_expiry_date, concentration_unit, packing_unit) and
        the attribute names of this class.

        Args:
            row: Mapping of column name to raw value

        Returns:
            Record instance

        Raises:
            RecordError: If the identifier is missing, or the status,
                a date, or a numeric value cannot be parsed
        """
        data: Dict[str, Any] = {}
        for key, value in row.items():
            data[_FIELD_ALIASES.get(key, key)] = value

        identifier = _clean_text(data.get('identifier'))
        if not identifier:
            raise RecordError(f"Row has no identifier: {dict(row)!r}")

        try:
            status = StandardStatus.parse(data.get('status') or StandardStatus.UNOPENED)
        except ValueError as e:
            raise RecordError(f"Record {identifier}: {e}") from e

        registry_id = _clean_text(data.get('registry_id')) or None

        return cls(
            identifier=identifier,
            name=_clean_text(data.get('name')),
            manufacturer=_clean_text(data.get('manufacturer')),
            supplier=_clean_text(data.get('supplier')),
            registry_id=registry_id,
            lot=_clean_text(data.get('lot')),
            test_group=_clean_text(data.get('test_group')),
            material_type=_clean_text(data.get('material_type')),
            storage_condition=_clean_text(data.get('storage_condition')),
            status=status,
            concentration=_parse_measurement(
                identifier, 'concentration', data.get('concentration'), data.get('concentration_unit')
            ),
            packing_size=_parse_measurement(
                identifier, 'packing_size', data.get('packing_size'), data.get('packing_unit')
            ),
            date_received=parse_datetime(data.get('date_received'), identifier, 'date_received'),
            certificate_expiry=parse_datetime(data.get('certificate_expiry'), identifier, 'certificate_expiry'),
            lab_expiry=parse_datetime(data.get('lab_expiry'), identifier, 'lab_expiry'),
        )


def _clean_text(value: Any) -> str:
    if value is None:
        return ''
    return str(value).strip()


def _parse_measurement(identifier: str, field: str, value: Any,
                       unit: Any) -> Optional[Measurement]:
    if isinstance(value, Measurement):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise RecordError(f"Record {identifier}: {field} is not numeric: {value!r}") from None
    return Measurement(number, _clean_text(unit))


def parse_datetime(value: Any, identifier: Optional[str] = None,
                   field: str = "date") -> Optional[datetime]:
    """
    Parse a register date into a naive datetime.

    Date-only values map to midnight. Timezone-aware values are converted
    to UTC and made naive so every date in a corpus compares consistently.

    Raises:
        RecordError: If a non-blank value cannot be parsed
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            prefix = f"Record {identifier}: " if identifier else ""
            raise RecordError(f"{prefix}invalid {field} {value!r}") from None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def reference_time(now: Any = None) -> datetime:
    """
    Resolve the reference time for date comparisons.

    Uses the same frame as parse_datetime (naive UTC): aware values are
    converted, and None means the current UTC time.

    Raises:
        ConfigurationError: If ``now`` is not a date, datetime or ISO string
    """
    try:
        parsed = parse_datetime(now, field='reference time')
    except RecordError as e:
        raise ConfigurationError(str(e)) from e
    if parsed is None:
        return datetime.now(timezone.utc).replace(tzinfo=None)
    return parsed
