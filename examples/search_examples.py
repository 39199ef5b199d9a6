"""
Example usage of the standards search engine.

This script demonstrates searching, filtering, sorting, autocomplete and
duplicate detection over a small in-memory register.
"""

import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from standards_search import SearchEngine
from standards_search.matching.types import Query
from standards_search.search.engine import search_stats
from standards_search.search.types import DateFilter, FilterSpec, NumericRange, SortSpec


REGISTER = [
    {'id_no': 'LS-001', 'name': 'Glucose Standard', 'manufacturer': 'Sigma-Aldrich',
     'supplier': 'Merck Thailand', 'cas': '50-99-7', 'test_group': 'Food Additives',
     'status': 'Unopened', 'concentration': 1000, 'concentration_unit': 'mg/L',
     'date_received': '2025-01-10', 'lab_expiry_date': '2025-06-20'},
    {'id_no': 'LS-002', 'name': 'Glucose Solution', 'manufacturer': 'Merck',
     'supplier': 'Merck Thailand', 'cas': '50-99-7', 'test_group': 'Food Additives',
     'status': 'In-Use', 'concentration': 500, 'concentration_unit': 'mg/L',
     'date_received': '2024-11-05', 'lab_expiry_date': '2025-05-15'},
    {'id_no': 'LS-003', 'name': 'Protein Standard', 'manufacturer': 'Thermo Fisher',
     'supplier': 'Thermo Fisher', 'test_group': 'Food Additives',
     'status': 'Unopened', 'concentration': 2000, 'concentration_unit': 'mg/L',
     'date_received': '2025-03-01', 'lab_expiry_date': '2025-08-15'},
    {'id_no': 'LS-004', 'name': 'Lead Standard Solution', 'manufacturer': 'Sigma-Aldrich',
     'supplier': 'Sigma-Aldrich', 'cas': '7439-92-1', 'test_group': 'Heavy Metals',
     'status': 'In-Use', 'concentration': 1000, 'concentration_unit': 'mg/L',
     'date_received': '2025-02-14', 'lab_expiry_date': '2026-02-14'},
    {'id_no': 'LS-005', 'name': 'Cadmium Standard Solution', 'manufacturer': 'Merck',
     'supplier': 'Merck Thailand', 'cas': '7440-43-9', 'test_group': 'Heavy Metals',
     'status': 'Disposed', 'concentration': 1000, 'concentration_unit': 'mg/L',
     'date_received': '2023-07-01', 'lab_expiry_date': '2024-07-01'},
]

NOW = datetime(2025, 6, 1)


def print_records(records):
    for record in records:
        expiry = record.lab_expiry.date().isoformat() if record.lab_expiry else "-"
        print(f"    {record.identifier}  {record.name:<28} {record.status.value:<9} expires {expiry}")


def example_fuzzy_search(engine):
    """Example: Typo-tolerant search."""
    print("=" * 80)
    print("EXAMPLE 1: Fuzzy Search")
    print("=" * 80)

    for text in ["glucse", "lead solution", "7439-92-1"]:
        result = engine.search(text)
        print(f"\nQuery: '{text}' → {result.filtered}/{result.total} matched")
        print_records(result.records)

    result = engine.search(Query("glucose", exact=True))
    print(f"\nExact query 'glucose' → {result.filtered} matched (no field equals it exactly)")


def example_filters_and_sort(engine):
    """Example: Filters combined with sorting."""
    print("\n" + "=" * 80)
    print("EXAMPLE 2: Filters and Sorting")
    print("=" * 80)

    filters = FilterSpec(
        status=["Unopened", "In-Use"],
        concentration=NumericRange(min=500),
    )
    result = engine.search(None, filters, SortSpec("lab_expiry", "asc"), now=NOW)
    print(f"\nActive stock ≥ 500 mg/L, soonest expiry first ({result.filtered}):")
    print_records(result.records)

    expiring = engine.search(filters=FilterSpec(expiry=DateFilter("expiring_30")), now=NOW)
    print(f"\nExpiring within 30 days of {NOW.date()}:")
    print_records(expiring.records)

    print(f"\nStats: {search_stats(result).to_dict()}")


def example_suggestions(engine):
    """Example: Autocomplete."""
    print("\n" + "=" * 80)
    print("EXAMPLE 3: Suggestions")
    print("=" * 80)

    for prefix in ["glu", "sta", "cad"]:
        print(f"\n  '{prefix}' → {engine.suggest(prefix)}")


def example_duplicates(engine):
    """Example: Duplicate check before registering a new standard."""
    print("\n" + "=" * 80)
    print("EXAMPLE 4: Duplicate Detection")
    print("=" * 80)

    for name in ["Glucose Standrd", "Mercury Standard Solution"]:
        candidates = engine.find_similar(name)
        if candidates:
            print(f"\n⚠ '{name}' resembles:")
            for i, candidate in enumerate(candidates, 1):
                print(f"    {i}. {candidate.name} [{candidate.identifier}] ({candidate.score:.3f})")
        else:
            print(f"\n✓ '{name}' looks new")

    for registry_id in ["7732-18-5", "7732-18-6"]:
        status = "✓ valid" if engine.validate_registry_id(registry_id) else "✗ invalid"
        print(f"\n  Registry id {registry_id}: {status}")


if __name__ == "__main__":
    """Run all examples."""

    print("\n" + "=" * 80)
    print("STANDARDS SEARCH ENGINE - EXAMPLES")
    print("=" * 80)

    engine = SearchEngine(REGISTER)

    example_fuzzy_search(engine)
    example_filters_and_sort(engine)
    example_suggestions(engine)
    example_duplicates(engine)

    print("\n" + "=" * 80)
    print("✓ All examples completed!")
    print("=" * 80)
