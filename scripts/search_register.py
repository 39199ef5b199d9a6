"""
Command-line search over an exported chemical standards register.

Loads a JSON export of register rows (a list of row objects, or an object
with a "records" list) and runs a search, an autocomplete suggestion, a
duplicate check or a registry id validation.

Usage:
    python scripts/search_register.py register.json search "lead standard" --status In-Use --sort lab_expiry --desc
    python scripts/search_register.py register.json search --expiry expiring_30
    python scripts/search_register.py register.json suggest glu
    python scripts/search_register.py register.json duplicates "Glucose Standrd" --threshold 0.8
    python scripts/search_register.py register.json validate 7732-18-5
    python scripts/search_register.py register.json validate 7732185
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from standards_search.exceptions import StandardsSearchError
from standards_search.matching.types import Query
from standards_search.search.engine import SearchEngine, search_stats
from standards_search.search.types import DateFilter, FilterSpec, NumericRange, SortSpec
from standards_search.utils.config_manager import ConfigManager

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stderr)]
)
logger = logging.getLogger(__name__)


def load_rows(path: Path) -> List[Dict[str, Any]]:
    """
    Load register rows from a JSON export.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file does not hold a list of rows
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get('records')
    if not isinstance(data, list):
        raise ValueError(f"{path} does not contain a list of register rows")
    for position, row in enumerate(data):
        if not isinstance(row, dict):
            raise ValueError(f"{path}: row {position} is a {type(row).__name__}, not an object")

    logger.info(f"Loaded {len(data)} rows from {path}")
    return data


def build_filters(args: argparse.Namespace) -> FilterSpec:
    concentration = None
    if args.min_concentration is not None or args.max_concentration is not None:
        concentration = NumericRange(args.min_concentration, args.max_concentration)

    return FilterSpec(
        status=args.status,
        manufacturer=args.manufacturer,
        supplier=args.supplier,
        test_group=args.test_group,
        expiry=DateFilter(args.expiry) if args.expiry else None,
        concentration=concentration,
    )


def run_search(engine: SearchEngine, args: argparse.Namespace) -> None:
    query = Query(
        text=args.query or "",
        exact=args.exact,
        case_sensitive=args.case_sensitive,
        threshold=args.threshold if args.threshold is not None else engine.config.get_threshold('fuzzy'),
        fields=args.field,
    )
    sort = SortSpec(args.sort, 'descending' if args.desc else 'ascending') if args.sort else None

    result = engine.search(query, build_filters(args), sort)

    print(f"\n{result.filtered} of {result.total} standards")
    print("-" * 80)
    for record in result.records[:args.limit]:
        expiry = record.lab_expiry.date().isoformat() if record.lab_expiry else "-"
        print(f"  {record.identifier:<10} {record.name:<36} {record.status.value:<9} "
              f"{record.manufacturer:<18} expires {expiry}")
    if result.filtered > args.limit:
        print(f"  ... {result.filtered - args.limit} more")

    if args.stats:
        print(json.dumps(search_stats(result).to_dict(), indent=2))


def run_suggest(engine: SearchEngine, args: argparse.Namespace) -> None:
    for name in engine.suggest(args.prefix, limit=args.limit):
        print(name)


def run_duplicates(engine: SearchEngine, args: argparse.Namespace) -> None:
    candidates = engine.find_similar(args.name, threshold=args.threshold, max_results=args.limit)
    if not candidates:
        print(f"✓ No registered standard resembles '{args.name}'")
        return

    print(f"⚠ {len(candidates)} possible duplicate(s) of '{args.name}':")
    for i, candidate in enumerate(candidates, 1):
        print(f"  {i}. {candidate.name} [{candidate.identifier}] ({candidate.score:.3f})")


def run_validate(engine: SearchEngine, args: argparse.Namespace) -> None:
    registry_id = engine.canonical_registry_id(args.registry_id)
    if registry_id:
        print(f"✓ {registry_id} is a valid registry id")
        matches = engine.search_by_registry_id(registry_id)
        for record in matches:
            print(f"  registered as {record.name} [{record.identifier}]")
    else:
        print(f"✗ {args.registry_id} is not a valid registry id")
        sys.exit(2)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Search a chemical standards register export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Usage:")[1],
    )
    parser.add_argument('register', type=Path, help='JSON export of register rows')
    parser.add_argument('--config', type=Path, help='Search config YAML (default: config/search_config.yaml)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    search = subparsers.add_parser('search', help='Search, filter and sort the register')
    search.add_argument('query', nargs='?', help='Query text (omit to list everything)')
    search.add_argument('--exact', action='store_true', help='Require a whole-field match')
    search.add_argument('--case-sensitive', action='store_true', help='Do not fold case')
    search.add_argument('--threshold', '-t', type=float, help='Fuzzy similarity threshold (0-1)')
    search.add_argument('--field', action='append', help='Restrict to a searchable field (repeatable)')
    search.add_argument('--status', action='append', help='Status filter (repeatable)')
    search.add_argument('--manufacturer', action='append', help='Manufacturer filter (repeatable)')
    search.add_argument('--supplier', action='append', help='Supplier filter (repeatable)')
    search.add_argument('--test-group', action='append', help='Test group filter (repeatable)')
    search.add_argument('--expiry', choices=['expired', 'expiring_30', 'expiring_60', 'expiring_90'],
                        help='Lab expiry preset')
    search.add_argument('--min-concentration', type=float)
    search.add_argument('--max-concentration', type=float)
    search.add_argument('--sort', help='Sort field (default from config)')
    search.add_argument('--desc', action='store_true', help='Sort descending')
    search.add_argument('--limit', type=int, default=50, help='Rows to print (default: 50)')
    search.add_argument('--stats', action='store_true', help='Print status and manufacturer counts')
    search.set_defaults(handler=run_search)

    suggest = subparsers.add_parser('suggest', help='Autocomplete a name prefix')
    suggest.add_argument('prefix')
    suggest.add_argument('--limit', type=int, help='Maximum suggestions (default from config)')
    suggest.set_defaults(handler=run_suggest)

    duplicates = subparsers.add_parser('duplicates', help='Check a new name for probable duplicates')
    duplicates.add_argument('name')
    duplicates.add_argument('--threshold', '-t', type=float, help='Similarity threshold (default from config)')
    duplicates.add_argument('--limit', type=int, help='Maximum candidates (default from config)')
    duplicates.set_defaults(handler=run_duplicates)

    validate = subparsers.add_parser('validate', help='Validate a registry (CAS) id')
    validate.add_argument('registry_id', help='Registry id, hyphenated or bare digits')
    validate.set_defaults(handler=run_validate)

    return parser


def main():
    """Main entry point for the register search CLI."""
    args = build_parser().parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = ConfigManager(args.config) if args.config else ConfigManager.from_default_path()
        engine = SearchEngine(load_rows(args.register), config=config)
        args.handler(engine, args)
    except (StandardsSearchError, ValueError, OSError) as e:
        logger.error(f"Register search failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
