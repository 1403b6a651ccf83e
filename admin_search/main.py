#!/usr/bin/env python3
"""
Main entry point for administrative unit search.

Simple interface:
- Fuzzy search (single or multi-term query)
- Exact substring search
- Text or JSON output
"""
import argparse
import copy
import json
import logging
import sys
from pathlib import Path

from .config import DEFAULT_LIMIT, DATA_DIR
from .pipeline import AdminSearchEngine


class ColoredFormatter(logging.Formatter):
    """Colors the level name; other handlers still see the plain record"""
    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[92m',
        logging.WARNING: '\033[93m',
        logging.ERROR: '\033[91m',
        logging.CRITICAL: '\033[1m\033[91m',
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)

        colored = copy.copy(record)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def setup_logging(debug: bool = False):
    """Show WARNING and above (or DEBUG with --debug) on stderr."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    handler.setFormatter(ColoredFormatter('%(levelname)s %(name)s: %(message)s'))
    root_logger.addHandler(handler)


def format_result(index: int, result: dict) -> str:
    """Render one result as text lines."""
    lines = [f"  {index}. {result['name']} ({result['type']}) - Score: {result['score']:.3f}"]

    match_info = result.get('match_info')
    if match_info:
        lines.append(
            f"     Match info: {match_info['matched_terms']}/{match_info['total_terms']} terms, "
            f"confidence: {match_info['confidence']:.3f}"
        )

    ancestors = [f"{level}: {result[level]}" for level in ('district', 'county', 'subcounty', 'parish')
                 if level != result['type'] and result.get(level)]
    if ancestors:
        lines.append(f"     {', '.join(ancestors)}")

    return '\n'.join(lines)


def run_query(engine: AdminSearchEngine, query: str, limit: int, exact: bool, output_format: str):
    """Run one query and print the results."""
    results = engine.exact_search(query) if exact else engine.search(query, limit)

    if output_format == 'json':
        print(json.dumps(results, indent=2, ensure_ascii=False))
        return

    mode = 'Exact search' if exact else 'Search'
    print(f"\n{mode}: '{query}'")
    print(f"Found {len(results)} results:")
    for i, result in enumerate(results, 1):
        print(format_result(i, result))


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Administrative Unit Fuzzy Search',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  # Fuzzy search (typos tolerated)
  python -m admin_search.main -q "Kampla"

  # Child unit qualified by an ancestor
  python -m admin_search.main -q "Nakawa, Kampala" -n 5

  # Exact substring search, JSON output
  python -m admin_search.main -q "gulu" --exact --json
        '''
    )

    parser.add_argument('-q', '--query', required=True, help='Query to search for')
    parser.add_argument('-n', '--limit', type=int, default=DEFAULT_LIMIT, help='Maximum number of results')
    parser.add_argument('--exact', action='store_true', help='Case-insensitive substring search')
    parser.add_argument('--json', action='store_true', help='Output as JSON')
    parser.add_argument('--data-dir', default=str(DATA_DIR), help='Directory with the JSON reference files')
    parser.add_argument('--db', help='SQLite database with the reference tables (overrides --data-dir)')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    args = parser.parse_args()
    setup_logging(args.debug)

    try:
        if args.db:
            engine = AdminSearchEngine.from_sqlite(Path(args.db))
        else:
            engine = AdminSearchEngine.from_json(Path(args.data_dir))
    except FileNotFoundError as e:
        print(f"Error loading reference data: {e}", file=sys.stderr)
        sys.exit(1)

    run_query(engine, args.query, args.limit, args.exact, 'json' if args.json else 'text')


if __name__ == '__main__':
    main()
