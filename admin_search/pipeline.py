"""
Search Pipeline - query parsing → per-term matching → ranking

Simple pipeline that chains:
parse_query → match_term (per term) → rank_single_term | rank_multi_term
"""
from typing import Any, Callable, Dict, List
from pathlib import Path
import time
import logging

from .config import LEVELS, DEFAULT_LIMIT, MULTI_TERM_POOL_LIMIT, DATA_DIR, DB_PATH
from .processors import query_parser
from .processors import term_matcher
from .processors import ranking
from .search_context import SearchContext, build_context
from .utils.data_utils import load_from_json, load_from_sqlite, load_from_records
from .utils import matching_utils
from .utils.text_utils import normalize_name

logger = logging.getLogger(__name__)


def search(context: SearchContext, query: str, limit: int = DEFAULT_LIMIT) -> List[Dict[str, Any]]:
    """
    Fuzzy search for administrative units.

    Single-term queries return candidates sorted by score. Multi-term
    queries ("Nakawa, Kampala", "Nakawa in Kampala") rank the first term's
    candidates by how many later terms match a related unit.

    Args:
        context: Built search context
        query: Raw query string
        limit: Maximum number of results

    Returns:
        Ranked list of candidates / ranked results (empty for empty query or limit <= 0)

    Example:
        >>> search(context, "Kampla", 5)[0]['name']
        'Kampala'
    """
    if limit is None or limit <= 0:
        return []

    terms = query_parser.parse_query(query)
    if not terms:
        return []

    if len(terms) == 1:
        candidates = term_matcher.match_term(context, terms[0], limit)
        return ranking.rank_single_term(candidates, limit)

    term_pools = [term_matcher.match_term(context, term, MULTI_TERM_POOL_LIMIT) for term in terms]
    return ranking.rank_multi_term(term_pools, limit)


def exact_search(context: SearchContext, query: str) -> List[Dict[str, Any]]:
    """
    Case-insensitive substring search over all levels (no limit).

    Args:
        context: Built search context
        query: Substring to look for

    Returns:
        Candidates with score 1.0, in level order then collection order

    Example:
        >>> [r['name'] for r in exact_search(context, "gulu")]
        ['Gulu', 'Gulu Municipality', ...]
    """
    needle = normalize_name(query)
    if not needle:
        return []

    results = []
    for level in LEVELS:
        for unit in context.units(level):
            if needle in normalize_name(unit['name']):
                results.append(term_matcher.make_candidate(context, unit, 1.0))

    return results


class AdminSearchEngine:
    """
    Holds the current search context and serves queries against it.

    reload() builds a complete new context before swapping it in, so
    queries already running keep using the old one.
    """

    def __init__(self, context: SearchContext):
        """
        Initialize engine with a built context.

        Args:
            context: Built search context
        """
        if not context.is_built():
            raise RuntimeError("Index not built. Call build() first.")

        self._context = context
        self.stats = {
            'total_queries': 0,
            'multi_term_queries': 0,
            'empty_results': 0,
            'reloads': 0
        }

    @classmethod
    def from_records(cls, records: Dict[str, List[Dict[str, Any]]]) -> 'AdminSearchEngine':
        """Build an engine from in-memory collections."""
        return cls(build_context(load_from_records(records)))

    @classmethod
    def from_json(cls, data_dir: Path = DATA_DIR) -> 'AdminSearchEngine':
        """Build an engine from the JSON data files."""
        return cls(build_context(load_from_json(data_dir)))

    @classmethod
    def from_sqlite(cls, db_path: Path = DB_PATH) -> 'AdminSearchEngine':
        """Build an engine from a SQLite database."""
        return cls(build_context(load_from_sqlite(db_path)))

    def context(self) -> SearchContext:
        return self._context

    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> List[Dict[str, Any]]:
        """
        Run a fuzzy search and record statistics.

        Example:
            >>> engine = AdminSearchEngine.from_json()
            >>> engine.search("Nakawa, Kampala", 5)[0]['match_info']
            {'matched_terms': 2, 'total_terms': 2, 'confidence': 1.5}
        """
        start_time = time.time()
        context = self._context

        results = search(context, query, limit)

        self.stats['total_queries'] += 1
        if len(query_parser.parse_query(query)) > 1:
            self.stats['multi_term_queries'] += 1
        if not results:
            self.stats['empty_results'] += 1

        elapsed = (time.time() - start_time) * 1000
        logger.debug(f"[SEARCH] '{query}' (limit={limit}) → {len(results)} results | {elapsed:.1f}ms")
        return results

    def exact_search(self, query: str) -> List[Dict[str, Any]]:
        """Case-insensitive substring search."""
        return exact_search(self._context, query)

    def chain_of(self, level: str, unit_id: str) -> Dict[str, Any]:
        """Ancestor id chain of a unit."""
        return self._context.hierarchy_index().chain_of(level, unit_id)

    def hierarchy_names(self, level: str, unit_id: str) -> Dict[str, str]:
        """Display names of a unit and its ancestors."""
        return self._context.hierarchy_index().hierarchy_names(level, unit_id)

    def units(self, level: str):
        """All units of a level."""
        return self._context.units(level)

    def reload(self, loader: Callable[[], Dict[str, List[Dict[str, Any]]]]):
        """
        Rebuild from fresh reference data and swap it in atomically.

        Args:
            loader: Zero-argument callable returning {level: [unit, ...]},
                e.g. functools.partial(load_from_json, data_dir)
        """
        new_context = build_context(loader())
        self._context = new_context
        matching_utils.clear_cache()
        self.stats['reloads'] += 1
        logger.info("Search context reloaded")

    def get_stats(self) -> Dict[str, Any]:
        """
        Get engine statistics.

        Returns:
            Statistics dictionary (query counters, units per level, cache usage)
        """
        return {
            **self.stats,
            'units': self._context.get_stats(),
            'cache': matching_utils.get_cache_stats(),
        }

    def reset_stats(self):
        """Reset statistics counters."""
        self.stats = {
            'total_queries': 0,
            'multi_term_queries': 0,
            'empty_results': 0,
            'reloads': self.stats['reloads']
        }
