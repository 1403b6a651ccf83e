"""
Search context: reference collections plus every index built from them.

Build once, then share read-only between any number of concurrent queries.

Example:
    >>> context = build_context(load_from_json(DATA_DIR))
    >>> context.fuzzy_index('district').search("Kampla")
"""
from typing import Any, Dict, Iterable, Tuple
import time
import logging

from .config import LEVELS
from .utils.fuzzy_index import FuzzyIndex
from .utils.hierarchy_index import HierarchyIndex

logger = logging.getLogger(__name__)


class SearchContext:
    """
    Owned, immutable state for search calls.

    Holds the unit collections (tuples, collection order preserved), the
    Hierarchy Index, and one Fuzzy Index per level.
    """

    def __init__(self):
        """Initialize empty context. Call build() before use."""
        self._units: Dict[str, Tuple[Dict[str, Any], ...]] = {}
        self._fuzzy_indexes: Dict[str, FuzzyIndex] = {}
        self._hierarchy: HierarchyIndex = None
        self._built = False

    def build(self, units_by_level: Dict[str, Iterable[Dict[str, Any]]]) -> 'SearchContext':
        """
        Build all indexes from normalized unit collections.

        Args:
            units_by_level: {level: [unit, ...]} from one of the data loaders

        Returns:
            self
        """
        if self._built:
            logger.warning("Context already built, skipping rebuild")
            return self

        logger.info("Building search context...")
        start_time = time.time()

        for level in LEVELS:
            self._units[level] = tuple(units_by_level.get(level, ()))
            self._fuzzy_indexes[level] = FuzzyIndex(level, self._units[level])

        self._hierarchy = HierarchyIndex(self._units)
        self._built = True

        elapsed = (time.time() - start_time) * 1000
        logger.info(f"Search context built in {elapsed:.1f}ms")
        for level in LEVELS:
            logger.info(f"  {level}: {len(self._units[level])} units")

        return self

    def is_built(self) -> bool:
        return self._built

    def _require_built(self):
        if not self._built:
            raise RuntimeError("Index not built. Call build() first.")

    def hierarchy_index(self) -> HierarchyIndex:
        self._require_built()
        return self._hierarchy

    def fuzzy_index(self, level: str) -> FuzzyIndex:
        self._require_built()
        return self._fuzzy_indexes[level]

    def units(self, level: str) -> Tuple[Dict[str, Any], ...]:
        """All units of a level in collection order (empty for unknown level)."""
        self._require_built()
        return self._units.get(level, ())

    def get_stats(self) -> Dict[str, int]:
        self._require_built()
        return {level: len(self._units[level]) for level in LEVELS}


def build_context(units_by_level: Dict[str, Iterable[Dict[str, Any]]]) -> SearchContext:
    """Create and build a context in one step."""
    return SearchContext().build(units_by_level)
