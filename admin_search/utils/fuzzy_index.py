"""
Per-Level Fuzzy Index

One index per administrative level, built once from that level's display
names. Lookups run the approximate scorer over the pre-normalized names
and return the best hits in collection order for ties.

Example:
    >>> index = FuzzyIndex('district', [{'id': '1', 'name': 'Kampala', ...}])
    >>> index.search("Kampla")
    [({'id': '1', 'name': 'Kampala', ...}, 0.857...)]
"""
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import time
import logging

from ..config import FUZZY_THRESHOLD, MIN_MATCH_CHAR_LENGTH
from .matching_utils import dissimilarity, rank_matches
from .text_utils import normalize_name

logger = logging.getLogger(__name__)


class FuzzyIndex:
    """
    Approximate-match index over the names of one administrative level.

    The index is read-only after construction and can be shared between
    threads without locking.
    """

    def __init__(
        self,
        level: str,
        units: Sequence[Dict[str, Any]],
        threshold: float = FUZZY_THRESHOLD,
        min_match_char_length: int = MIN_MATCH_CHAR_LENGTH,
        scorer: Callable[[str, str], float] = dissimilarity
    ):
        """
        Build the index.

        Args:
            level: Level key ('district', 'county', ...)
            units: Unit records in collection order
            threshold: Dissimilarity threshold (exclusive)
            min_match_char_length: Minimum term length
            scorer: Dissimilarity function used for ranking
        """
        start_time = time.time()

        self.level = level
        self.threshold = threshold
        self.min_match_char_length = min_match_char_length
        self.scorer = scorer

        self._units: Tuple[Dict[str, Any], ...] = tuple(units)
        self._names: Tuple[str, ...] = tuple(normalize_name(unit['name']) for unit in self._units)

        elapsed = (time.time() - start_time) * 1000
        logger.debug(f"Fuzzy index '{level}' built in {elapsed:.1f}ms ({len(self._units)} names)")

    def search(self, term: str, limit: Optional[int] = None) -> List[Tuple[Dict[str, Any], float]]:
        """
        Find the names at this level that approximately match a term.

        Args:
            term: Query term
            limit: Maximum number of hits (None = all accepted hits)

        Returns:
            List of (unit, similarity) tuples, best first. Empty when the term
            is empty, shorter than the minimum length, or nothing passes the
            threshold.
        """
        hits = rank_matches(
            term,
            self._names,
            threshold=self.threshold,
            min_match_char_length=self.min_match_char_length,
            limit=limit,
            scorer=self.scorer
        )
        return [(self._units[position], score) for position, score in hits]
