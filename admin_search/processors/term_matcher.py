"""
Single-term matching across all administrative levels.

Input: one term
Output: pooled candidates from every level's fuzzy index, each annotated
with its hierarchy chain and ancestor names.

No cross-level deduplication: a name present at two levels gives two
candidates.
"""
from typing import Any, Dict, List
import logging

from ..config import LEVELS
from ..search_context import SearchContext

logger = logging.getLogger(__name__)


def make_candidate(context: SearchContext, unit: Dict[str, Any], score: float, matched_term: str = None) -> Dict[str, Any]:
    """
    Build a candidate dict for a unit.

    Args:
        context: Built search context
        unit: Unit record
        score: Similarity (0-1)
        matched_term: Term that produced the match (None for exact search)

    Returns:
        {'type', 'id', 'name', 'score', 'matched_term', 'chain', <level>: <ancestor name>, ...}
    """
    hierarchy = context.hierarchy_index()
    level = unit['level']

    candidate = {
        'type': level,
        'id': unit['id'],
        'name': unit['name'],
        'score': score,
        'matched_term': matched_term,
        'chain': hierarchy.chain_of(level, unit['id']),
    }
    candidate.update(hierarchy.hierarchy_names(level, unit['id']))
    return candidate


def match_term(context: SearchContext, term: str, limit_per_level: int) -> List[Dict[str, Any]]:
    """
    Query every level's fuzzy index for one term.

    Args:
        context: Built search context
        term: Query term
        limit_per_level: Maximum hits taken from each level

    Returns:
        Candidates in level order (district first), best first within a level.
        Empty if the term is too short or nothing matches.

    Example:
        >>> match_term(context, "Kampla", 10)
        [{'type': 'district', 'id': 'D1', 'name': 'Kampala', 'score': 0.857, ...}]
    """
    candidates = []

    for level in LEVELS:
        for unit, score in context.fuzzy_index(level).search(term, limit=limit_per_level):
            candidates.append(make_candidate(context, unit, score, matched_term=term))

    logger.debug(f"[MATCH] '{term}' → {len(candidates)} candidates")
    return candidates
