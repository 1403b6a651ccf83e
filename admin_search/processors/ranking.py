"""
Ranking of single-term and multi-term search results.

Multi-term ranking:
1. Seeds are the candidates of the first term.
2. For each later term, the first candidate related to the seed (shared
   district, county or subcounty) adds its score and sets the hierarchy
   bonus to 1.5.
3. combined = (total / N) * bonus * (match_count / N)
4. Sort by match_count, then combined (both descending).
"""
from typing import Any, Dict, List
import logging

from ..config import (
    CHAIN_KEYS,
    RELATED_LEVELS,
    BASE_HIERARCHY_BONUS,
    RELATED_HIERARCHY_BONUS,
    CONFIDENCE_DECIMALS,
)

logger = logging.getLogger(__name__)


def are_related(candidate_a: Dict[str, Any], candidate_b: Dict[str, Any]) -> bool:
    """
    Check whether two candidates share an ancestor id at district, county
    or subcounty level. Symmetric; levels need not align.

    Example:
        >>> are_related({'chain': {'district_id': 'D1', ...}}, {'chain': {'district_id': 'D1', ...}})
        True
    """
    chain_a = candidate_a.get('chain') or {}
    chain_b = candidate_b.get('chain') or {}

    for level in RELATED_LEVELS:
        key = CHAIN_KEYS[level]
        if chain_a.get(key) is not None and chain_a.get(key) == chain_b.get(key):
            return True
    return False


def rank_single_term(candidates: List[Dict[str, Any]], limit: int) -> List[Dict[str, Any]]:
    """
    Sort candidates by score (descending, stable) and truncate.

    Args:
        candidates: Candidates of one term
        limit: Maximum number of results

    Returns:
        At most `limit` candidates
    """
    if limit <= 0:
        return []
    return sorted(candidates, key=lambda c: c['score'], reverse=True)[:limit]


def _score_seed(seed: Dict[str, Any], other_pools: List[List[Dict[str, Any]]], total_terms: int) -> Dict[str, Any]:
    """Combine a seed with the first related candidate of each later pool."""
    match_count = 1
    total_score = seed['score']
    hierarchy_bonus = BASE_HIERARCHY_BONUS

    for pool in other_pools:
        related = next((other for other in pool if are_related(seed, other)), None)
        if related is not None:
            match_count += 1
            total_score += related['score']
            hierarchy_bonus = RELATED_HIERARCHY_BONUS

    avg_score = total_score / total_terms
    combined_score = avg_score * hierarchy_bonus * (match_count / total_terms)

    return {
        'match_count': match_count,
        'hierarchy_bonus': hierarchy_bonus,
        'combined_score': combined_score,
    }


def rank_multi_term(term_pools: List[List[Dict[str, Any]]], limit: int) -> List[Dict[str, Any]]:
    """
    Combine per-term candidate pools into one ranked list.

    Args:
        term_pools: Candidates for each term, in query order (at least 2)
        limit: Maximum number of results

    Returns:
        Ranked results: seed candidate fields (without 'matched_term') plus
        'hierarchy_bonus' and 'match_info' {matched_terms, total_terms, confidence}
    """
    from ..config import DEBUG_RANKING

    if limit <= 0 or not term_pools:
        return []

    total_terms = len(term_pools)
    seeds, other_pools = term_pools[0], term_pools[1:]

    scored = []
    for seed in seeds:
        scoring = _score_seed(seed, other_pools, total_terms)
        scored.append((seed, scoring))

        if DEBUG_RANKING:
            logger.debug(
                f"[RANK] {seed['type']} '{seed['name']}' ({seed['id']}): "
                f"{scoring['match_count']}/{total_terms} terms, "
                f"bonus={scoring['hierarchy_bonus']}, combined={scoring['combined_score']:.3f}"
            )

    scored = sorted(
        scored,
        key=lambda item: (item[1]['match_count'], item[1]['combined_score']),
        reverse=True
    )[:limit]

    results = []
    for seed, scoring in scored:
        result = {key: value for key, value in seed.items() if key != 'matched_term'}
        result['hierarchy_bonus'] = scoring['hierarchy_bonus']
        result['match_info'] = {
            'matched_terms': scoring['match_count'],
            'total_terms': total_terms,
            'confidence': round(scoring['combined_score'], CONFIDENCE_DECIMALS),
        }
        results.append(result)

    return results
