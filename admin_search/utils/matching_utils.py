"""
Matching utilities for approximate name matching.

The scoring strategy is a plain function of (term, name) so it can be
swapped or tested independently of the per-level index:

- dissimilarity(): 0.0 = identical, 1.0 = completely dissimilar
- similarity(): 1 - dissimilarity
- rank_matches(): term vs. a list of names → accepted hits, best first
"""
from typing import Callable, List, Optional, Sequence, Tuple
import logging
import Levenshtein
from rapidfuzz import fuzz

from ..config import (
    FUZZY_THRESHOLD,
    MIN_MATCH_CHAR_LENGTH,
    FUZZY_DISTANCE,
    IGNORE_LOCATION,
)
from .text_utils import normalize_name
from . import text_utils

logger = logging.getLogger(__name__)


# === Core String Dissimilarity ===

def levenshtein_normalized(s1: str, s2: str) -> float:
    """
    Calculate normalized Levenshtein distance (0-1 scale).
    0.0 = identical, 1.0 = completely different.

    Args:
        s1: First string (already normalized)
        s2: Second string (already normalized)

    Returns:
        Edit distance divided by the longer length

    Example:
        >>> levenshtein_normalized("kampla", "kampala")
        0.142857...  # 1 insertion / 7 chars
    """
    if s1 == s2:
        return 0.0
    if not s1 or not s2:
        return 1.0

    distance = Levenshtein.distance(s1, s2)
    return distance / max(len(s1), len(s2))


def partial_dissimilarity(term: str, name: str, distance: int = FUZZY_DISTANCE) -> float:
    """
    Edit distance of the term against its best-aligned window inside name.

    rapidfuzz locates the window; the score is Levenshtein distance to that
    window divided by the term length. Only the first (len(term) + distance)
    characters of name are searched.

    Args:
        term: Normalized query term
        name: Normalized unit name
        distance: Search window past the term length

    Returns:
        0.0-1.0 dissimilarity (1.0 unless term is shorter than name)

    Example:
        >>> partial_dissimilarity("nakawo", "nakawa division")
        0.1666...  # 1 substitution / 6 chars
    """
    if not term or len(term) >= len(name):
        return 1.0

    searched = name[:len(term) + distance]
    alignment = fuzz.partial_ratio_alignment(term, searched)
    if alignment is None:
        return 1.0

    window = searched[alignment.dest_start:alignment.dest_end]
    return min(1.0, Levenshtein.distance(term, window) / len(term))


def dissimilarity(term: str, name: str, ignore_location: bool = IGNORE_LOCATION) -> float:
    """
    Calculate case-insensitive dissimilarity between a term and a name.

    Whole-string edit distance, or (when location is ignored and the term
    is shorter than the name) the edit distance to the best-aligned window,
    whichever is lower.

    Args:
        term: Query term
        name: Unit display name
        ignore_location: Allow the term to match anywhere inside the name

    Returns:
        Dissimilarity (0.0-1.0)

    Example:
        >>> dissimilarity("Kampala", "KAMPALA")
        0.0
        >>> dissimilarity("Kampla", "Kampala")
        0.142857...
    """
    term_norm = normalize_name(term)
    name_norm = normalize_name(name)

    if not term_norm or not name_norm:
        return 1.0

    score = levenshtein_normalized(term_norm, name_norm)
    if ignore_location and score > 0.0:
        score = min(score, partial_dissimilarity(term_norm, name_norm))

    return score


def similarity(term: str, name: str) -> float:
    """Similarity score: 1 - dissimilarity."""
    return 1.0 - dissimilarity(term, name)


def rank_matches(
    term: str,
    names: Sequence[str],
    threshold: float = FUZZY_THRESHOLD,
    min_match_char_length: int = MIN_MATCH_CHAR_LENGTH,
    limit: Optional[int] = None,
    scorer: Callable[[str, str], float] = dissimilarity,
    log: bool = True
) -> List[Tuple[int, float]]:
    """
    Match a term against a list of names.

    Args:
        term: Query term
        names: Candidate names (position = collection order)
        threshold: Accept only dissimilarity strictly below this
        min_match_char_length: Terms shorter than this never match
        limit: Maximum hits to return (None = all)
        scorer: Dissimilarity function (term, name) -> 0.0-1.0
        log: Allow debug logging (controlled by DEBUG_FUZZY)

    Returns:
        List of (position, similarity) tuples, best first.
        Equal similarities keep collection order.

    Example:
        >>> rank_matches("kampla", ["Gulu", "Kampala"])
        [(1, 0.857...)]  # 1 - 1/7
    """
    from ..config import DEBUG_FUZZY

    if limit is not None and limit <= 0:
        return []

    term_norm = normalize_name(term)
    if len(term_norm) < min_match_char_length:
        return []

    log_all = log and DEBUG_FUZZY in [True, 'FULL']
    log_winners = log and DEBUG_FUZZY in [True, 'FULL', 'WINNERS']

    hits = []
    for position, name in enumerate(names):
        score = scorer(term_norm, name)
        if log_all:
            logger.debug(f"[FUZZY] '{term_norm}' vs '{name}' → {score:.3f}")
        if score < threshold:
            hits.append((position, 1.0 - score))

    # sorted() is stable, so ties stay in collection order
    hits = sorted(hits, key=lambda hit: hit[1], reverse=True)
    if limit is not None:
        hits = hits[:limit]

    if log_winners and hits:
        best_position, best_score = hits[0]
        logger.debug(
            f"[FUZZY] '{term_norm}' → {len(hits)} hits, best '{names[best_position]}' ({best_score:.3f})"
        )

    return hits


def clear_cache():
    """Clear the name normalization caches to free memory."""
    text_utils.clear_cache()


def get_cache_stats() -> dict:
    """
    Get statistics about cache usage.

    Returns:
        Dictionary with cache statistics
    """
    return {
        'normalize_name': normalize_name.cache_info()._asdict(),
        'normalize_unicode': text_utils.normalize_unicode.cache_info()._asdict(),
    }
