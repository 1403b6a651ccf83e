"""
Utility modules for administrative unit search.
"""
from .text_utils import normalize_name, normalize_unicode

from .matching_utils import (
    dissimilarity,
    similarity,
    rank_matches,
    levenshtein_normalized,
)

__all__ = [
    # Text utilities
    'normalize_name',
    'normalize_unicode',
    # Matching utilities
    'dissimilarity',
    'similarity',
    'rank_matches',
    'levenshtein_normalized',
]
