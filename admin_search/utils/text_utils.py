"""
Text processing utilities for query terms and unit names.
"""
import re
import unicodedata
from functools import lru_cache

from ..config import CACHE_MAX_SIZE


# Precompiled regex patterns for performance
WHITESPACE_PATTERN = re.compile(r'\s+')


@lru_cache(maxsize=CACHE_MAX_SIZE)
def normalize_unicode(text: str) -> str:
    """
    Normalize Unicode to NFC form.

    Args:
        text: Input text

    Returns:
        Normalized text
    """
    if not text:
        return text

    return unicodedata.normalize('NFC', text)


@lru_cache(maxsize=CACHE_MAX_SIZE)
def normalize_name(text: str) -> str:
    """
    Normalize a unit name or query term for case-insensitive comparison.

    Steps: NFC normalization, lowercase, collapse whitespace, trim.

    Args:
        text: Raw name or term

    Returns:
        Normalized text ('' for empty input)

    Example:
        >>> normalize_name("  Kampala   Central ")
        'kampala central'
    """
    if not text:
        return ''

    text = normalize_unicode(text).lower()
    return WHITESPACE_PATTERN.sub(' ', text).strip()


def clear_cache():
    """Clear text normalization caches."""
    normalize_unicode.cache_clear()
    normalize_name.cache_clear()
