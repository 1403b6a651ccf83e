"""
Query parsing: split a raw query into independent location terms.

Input: "Nakawa in Kampala"
Output: ['Nakawa', 'Kampala']

Separators: comma, semicolon, and the standalone words "in" / "at"
(case-insensitive, surrounded by whitespace). Order is kept: the first
term is the unit being searched for, later terms qualify it.
"""
from typing import List
import re
import logging

from ..config import QUERY_SEPARATOR_PATTERN

logger = logging.getLogger(__name__)

SEPARATOR_PATTERN = re.compile(QUERY_SEPARATOR_PATTERN, re.IGNORECASE)


def parse_query(query: str) -> List[str]:
    """
    Split a query into trimmed, non-empty terms.

    Args:
        query: Raw query string

    Returns:
        Ordered list of terms (empty for empty/whitespace-only input)

    Example:
        >>> parse_query("Nakawa, Kampala")
        ['Nakawa', 'Kampala']
        >>> parse_query("Mukono at Central; Kampala")
        ['Mukono', 'Central', 'Kampala']
        >>> parse_query("Kinawataka")
        ['Kinawataka']
    """
    if not query or not isinstance(query, str):
        return []

    terms = [term.strip() for term in SEPARATOR_PATTERN.split(query)]
    terms = [term for term in terms if term]

    logger.debug(f"[PARSE] '{query}' → {terms}")
    return terms
