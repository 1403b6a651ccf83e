"""
Fuzzy search over a five-level administrative hierarchy
(district → county → subcounty → parish → village).
"""
from .pipeline import AdminSearchEngine, search, exact_search
from .search_context import SearchContext, build_context
from .processors.query_parser import parse_query
from .processors.ranking import are_related
from .utils.data_utils import load_from_json, load_from_sqlite, load_from_records

__all__ = [
    'AdminSearchEngine',
    'search',
    'exact_search',
    'SearchContext',
    'build_context',
    'parse_query',
    'are_related',
    'load_from_json',
    'load_from_sqlite',
    'load_from_records',
]
