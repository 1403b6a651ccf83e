"""
Search processors: query parsing → term matching → ranking
"""
from . import query_parser
from . import term_matcher
from . import ranking

__all__ = [
    'query_parser',
    'term_matcher',
    'ranking',
]
