"""
Configuration settings for administrative unit search.
"""
import os
from pathlib import Path


# Base paths
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = Path(os.environ.get('ADMIN_SEARCH_DATA_DIR', BASE_DIR / 'data'))

# Database (optional alternative to the JSON files)
DB_PATH = DATA_DIR / 'admin_units.db'

# Administrative levels, broadest first (L1 → L5)
LEVELS = ('district', 'county', 'subcounty', 'parish', 'village')

# Field in each reference row that points at the parent unit
PARENT_FIELDS = {
    'district': None,
    'county': 'district',
    'subcounty': 'county',
    'parish': 'subcounty',
    'village': 'parish',
}

# Reference data files / sqlite tables per level
DATA_FILES = {
    'district': 'districts.json',
    'county': 'counties.json',
    'subcounty': 'sub_counties.json',
    'parish': 'parishes.json',
    'village': 'villages.json',
}
DATA_TABLES = {
    'district': 'districts',
    'county': 'counties',
    'subcounty': 'sub_counties',
    'parish': 'parishes',
    'village': 'villages',
}

# Chain keys (one per level, always all present in a hierarchy chain)
CHAIN_KEYS = {level: f"{level}_id" for level in LEVELS}

# Two candidates are related when they share an ancestor at one of these levels
RELATED_LEVELS = ('district', 'county', 'subcounty')

# Fuzzy matching (0.0 = identical, 1.0 = completely dissimilar)
FUZZY_THRESHOLD = 0.4          # Accept only dissimilarity strictly below this
MIN_MATCH_CHAR_LENGTH = 2      # Shorter terms never match
FUZZY_DISTANCE = 100           # Search window (chars past the term length) for partial alignment
IGNORE_LOCATION = True         # Where the match occurs inside the name does not matter

# Result sizes
DEFAULT_LIMIT = 100
MULTI_TERM_POOL_LIMIT = 30     # Per-level hits fetched for each term of a multi-term query

# Multi-term ranking
BASE_HIERARCHY_BONUS = 1.0
RELATED_HIERARCHY_BONUS = 1.5  # Applied once any later term matches a related unit
CONFIDENCE_DECIMALS = 3

# Query parsing: comma, semicolon, standalone "in" / "at"
QUERY_SEPARATOR_PATTERN = r'[,;]|\s+in\s+|\s+at\s+'

# Cache settings
CACHE_MAX_SIZE = 10000

# Debug logging flags
# Format: True/False or 'OFF'/'WINNERS'/'FULL'
DEBUG_FUZZY = 'OFF'     # OFF | WINNERS (only log accepted hits) | FULL (every comparison)
DEBUG_RANKING = False   # Log per-seed scoring in multi-term ranking
