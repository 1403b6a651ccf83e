"""
Reference data utilities.
Loads the five administrative collections from JSON files, a SQLite
database, or in-memory records, and normalizes every row to

    {'id': str, 'name': str, 'level': str, 'parent_id': str | None}
"""
import json
import sqlite3
import time
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
from contextlib import contextmanager

from ..config import LEVELS, PARENT_FIELDS, DATA_FILES, DATA_TABLES, DATA_DIR, DB_PATH

logger = logging.getLogger(__name__)


def normalize_row(level: str, row: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Convert a raw reference row into a unit record.

    The parent id is read from the level's parent field (e.g. 'district'
    for counties) or from 'parent_id'.

    Args:
        level: Level key
        row: Raw row

    Returns:
        Unit dict, or None if the row has no id or no name

    Example:
        >>> normalize_row('county', {'id': 7, 'name': 'Nakawa', 'district': 1})
        {'id': '7', 'name': 'Nakawa', 'level': 'county', 'parent_id': '1'}
    """
    unit_id = row.get('id')
    name = row.get('name')
    if unit_id is None or unit_id == '' or not name:
        return None

    parent_id = None
    parent_field = PARENT_FIELDS[level]
    if parent_field:
        parent_id = row.get(parent_field, row.get('parent_id'))
        if parent_id is not None:
            parent_id = str(parent_id)

    return {
        'id': str(unit_id),
        'name': str(name),
        'level': level,
        'parent_id': parent_id,
    }


def load_from_records(records: Dict[str, Iterable[Dict[str, Any]]]) -> Dict[str, List[Dict[str, Any]]]:
    """
    Normalize in-memory collections.

    Args:
        records: {level: [raw row, ...]}; missing levels are treated as empty

    Returns:
        {level: [unit, ...]} for every level, in input order
    """
    units_by_level = {}

    for level in LEVELS:
        units = []
        skipped = 0
        for row in records.get(level) or ():
            unit = normalize_row(level, row)
            if unit is None:
                skipped += 1
                continue
            units.append(unit)

        if skipped:
            logger.warning(f"Skipped {skipped} {level} rows without id or name")
        units_by_level[level] = units

    return units_by_level


def load_from_json(data_dir: Path = DATA_DIR) -> Dict[str, List[Dict[str, Any]]]:
    """
    Load collections from JSON files (one array per level).

    Args:
        data_dir: Directory holding districts.json, counties.json, ...

    Returns:
        {level: [unit, ...]}

    Raises:
        FileNotFoundError: if a data file is missing
    """
    start_time = time.time()
    data_dir = Path(data_dir)

    records = {}
    for level in LEVELS:
        path = data_dir / DATA_FILES[level]
        with open(path, 'r', encoding='utf-8') as f:
            records[level] = json.load(f)

    units_by_level = load_from_records(records)

    elapsed_ms = (time.time() - start_time) * 1000
    logger.info(f"Loaded reference data from {data_dir} in {elapsed_ms:.1f}ms")
    return units_by_level


@contextmanager
def get_db_connection(db_path: Path = DB_PATH):
    """
    Context manager for read-only database connections.

    Args:
        db_path: Path to SQLite database file

    Yields:
        sqlite3.Connection object
    """
    db_path = Path(db_path)
    if not db_path.exists():
        raise FileNotFoundError(f"Database not found: {db_path}")

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row  # Enable column access by name
    try:
        yield conn
    finally:
        conn.close()


def query_all(conn: sqlite3.Connection, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
    """
    Execute query and return all rows as list of dictionaries.

    Example:
        >>> query_all(conn, "SELECT id, name FROM districts")
        [{'id': 'D1', 'name': 'Kampala'}, ...]
    """
    cursor = conn.cursor()
    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def load_from_sqlite(db_path: Path = DB_PATH) -> Dict[str, List[Dict[str, Any]]]:
    """
    Load collections from a SQLite database (one table per level).

    Each table has columns id, name and (below the top level) the parent
    field named after the parent level. Rows keep rowid order.

    Args:
        db_path: Path to SQLite database file

    Returns:
        {level: [unit, ...]}
    """
    start_time = time.time()

    records = {}
    with get_db_connection(db_path) as conn:
        for level in LEVELS:
            columns = ['id', 'name']
            if PARENT_FIELDS[level]:
                columns.append(PARENT_FIELDS[level])
            query = f"SELECT {', '.join(columns)} FROM {DATA_TABLES[level]} ORDER BY rowid"
            records[level] = query_all(conn, query)
            logger.debug(f"[SQL] {query} → {len(records[level])} rows")

    units_by_level = load_from_records(records)

    elapsed_ms = (time.time() - start_time) * 1000
    logger.info(f"Loaded reference data from {db_path} in {elapsed_ms:.1f}ms")
    return units_by_level
