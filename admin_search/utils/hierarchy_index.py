"""
Hierarchy Index

Parent-lookup maps over the five administrative levels. Built once from
the reference collections; answers id → unit and id → ancestor chain.

A chain is a fixed-shape dict with one id slot per level:

    {'district_id': 'D1', 'county_id': 'C1', 'subcounty_id': None,
     'parish_id': None, 'village_id': None}

Walking stops at the first parent id that does not resolve, so chains
for malformed data are partial, never fabricated.
"""
from typing import Any, Dict, Iterable, Optional, Tuple
import logging

from ..config import LEVELS, CHAIN_KEYS

logger = logging.getLogger(__name__)


def empty_chain() -> Dict[str, Optional[str]]:
    """Return a chain with every level slot set to None."""
    return {CHAIN_KEYS[level]: None for level in LEVELS}


def parent_level(level: str) -> Optional[str]:
    """
    Level directly above the given one.

    Example:
        >>> parent_level('county')
        'district'
        >>> parent_level('district') is None
        True
    """
    if level not in LEVELS:
        return None
    position = LEVELS.index(level)
    return LEVELS[position - 1] if position > 0 else None


class HierarchyIndex:
    """
    Read-only id → unit maps for all levels.

    Construction is linear in the total number of units; chain lookups
    follow at most four parent links.
    """

    def __init__(self, units_by_level: Dict[str, Iterable[Dict[str, Any]]]):
        """
        Build lookup maps.

        Args:
            units_by_level: {level: [unit, ...]}, units carrying
                'id', 'name', 'level' and 'parent_id'
        """
        self._maps: Dict[str, Dict[str, Dict[str, Any]]] = {}

        for level in LEVELS:
            level_map = {}
            for unit in units_by_level.get(level, ()):
                if unit['id'] in level_map:
                    logger.warning(f"Duplicate {level} id '{unit['id']}', keeping first occurrence")
                    continue
                level_map[unit['id']] = unit
            self._maps[level] = level_map

        logger.debug(
            "Hierarchy index built: "
            + ", ".join(f"{level}={len(self._maps[level])}" for level in LEVELS)
        )

    def get_unit(self, level: str, unit_id: str) -> Optional[Dict[str, Any]]:
        """Resolve a unit by level and id (None if unknown)."""
        level_map = self._maps.get(level)
        if level_map is None or unit_id is None:
            return None
        return level_map.get(unit_id)

    def parent_id(self, level: str, unit_id: str) -> Optional[str]:
        """Parent id as recorded on the unit (may be dangling)."""
        unit = self.get_unit(level, unit_id)
        return unit.get('parent_id') if unit else None

    def _walk(self, level: str, unit_id: str) -> Iterable[Tuple[str, Dict[str, Any]]]:
        """Yield (level, unit) from the unit up to the first unresolved link."""
        unit = self.get_unit(level, unit_id)
        while unit is not None:
            yield level, unit
            level = parent_level(level)
            if level is None:
                return
            unit = self.get_unit(level, unit.get('parent_id'))

    def chain_of(self, level: str, unit_id: str) -> Dict[str, Optional[str]]:
        """
        Full ancestor id chain of a unit, including its own id.

        Args:
            level: Level key of the unit
            unit_id: Unit id

        Returns:
            Chain dict; all None for an unknown unit, partial when a parent
            reference dangles.

        Example:
            >>> index.chain_of('county', 'C1')
            {'district_id': 'D1', 'county_id': 'C1', 'subcounty_id': None, ...}
        """
        chain = empty_chain()
        for chain_level, unit in self._walk(level, unit_id):
            chain[CHAIN_KEYS[chain_level]] = unit['id']
        return chain

    def hierarchy_names(self, level: str, unit_id: str) -> Dict[str, str]:
        """
        Display names of a unit and its resolvable ancestors, keyed by level.

        Example:
            >>> index.hierarchy_names('county', 'C1')
            {'county': 'Nakawa', 'district': 'Kampala'}
        """
        return {chain_level: unit['name'] for chain_level, unit in self._walk(level, unit_id)}
