"""
Cell states, building levels and the static rule tables.

The level ladder follows the urban-structure CA model: an aggregated cell
starts as a HOUSE and may be promoted SHOP -> TOWER -> FACTORY when enough
lower-level neighbors support it, or demoted when nothing serves it.
These tables are read-only at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class CellState(IntEnum):
    """DLA state space for a single cell."""

    EMPTY = 0
    CANDIDATE = 1
    CRYSTALLIZED = 2


class Level(IntEnum):
    """Ordinal building levels. Higher value = higher-order entity."""

    EMPTY = 0
    HOUSE = 1
    SHOP = 2
    TOWER = 3
    FACTORY = 4


@dataclass(frozen=True)
class EvolutionRule:
    """Promotion rule: how many supporting neighbors, and what comes next."""

    threshold: int
    next_level: Level


# Promotion rules per level. FACTORY is the top of the ladder.
EVOLUTION: dict[Level, EvolutionRule | None] = {
    Level.HOUSE: EvolutionRule(threshold=2, next_level=Level.SHOP),
    Level.SHOP: EvolutionRule(threshold=3, next_level=Level.TOWER),
    Level.TOWER: EvolutionRule(threshold=4, next_level=Level.FACTORY),
    Level.FACTORY: None,
}

# Hex-distance radius within which an entity sustains lower levels.
SERVICE_RANGE: dict[Level, int] = {
    Level.EMPTY: 0,
    Level.HOUSE: 1,
    Level.SHOP: 2,
    Level.TOWER: 3,
    Level.FACTORY: 4,
}

# Same-level entities tolerated inside a tile's own service range.
MAX_COMPETITORS: dict[Level, int] = {
    Level.HOUSE: 4,
    Level.SHOP: 2,
    Level.TOWER: 1,
    Level.FACTORY: 0,
}

LEVEL_NAMES: dict[Level, str] = {
    Level.EMPTY: "Empty",
    Level.HOUSE: "House",
    Level.SHOP: "Shop",
    Level.TOWER: "Tower",
    Level.FACTORY: "Factory",
}

STATE_NAMES: dict[CellState, str] = {
    CellState.EMPTY: "Empty",
    CellState.CANDIDATE: "Candidate",
    CellState.CRYSTALLIZED: "Crystallized",
}

# Lowest level an aggregating agent can produce.
BASE_LEVEL = Level.HOUSE
TOP_LEVEL = Level.FACTORY


def demoted_level(level: int) -> Level:
    """Level reached by a single demotion; HOUSE falls back to EMPTY."""
    lower = int(level) - 1
    if lower < BASE_LEVEL:
        return Level.EMPTY
    return Level(lower)
