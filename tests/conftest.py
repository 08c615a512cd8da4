"""
Shared test configuration.

Provides small grids and engines so individual tests stay fast, and a
helper for building hand-placed tile layouts.
"""

import pytest

from hexcity.core.config import GrowthConfig
from hexcity.core.engine import GrowthEngine
from hexcity.core.hex_grid import HexGrid
from hexcity.core.levels import CellState, Level


def place(grid: HexGrid, q: int, r: int, level: Level = Level.HOUSE):
    """Crystallize the tile at (q, r) with the given level."""
    tile = grid.tile_at(q, r)
    tile.state = CellState.CRYSTALLIZED
    tile.level = level
    tile.target_level = level
    return tile


@pytest.fixture
def small_grid() -> HexGrid:
    return HexGrid(5, 5)


@pytest.fixture
def small_config() -> GrowthConfig:
    return GrowthConfig(rows=5, cols=5, random_seed=7)


@pytest.fixture
def small_engine(small_config) -> GrowthEngine:
    return GrowthEngine(small_config)
