"""
Random-walking agents that drive diffusion-limited aggregation.

Each agent occupies one tile at a time. Per step it walks (biased toward
well-served tiles with probability ``biased_walk_chance``) and then tries
to aggregate: if it touches a crystallized neighbor its tile becomes a
CANDIDATE, and with the sticking probability it crystallizes into a HOUSE,
which kills the agent.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from hexcity.core.hex_grid import HexGrid
from hexcity.core.levels import SERVICE_RANGE, CellState, Level
from hexcity.core.tile import Tile


@dataclass(eq=False)
class Agent:
    """A single walker on the grid.

    Attributes:
        grid: The grid the agent walks on (never mutated structurally).
        tile: Tile the agent currently stands on.
        alive: False once the agent has crystallized; dead agents are inert.
    """

    grid: HexGrid
    tile: Tile
    alive: bool = True

    @property
    def coords(self) -> tuple[int, int]:
        return self.tile.coords

    def step(
        self,
        rng: np.random.Generator,
        sticking_probability: float,
        biased_walk_chance: float,
    ) -> bool:
        """Walk, then attempt to aggregate. Returns True if it crystallized."""
        if not self.alive:
            return False
        self.walk(rng, biased_walk_chance)
        return self.aggregate(rng, sticking_probability)

    # ---- Movement ----

    def service_score(self, tile: Tile) -> float:
        """How well ``tile`` is served by existing buildings.

        Each crystallized building within its service range contributes
        ``range - distance + 1``. With no building in reach, falls back to
        inverse distance to the grid centre so an empty board still drifts
        toward the seed.
        """
        score = 0
        for other in self.grid.tiles:
            if other.state != CellState.CRYSTALLIZED or other.level < Level.HOUSE:
                continue
            dist = self.grid.hex_distance(tile, other)
            reach = SERVICE_RANGE[other.level]
            if dist <= reach:
                score += reach - dist + 1

        if score == 0:
            center = self.grid.center_tile()
            if center is None:
                return 0.0
            dist = self.grid.hex_distance(tile, center)
            if dist == 0:
                return float("inf")
            return 1.0 / dist
        return float(score)

    def walk(self, rng: np.random.Generator, biased_walk_chance: float) -> None:
        """Move to one adjacent tile; stay put if there are none."""
        if not self.alive:
            return

        neighbors = self.grid.neighbors_of(self.tile.q, self.tile.r)
        if not neighbors:
            return

        if rng.random() < biased_walk_chance:
            # max() keeps the first neighbor on ties.
            self.tile = max(neighbors, key=self.service_score)
        else:
            self.tile = neighbors[int(rng.integers(len(neighbors)))]

    # ---- Aggregation ----

    def could_be_candidate(self) -> bool:
        """True if any neighbor of the current tile is crystallized."""
        return any(
            n.state == CellState.CRYSTALLIZED
            for n in self.grid.neighbors_of(self.tile.q, self.tile.r)
        )

    def aggregate(self, rng: np.random.Generator, sticking_probability: float) -> bool:
        """Try to stick to the structure at the current tile.

        Returns:
            True if the tile crystallized this call (the agent is now dead).
        """
        if not self.alive:
            return False
        if self.tile.state == CellState.CRYSTALLIZED:
            return False
        if not self.could_be_candidate():
            return False

        self.tile.state = CellState.CANDIDATE
        if rng.random() < sticking_probability:
            self.tile.crystallize()
            self.alive = False
            return True
        return False
