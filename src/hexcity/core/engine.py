"""
Growth engine: the per-tick simulation clock.

Each tick runs, in order:
1. Spawn: one agent at a random edge tile (every ``spawn_rate`` ticks)
2. Agent update: walk + aggregate for every live agent, then drop the dead
3. Evolution: promote eligible tiles (every ``evolve_rate`` ticks)
4. Decay: demote unserved tiles (every ``decay_rate`` ticks)
5. Morph advance: every tile, every tick, even while paused

Evolution and decay collect their decisions over the whole grid before
applying any of them, so results never depend on tile iteration order.
All randomness comes from one seeded ``numpy.random.Generator`` owned by
the engine, drawn in a fixed order, so a seed fully determines the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np

from hexcity.core.agent import Agent
from hexcity.core.config import GrowthConfig
from hexcity.core.hex_grid import HexGrid
from hexcity.core.levels import (
    EVOLUTION,
    MAX_COMPETITORS,
    SERVICE_RANGE,
    TOP_LEVEL,
    CellState,
    Level,
    demoted_level,
)
from hexcity.core.tile import Tile

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    """What happened during one tick."""

    tick: int
    now: float
    spawned: int = 0
    crystallized: int = 0
    promoted: int = 0
    demoted: int = 0
    morphs_completed: int = 0
    evolution_ran: bool = False
    decay_ran: bool = False
    agent_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return dict(self.__dict__)


class GrowthEngine:
    """
    Hex-grid DLA city growth.

    Attributes:
        config: Live tunables; replaced when ``tick`` receives a new config.
        grid: The tile lattice (rebuilt on ``reset``).
        agents: Active (alive) agents.
        rng: The single random stream for every stochastic decision.
        tick_count: Ticks since the last reset.
        clock_ms: Simulation clock used for morph timing.
    """

    def __init__(self, config: GrowthConfig | None = None):
        self.config = config or GrowthConfig()
        self.config.validate()

        self.grid: HexGrid
        self.agents: list[Agent] = []
        self.rng: np.random.Generator
        self.seed: int = self.config.random_seed
        self.tick_count = 0
        self.clock_ms = 0.0
        self.reset(self.config.random_seed)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self, seed: int | None = None) -> None:
        """Rebuild the grid from scratch and seed the centre tile as a HOUSE."""
        cfg = self.config
        self.seed = cfg.random_seed if seed is None else seed
        self.rng = np.random.default_rng(self.seed)
        self.grid = HexGrid(cfg.rows, cfg.cols, cfg.tile_size)
        for tile in self.grid.tiles:
            tile.morph_duration = cfg.morph_duration_ms

        if cfg.random_fill:
            for tile in self.grid.tiles:
                tile.state = CellState(int(self.rng.integers(2)))

        self.agents = []
        self.tick_count = 0
        self.clock_ms = 0.0
        self.seed_center()
        logger.info(
            "Reset %dx%d grid with seed %s", cfg.rows, cfg.cols, self.seed,
        )

    def seed_center(self) -> Tile | None:
        """Crystallize the centre tile so aggregation has something to stick to."""
        center = self.grid.center_tile()
        if center is not None:
            center.crystallize()
        return center

    def run(self, ticks: int | None = None) -> list[TickReport]:
        """Run ``ticks`` ticks (default ``config.ticks_to_run``) with the live config."""
        ticks = self.config.ticks_to_run if ticks is None else ticks
        return [self.tick() for _ in range(ticks)]

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def tick(
        self,
        config: GrowthConfig | None = None,
        now: float | None = None,
    ) -> TickReport:
        """Advance the simulation by one frame.

        Args:
            config: New tunables to apply from this tick on. The seed in it is
                ignored until the next ``reset``.
            now: Clock value in ms for morph timing. Defaults to the internal
                clock advanced by ``config.frame_ms``. Values earlier than the
                current clock are ignored.

        Returns:
            A TickReport summarizing the tick.
        """
        if config is not None:
            config.validate()
            self.config = config
        cfg = self.config

        self.tick_count += 1
        if now is None:
            self.clock_ms += cfg.frame_ms
        else:
            # The clock never runs backwards.
            self.clock_ms = max(self.clock_ms, now)
        report = TickReport(tick=self.tick_count, now=self.clock_ms)

        if not cfg.paused:
            if self.tick_count % cfg.spawn_rate == 0 and len(self.agents) < cfg.max_agents:
                if self.spawn_agent() is not None:
                    report.spawned = 1

            report.crystallized = self.update_agents(
                cfg.sticking_probability, cfg.biased_walk_chance,
            )

            if self.tick_count % cfg.evolve_rate == 0:
                report.evolution_ran = True
                report.promoted = self.evolve_all(cfg.shadow_factor)

            if self.tick_count % cfg.decay_rate == 0:
                report.decay_ran = True
                report.demoted = self.decay_pass(
                    cfg.decay_probability, cfg.decay_grace_tiles,
                )

        report.morphs_completed = self.advance_morphs()
        report.agent_count = len(self.agents)
        return report

    # ------------------------------------------------------------------
    # Agents
    # ------------------------------------------------------------------
    def spawn_agent(self) -> Agent | None:
        """Spawn one agent on a random edge tile.

        The edge tile is drawn first; if it is already crystallized no agent
        is created this time.
        """
        edges = self.grid.edge_tiles()
        if not edges:
            return None
        tile = edges[int(self.rng.integers(len(edges)))]
        if tile.state == CellState.CRYSTALLIZED:
            return None
        agent = Agent(grid=self.grid, tile=tile)
        self.agents.append(agent)
        return agent

    def place_agent(self, q: int, r: int) -> Agent | None:
        """Add an agent at a specific tile. Returns None if out of bounds."""
        tile = self.grid.tile_at(q, r)
        if tile is None:
            return None
        agent = Agent(grid=self.grid, tile=tile)
        self.agents.append(agent)
        return agent

    def update_agents(
        self,
        sticking_probability: float,
        biased_walk_chance: float,
    ) -> int:
        """Step every agent, then drop the dead ones. Returns crystallizations."""
        crystallized = 0
        for agent in self.agents:
            if agent.step(self.rng, sticking_probability, biased_walk_chance):
                crystallized += 1
        self.agents = [a for a in self.agents if a.alive]
        return crystallized

    # ------------------------------------------------------------------
    # Evolution
    # ------------------------------------------------------------------
    def evolve_all(self, shadow_factor: float | None = None) -> int:
        """Begin promotion morphs for every eligible, idle tile.

        Returns:
            Number of tiles that started a promotion.
        """
        if shadow_factor is None:
            shadow_factor = self.config.shadow_factor

        to_evolve = [
            t for t in self.grid.tiles
            if not t.is_morphing and t.can_promote(self.grid, shadow_factor)
        ]
        for tile in to_evolve:
            tile.begin_morph(EVOLUTION[tile.level].next_level, self.clock_ms)

        if to_evolve:
            logger.debug("Tick %d: %d tiles promoting", self.tick_count, len(to_evolve))
        return len(to_evolve)

    # ------------------------------------------------------------------
    # Decay
    # ------------------------------------------------------------------
    def dies_from_competition(self, tile: Tile) -> bool:
        """True if too many same-level tiles sit inside ``tile``'s service range."""
        if tile.level not in MAX_COMPETITORS:
            return False
        competitors = [
            t for t in self.grid.tiles_within_range(tile.q, tile.r, SERVICE_RANGE[tile.level])
            if t is not tile and t.level == tile.level
        ]
        return len(competitors) > MAX_COMPETITORS[tile.level]

    def is_served(self, tile: Tile) -> bool:
        """Whether ``tile`` is sustained by its surroundings.

        Below the top level a tile is served when some other crystallized
        tile of strictly higher level has it inside its service range. The
        top level has nothing above it and is served unless over-competed.
        """
        if tile.level >= TOP_LEVEL:
            return not self.dies_from_competition(tile)

        for other in self.grid.tiles:
            if other is tile or other.state != CellState.CRYSTALLIZED:
                continue
            if other.level <= tile.level:
                continue
            if self.grid.hex_distance(tile, other) <= SERVICE_RANGE[other.level]:
                return True
        return False

    def decay_pass(
        self,
        decay_probability: float | None = None,
        grace_tiles: int | None = None,
    ) -> int:
        """Demote unserved, idle buildings with probability ``decay_probability``.

        Does nothing while fewer than ``grace_tiles`` tiles are non-empty.

        Returns:
            Number of tiles that started a demotion.
        """
        cfg = self.config
        if decay_probability is None:
            decay_probability = cfg.decay_probability
        if grace_tiles is None:
            grace_tiles = cfg.decay_grace_tiles

        occupied = sum(1 for t in self.grid.tiles if t.state != CellState.EMPTY)
        if occupied < grace_tiles:
            logger.debug(
                "Tick %d: decay skipped (%d/%d occupied)",
                self.tick_count, occupied, grace_tiles,
            )
            return 0

        to_demote: list[Tile] = []
        for tile in self.grid.tiles:
            if tile.state != CellState.CRYSTALLIZED or tile.is_morphing:
                continue
            if not self.is_served(tile) and self.rng.random() < decay_probability:
                to_demote.append(tile)

        for tile in to_demote:
            tile.begin_morph(demoted_level(tile.level), self.clock_ms)

        if to_demote:
            logger.debug("Tick %d: %d tiles decaying", self.tick_count, len(to_demote))
        return len(to_demote)

    # ------------------------------------------------------------------
    # Morphing
    # ------------------------------------------------------------------
    def advance_morphs(self) -> int:
        """Advance every tile's morph to the current clock. Returns completions."""
        return sum(1 for t in self.grid.tiles if t.advance_morph(self.clock_ms))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def tiles(self) -> list[Tile]:
        return self.grid.tiles

    def agent_positions(self) -> list[tuple[int, int]]:
        """Current ``(q, r)`` of every active agent."""
        return [a.coords for a in self.agents]

    def snapshot(self) -> list[tuple[int, int, int, int, int, float]]:
        """Compact per-tile state: (q, r, state, level, target_level, morph_progress)."""
        return [
            (t.q, t.r, int(t.state), int(t.level), int(t.target_level), t.morph_progress)
            for t in self.grid.tiles
        ]

    def level_counts(self) -> dict[str, int]:
        """Crystallized tiles per level name (HOUSE..FACTORY)."""
        counts = {lvl.name.lower(): 0 for lvl in Level if lvl != Level.EMPTY}
        for t in self.grid.tiles:
            if t.state == CellState.CRYSTALLIZED and t.level != Level.EMPTY:
                counts[t.level.name.lower()] += 1
        return counts

    def stats(self) -> dict[str, Any]:
        """Headline numbers for a status line."""
        return {
            "tick": self.tick_count,
            "agents": len(self.agents),
            "buildings": sum(1 for t in self.grid.tiles if t.state == CellState.CRYSTALLIZED),
            "candidates": sum(1 for t in self.grid.tiles if t.state == CellState.CANDIDATE),
            "morphing": sum(1 for t in self.grid.tiles if t.is_morphing),
            "levels": self.level_counts(),
        }
