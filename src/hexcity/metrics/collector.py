"""
Metrics Collector — per-tick statistics for a growth run.

Combines the engine's TickReport with a scan of the grid (building counts
per level, candidates, mean level) and provides time series extraction and
export for plotting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from hexcity.core.config import GrowthConfig
from hexcity.core.engine import GrowthEngine, TickReport
from hexcity.core.levels import CellState, Level


@dataclass
class TickMetrics:
    """Metrics for a single tick."""

    tick: int
    agent_count: int

    # Events from the tick report
    spawned: int
    crystallized: int
    promoted: int
    demoted: int
    morphs_completed: int

    # Grid occupancy
    building_count: int
    candidate_count: int
    morphing_count: int
    level_counts: dict[str, int]
    level_fractions: dict[str, float]
    mean_level: float
    max_level: int

    # Spatial spread: mean hex distance of buildings from the centre tile
    mean_radius: float = 0.0
    events: dict[str, Any] = field(default_factory=dict)


class MetricsCollector:
    """
    Collects metrics across ticks.

    Works alongside GrowthEngine; call ``collect`` after each ``tick``.
    """

    def __init__(self, config: GrowthConfig | None = None):
        self.config = config
        self.metrics_history: list[TickMetrics] = []

    def collect(self, engine: GrowthEngine, report: TickReport) -> TickMetrics:
        """Collect metrics for the tick just reported."""
        grid = engine.grid
        buildings = [
            t for t in grid.tiles
            if t.state == CellState.CRYSTALLIZED and t.level != Level.EMPTY
        ]
        level_counts = engine.level_counts()
        total = max(len(buildings), 1)
        level_fractions = {name: count / total for name, count in level_counts.items()}

        levels = np.array([int(t.level) for t in buildings], dtype=float)
        mean_level = float(levels.mean()) if levels.size else 0.0
        max_level = int(levels.max()) if levels.size else 0

        mean_radius = 0.0
        center = grid.center_tile()
        if buildings and center is not None:
            mean_radius = float(np.mean([grid.hex_distance(center, t) for t in buildings]))

        metrics = TickMetrics(
            tick=report.tick,
            agent_count=report.agent_count,
            spawned=report.spawned,
            crystallized=report.crystallized,
            promoted=report.promoted,
            demoted=report.demoted,
            morphs_completed=report.morphs_completed,
            building_count=len(buildings),
            candidate_count=sum(1 for t in grid.tiles if t.state == CellState.CANDIDATE),
            morphing_count=sum(1 for t in grid.tiles if t.is_morphing),
            level_counts=level_counts,
            level_fractions=level_fractions,
            mean_level=mean_level,
            max_level=max_level,
            mean_radius=mean_radius,
            events=report.to_dict(),
        )
        self.metrics_history.append(metrics)
        return metrics

    def get_time_series(self, field_name: str) -> list[Any]:
        """Extract a single metric across all collected ticks."""
        return [getattr(m, field_name) for m in self.metrics_history]

    def get_level_series(self, level_name: str) -> list[int]:
        """Building count for one level (e.g. ``"shop"``) across ticks."""
        return [m.level_counts.get(level_name, 0) for m in self.metrics_history]

    def export_for_visualization(self) -> list[dict[str, Any]]:
        """Flatten collected metrics into JSON-friendly dicts."""
        result: list[dict[str, Any]] = []
        for m in self.metrics_history:
            result.append({
                "tick": m.tick,
                "agent_count": m.agent_count,
                "building_count": m.building_count,
                "candidate_count": m.candidate_count,
                "morphing_count": m.morphing_count,
                "promoted": m.promoted,
                "demoted": m.demoted,
                "crystallized": m.crystallized,
                "level_counts": dict(m.level_counts),
                "level_fractions": dict(m.level_fractions),
                "mean_level": m.mean_level,
                "max_level": m.max_level,
                "mean_radius": m.mean_radius,
            })
        return result
