"""
Configuration for the city growth simulation.

ALL tunable parameters live here and are passed explicitly into the engine;
nothing in the simulation reads ambient global state.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from hexcity.core.tile import DEFAULT_MORPH_DURATION_MS


@dataclass
class GrowthConfig:
    """
    Tunable parameters for one growth run.

    Cadences (``spawn_rate``, ``evolve_rate``, ``decay_rate``) are tick
    periods: a pass runs on ticks where ``tick % rate == 0``.
    ``random_seed`` is only consulted by ``GrowthEngine.reset``.
    Use ``to_dict()`` / ``from_dict()`` for serialization and comparison.
    """

    # === Experiment identity ===
    experiment_name: str = "default"
    random_seed: int = 42

    # === Grid ===
    rows: int = 41
    cols: int = 41
    tile_size: float = 8.4375
    random_fill: bool = False  # scatter EMPTY/CANDIDATE states on reset

    # === Agents (diffusion) ===
    spawn_rate: int = 2
    max_agents: int = 50
    sticking_probability: float = 0.7
    biased_walk_chance: float = 0.3

    # === Evolution ===
    evolve_rate: int = 15
    shadow_factor: float = 0.5

    # === Decay ===
    decay_rate: int = 20
    decay_probability: float = 0.505
    decay_grace_tiles: int = 10  # decay waits until this many tiles are non-empty

    # === Clock ===
    paused: bool = False
    frame_ms: float = 1000.0 / 60.0
    morph_duration_ms: float = DEFAULT_MORPH_DURATION_MS
    ticks_to_run: int = 600

    def validate(self) -> None:
        """Raise ValueError if any parameter is out of its valid range."""
        for name in ("rows", "cols", "spawn_rate", "evolve_rate", "decay_rate"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")
        for name in ("sticking_probability", "biased_walk_chance", "decay_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if self.max_agents < 0:
            raise ValueError(f"max_agents must be >= 0, got {self.max_agents}")
        if self.shadow_factor < 0:
            raise ValueError(f"shadow_factor must be >= 0, got {self.shadow_factor}")
        if self.tile_size <= 0 or self.morph_duration_ms <= 0:
            raise ValueError("tile_size and morph_duration_ms must be positive")
        if self.frame_ms < 0:
            raise ValueError(f"frame_ms must be >= 0, got {self.frame_ms}")

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> GrowthConfig:
        """Deserialize from a dict."""
        return cls(**{k: v for k, v in d.items() if not k.startswith("_")})

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    @classmethod
    def from_json(cls, s: str) -> GrowthConfig:
        return cls.from_dict(json.loads(s))

    def replace(self, **overrides: Any) -> GrowthConfig:
        """Return a copy with some parameters changed."""
        d = self.to_dict()
        d.update(overrides)
        return GrowthConfig.from_dict(d)

    def diff(self, other: GrowthConfig) -> dict[str, tuple[Any, Any]]:
        """Return parameters that differ between two configs."""
        diffs: dict[str, tuple[Any, Any]] = {}
        for k in self.to_dict():
            v1 = getattr(self, k)
            v2 = getattr(other, k)
            if v1 != v2:
                diffs[k] = (v1, v2)
        return diffs
