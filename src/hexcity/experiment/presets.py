"""
Growth presets — pre-configured parameter sets.

Each preset returns a GrowthConfig tuned to produce a recognizably
different city shape.
"""

from __future__ import annotations

from typing import Callable

from hexcity.core.config import GrowthConfig


def baseline() -> GrowthConfig:
    """Default parameters."""
    return GrowthConfig(experiment_name="baseline")


def dense_core() -> GrowthConfig:
    """Sticky agents that strongly prefer served tiles — compact downtown."""
    return GrowthConfig(
        experiment_name="dense_core",
        sticking_probability=1.0,
        biased_walk_chance=0.8,
        max_agents=100,
    )


def sprawl() -> GrowthConfig:
    """Pure random walk with low sticking — thin dendritic growth."""
    return GrowthConfig(
        experiment_name="sprawl",
        sticking_probability=0.3,
        biased_walk_chance=0.0,
        spawn_rate=1,
    )


def no_decay() -> GrowthConfig:
    """Buildings never decay; growth only."""
    return GrowthConfig(
        experiment_name="no_decay",
        decay_probability=0.0,
    )


def harsh_decay() -> GrowthConfig:
    """Frequent, certain decay of unserved buildings."""
    return GrowthConfig(
        experiment_name="harsh_decay",
        decay_rate=5,
        decay_probability=1.0,
    )


def no_shadow() -> GrowthConfig:
    """No exclusion zone around high-level entities — promotions cluster."""
    return GrowthConfig(
        experiment_name="no_shadow",
        shadow_factor=0.0,
    )


PRESETS: dict[str, Callable[[], GrowthConfig]] = {
    "baseline": baseline,
    "dense_core": dense_core,
    "sprawl": sprawl,
    "no_decay": no_decay,
    "harsh_decay": harsh_decay,
    "no_shadow": no_shadow,
}


def get_preset(name: str) -> GrowthConfig:
    """Get a preset config by name."""
    if name not in PRESETS:
        raise KeyError(f"Unknown preset: '{name}'. Available: {list(PRESETS.keys())}")
    return PRESETS[name]()


def list_presets() -> list[str]:
    """List available preset names."""
    return list(PRESETS.keys())
