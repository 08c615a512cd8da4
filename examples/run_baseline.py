#!/usr/bin/env python3
"""Run a baseline city growth simulation and print results."""

import logging

from hexcity.core.config import GrowthConfig
from hexcity.core.engine import GrowthEngine
from hexcity.metrics.collector import MetricsCollector


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    config = GrowthConfig(
        experiment_name="baseline",
        rows=41,
        cols=41,
        ticks_to_run=1200,
        random_seed=42,
    )

    print(f"=== Hex City: {config.experiment_name} ===")
    print(f"Grid: {config.rows}x{config.cols}")
    print(f"Ticks: {config.ticks_to_run}")
    print(f"Sticking: {config.sticking_probability}  Bias: {config.biased_walk_chance}")
    print()

    engine = GrowthEngine(config)
    collector = MetricsCollector(config)

    print(f"{'Tick':>5} {'Agents':>6} {'Bldg':>5} {'Cand':>5} {'Prom':>4} {'Dem':>4} "
          f"{'House':>5} {'Shop':>5} {'Tower':>5} {'Fact':>5} {'Radius':>6}")
    print("-" * 70)

    for _ in range(config.ticks_to_run):
        report = engine.tick()
        m = collector.collect(engine, report)
        if m.tick % 100 == 0:
            lc = m.level_counts
            print(
                f"{m.tick:5d} {m.agent_count:6d} {m.building_count:5d} "
                f"{m.candidate_count:5d} {m.promoted:4d} {m.demoted:4d} "
                f"{lc['house']:5d} {lc['shop']:5d} {lc['tower']:5d} "
                f"{lc['factory']:5d} {m.mean_radius:6.2f}"
            )

    stats = engine.stats()
    print()
    print(f"=== Final State (Tick {stats['tick']}) ===")
    print(f"Agents: {stats['agents']}  |  Buildings: {stats['buildings']}")
    print(f"Total promotions: {sum(collector.get_time_series('promoted'))}")
    print(f"Total demotions: {sum(collector.get_time_series('demoted'))}")
    for level, count in stats["levels"].items():
        print(f"  {level:10s}: {count:4d}")


if __name__ == "__main__":
    main()
