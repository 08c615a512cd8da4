"""
Experiment Runner — A/B testing, parameter sweeps, and batch execution.

Provides tools for running comparative growth runs, sweeping parameters,
and collecting results across multiple seeds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from hexcity.core.config import GrowthConfig
from hexcity.core.engine import GrowthEngine, TickReport
from hexcity.metrics.collector import MetricsCollector, TickMetrics


@dataclass
class ExperimentResult:
    """Result of a single growth run."""
    config: GrowthConfig
    reports: list[TickReport]
    metrics: list[TickMetrics]
    final_building_count: int
    final_level_counts: dict[str, int]
    total_promotions: int
    total_demotions: int
    mean_agent_count: float
    final_snapshot: list[tuple]


@dataclass
class ComparisonResult:
    """Result of comparing two or more runs."""
    results: dict[str, ExperimentResult]
    config_diffs: dict[str, Any]


class ExperimentRunner:
    """
    Run, compare, and sweep growth experiments.
    """

    def run_experiment(
        self,
        config: GrowthConfig,
        ticks: int | None = None,
        collect_metrics: bool = True,
    ) -> ExperimentResult:
        """Run a single growth simulation and return results."""
        engine = GrowthEngine(config)
        ticks = config.ticks_to_run if ticks is None else ticks

        collector = MetricsCollector(config)
        reports: list[TickReport] = []
        for _ in range(ticks):
            report = engine.tick()
            reports.append(report)
            if collect_metrics:
                collector.collect(engine, report)

        stats = engine.stats()
        agent_counts = [r.agent_count for r in reports]

        return ExperimentResult(
            config=config,
            reports=reports,
            metrics=collector.metrics_history,
            final_building_count=stats["buildings"],
            final_level_counts=stats["levels"],
            total_promotions=sum(r.promoted for r in reports),
            total_demotions=sum(r.demoted for r in reports),
            mean_agent_count=float(np.mean(agent_counts)) if agent_counts else 0.0,
            final_snapshot=engine.snapshot(),
        )

    def compare_experiments(
        self,
        configs: dict[str, GrowthConfig],
        ticks: int | None = None,
        collect_metrics: bool = True,
    ) -> ComparisonResult:
        """Run multiple experiments and compare results."""
        results: dict[str, ExperimentResult] = {}
        for name, config in configs.items():
            results[name] = self.run_experiment(config, ticks, collect_metrics)

        config_names = list(configs.keys())
        diffs: dict[str, Any] = {}
        if len(config_names) >= 2:
            base = configs[config_names[0]]
            for name in config_names[1:]:
                diffs[f"{config_names[0]}_vs_{name}"] = base.diff(configs[name])

        return ComparisonResult(results=results, config_diffs=diffs)

    def run_ab_test(
        self,
        config_a: GrowthConfig,
        config_b: GrowthConfig,
        label_a: str = "A",
        label_b: str = "B",
        ticks: int | None = None,
        collect_metrics: bool = True,
    ) -> ComparisonResult:
        """Run an A/B test between two configurations."""
        return self.compare_experiments(
            {label_a: config_a, label_b: config_b},
            ticks=ticks,
            collect_metrics=collect_metrics,
        )

    def run_parameter_sweep(
        self,
        base_config: GrowthConfig,
        param_name: str,
        values: list[Any],
        ticks: int | None = None,
        collect_metrics: bool = True,
    ) -> dict[str, ExperimentResult]:
        """
        Sweep a single parameter across multiple values.

        Args:
            base_config: Base configuration to modify
            param_name: Name of the parameter to sweep (attribute on GrowthConfig)
            values: List of values to test
            ticks: Ticks per run (default: ``ticks_to_run`` of each config)
            collect_metrics: Whether to collect detailed metrics

        Returns:
            Dict mapping value label -> ExperimentResult
        """
        if param_name not in base_config.to_dict():
            raise ValueError(f"Unknown parameter: '{param_name}'")

        results: dict[str, ExperimentResult] = {}
        for val in values:
            config = base_config.replace(
                **{param_name: val, "experiment_name": f"sweep_{param_name}={val}"}
            )
            label = f"{param_name}={val}"
            results[label] = self.run_experiment(config, ticks, collect_metrics)

        return results

    def run_multi_seed(
        self,
        config: GrowthConfig,
        seeds: list[int],
        ticks: int | None = None,
        collect_metrics: bool = False,
    ) -> list[ExperimentResult]:
        """
        Run the same configuration with multiple random seeds.

        Useful for measuring variance in outcomes.
        """
        results: list[ExperimentResult] = []
        for seed in seeds:
            seed_config = config.replace(
                random_seed=seed,
                experiment_name=f"{config.experiment_name}_seed{seed}",
            )
            results.append(self.run_experiment(seed_config, ticks, collect_metrics))
        return results
