"""Tests for growth presets."""

import pytest

from hexcity.core.config import GrowthConfig
from hexcity.core.engine import GrowthEngine
from hexcity.experiment.presets import (
    PRESETS,
    baseline,
    dense_core,
    get_preset,
    harsh_decay,
    list_presets,
    no_decay,
    no_shadow,
    sprawl,
)


class TestPresetRegistry:
    def test_six_presets_defined(self):
        assert len(PRESETS) == 6

    def test_list_presets(self):
        names = list_presets()
        assert "baseline" in names
        assert "dense_core" in names

    def test_get_preset(self):
        assert get_preset("sprawl").experiment_name == "sprawl"

    def test_unknown_preset(self):
        with pytest.raises(KeyError):
            get_preset("atlantis")


class TestPresetValues:
    def test_all_presets_return_valid_config(self):
        for name, factory in PRESETS.items():
            config = factory()
            assert isinstance(config, GrowthConfig), f"{name} failed"
            assert config.experiment_name == name
            config.validate()

    def test_baseline_is_default(self):
        assert baseline().diff(GrowthConfig()) == {
            "experiment_name": ("baseline", "default"),
        }

    def test_dense_core(self):
        c = dense_core()
        assert c.sticking_probability == 1.0
        assert c.biased_walk_chance > GrowthConfig().biased_walk_chance

    def test_sprawl_is_unbiased(self):
        assert sprawl().biased_walk_chance == 0.0

    def test_no_decay(self):
        assert no_decay().decay_probability == 0.0

    def test_harsh_decay(self):
        c = harsh_decay()
        assert c.decay_probability == 1.0
        assert c.decay_rate < GrowthConfig().decay_rate

    def test_no_shadow(self):
        assert no_shadow().shadow_factor == 0.0


class TestPresetsRun:
    @pytest.mark.parametrize("name", list(PRESETS))
    def test_runs_on_small_grid(self, name):
        config = get_preset(name).replace(rows=9, cols=9)
        engine = GrowthEngine(config)
        engine.run(60)
        assert engine.tick_count == 60
