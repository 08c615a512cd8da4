"""
Tests for Tile: promotion eligibility, shadowing, and morph animation.
"""

import numpy as np
import pytest

from conftest import place
from hexcity.core.hex_grid import HexGrid
from hexcity.core.levels import CellState, Level
from hexcity.core.tile import Tile, ease_in_out_cubic


class TestEasing:
    def test_endpoints(self):
        assert ease_in_out_cubic(0.0) == 0.0
        assert ease_in_out_cubic(1.0) == 1.0

    def test_midpoint(self):
        assert ease_in_out_cubic(0.5) == pytest.approx(0.5)

    def test_first_half_is_cubic(self):
        assert ease_in_out_cubic(0.25) == pytest.approx(4 * 0.25 ** 3)

    def test_second_half(self):
        assert ease_in_out_cubic(0.75) == pytest.approx(1 - (-2 * 0.75 + 2) ** 3 / 2)

    def test_monotonic(self):
        values = [ease_in_out_cubic(p) for p in np.linspace(0.0, 1.0, 101)]
        assert all(b >= a for a, b in zip(values, values[1:]))


class TestTileDefaults:
    def test_new_tile_is_empty_and_idle(self):
        tile = Tile(q=1, r=2)
        assert tile.state == CellState.EMPTY
        assert tile.level == Level.EMPTY
        assert tile.morph_progress == 1.0
        assert not tile.is_morphing
        assert tile.coords == (1, 2)

    def test_crystallize(self):
        tile = Tile(q=0, r=0)
        tile.crystallize()
        assert tile.is_crystallized
        assert tile.level == Level.HOUSE
        assert tile.service_range == 1

    def test_identity_equality(self):
        assert Tile(q=0, r=0) != Tile(q=0, r=0)

    def test_describe(self):
        tile = Tile(q=3, r=4)
        tile.crystallize()
        text = tile.describe()
        assert "Tile: (3, 4)" in text
        assert "State: Crystallized" in text
        assert "Level: House" in text
        assert "Range: 1" in text


class TestCanPromote:
    """Centre (2, 2) of a 5x5 grid; its neighbors are
    (3,1) (3,2) (2,3) (1,2) (1,1) (2,1)."""

    def test_house_with_two_supporting_neighbors(self, small_grid):
        center = place(small_grid, 2, 2)
        place(small_grid, 3, 2)
        place(small_grid, 2, 3)
        assert center.can_promote(small_grid, shadow_factor=0.5)

    def test_one_neighbor_is_not_enough(self, small_grid):
        center = place(small_grid, 2, 2)
        place(small_grid, 3, 2)
        assert not center.can_promote(small_grid)

    def test_candidate_neighbors_do_not_count(self, small_grid):
        center = place(small_grid, 2, 2)
        place(small_grid, 3, 2)
        small_grid.tile_at(2, 3).state = CellState.CANDIDATE
        assert not center.can_promote(small_grid)

    def test_higher_level_neighbors_do_not_support(self, small_grid):
        center = place(small_grid, 2, 2)
        place(small_grid, 3, 2, Level.SHOP)
        place(small_grid, 2, 3, Level.SHOP)
        assert not center.can_promote(small_grid, shadow_factor=0.0)

    def test_shadowed_by_adjacent_shop(self, small_grid):
        center = place(small_grid, 2, 2)
        place(small_grid, 3, 2, Level.SHOP)
        place(small_grid, 2, 3)
        place(small_grid, 1, 2)
        assert not center.can_promote(small_grid, shadow_factor=0.5)

    def test_shop_outside_shadow_radius(self, small_grid):
        center = place(small_grid, 2, 2)
        place(small_grid, 3, 2)
        place(small_grid, 2, 3)
        place(small_grid, 4, 2, Level.SHOP)
        assert small_grid.hex_distance(center, small_grid.tile_at(4, 2)) == 2
        assert center.can_promote(small_grid, shadow_factor=0.5)
        assert not center.can_promote(small_grid, shadow_factor=1.0)

    def test_higher_than_target_also_shadows(self, small_grid):
        center = place(small_grid, 2, 2)
        place(small_grid, 3, 2)
        place(small_grid, 2, 3)
        place(small_grid, 2, 1, Level.FACTORY)
        assert not center.can_promote(small_grid, shadow_factor=0.5)

    def test_zero_shadow_factor_only_checks_self_distance(self, small_grid):
        center = place(small_grid, 2, 2)
        place(small_grid, 3, 2)
        place(small_grid, 2, 3)
        place(small_grid, 2, 1, Level.FACTORY)
        assert center.can_promote(small_grid, shadow_factor=0.0)

    def test_not_crystallized(self, small_grid):
        center = small_grid.tile_at(2, 2)
        center.state = CellState.CANDIDATE
        place(small_grid, 3, 2)
        place(small_grid, 2, 3)
        assert not center.can_promote(small_grid)

    def test_factory_has_no_rule(self, small_grid):
        center = place(small_grid, 2, 2, Level.FACTORY)
        for q, r in [(3, 1), (3, 2), (2, 3), (1, 2), (1, 1), (2, 1)]:
            place(small_grid, q, r)
        assert not center.can_promote(small_grid)

    def test_shop_needs_three(self, small_grid):
        center = place(small_grid, 2, 2, Level.SHOP)
        place(small_grid, 3, 2)
        place(small_grid, 2, 3, Level.SHOP)
        assert not center.can_promote(small_grid)
        place(small_grid, 1, 2)
        assert center.can_promote(small_grid)


class TestMorph:
    def _house(self) -> Tile:
        tile = Tile(q=0, r=0)
        tile.crystallize()
        return tile

    def test_same_level_is_noop(self):
        tile = self._house()
        tile.begin_morph(Level.HOUSE, now=10.0)
        assert tile.morph_progress == 1.0
        assert tile.morph_start_time == 0.0

    def test_begin_records_target(self):
        tile = self._house()
        tile.begin_morph(Level.SHOP, now=250.0)
        assert tile.target_level == Level.SHOP
        assert tile.morph_progress == 0.0
        assert tile.morph_start_time == 250.0
        assert tile.is_morphing
        assert tile.level == Level.HOUSE

    def test_level_held_until_complete(self):
        tile = self._house()
        tile.begin_morph(Level.SHOP, now=0.0)
        assert tile.advance_morph(500.0) is False
        assert tile.morph_progress == pytest.approx(0.5)
        assert tile.level == Level.HOUSE

    def test_completion_commits_level(self):
        tile = self._house()
        tile.begin_morph(Level.SHOP, now=0.0)
        assert tile.advance_morph(1000.0) is True
        assert tile.level == Level.SHOP
        assert tile.morph_progress == 1.0
        assert tile.state == CellState.CRYSTALLIZED

    def test_overshoot_clamps(self):
        tile = self._house()
        tile.begin_morph(Level.SHOP, now=0.0)
        assert tile.advance_morph(5000.0) is True
        assert tile.morph_progress == 1.0

    def test_idle_advance_is_noop(self):
        tile = self._house()
        assert tile.advance_morph(100.0) is False
        assert tile.level == Level.HOUSE

    def test_morph_to_empty_drops_state_with_level(self):
        tile = self._house()
        tile.begin_morph(Level.EMPTY, now=0.0)
        tile.advance_morph(900.0)
        assert tile.state == CellState.CRYSTALLIZED
        assert tile.level == Level.HOUSE
        tile.advance_morph(1000.0)
        assert tile.state == CellState.EMPTY
        assert tile.level == Level.EMPTY

    def test_progress_monotonic(self):
        tile = self._house()
        tile.begin_morph(Level.SHOP, now=0.0)
        previous = tile.morph_progress
        for now in range(0, 1100, 50):
            tile.advance_morph(float(now))
            assert tile.morph_progress >= previous
            previous = tile.morph_progress

    def test_earlier_clock_keeps_progress(self):
        tile = self._house()
        tile.begin_morph(Level.SHOP, now=0.0)
        tile.advance_morph(600.0)
        progress = tile.morph_progress
        assert tile.advance_morph(100.0) is False
        assert tile.morph_progress == progress

    def test_restart_resets_progress(self):
        tile = self._house()
        tile.begin_morph(Level.SHOP, now=0.0)
        tile.advance_morph(1000.0)
        tile.begin_morph(Level.TOWER, now=2000.0)
        assert tile.morph_progress == 0.0
        assert tile.target_level == Level.TOWER

    def test_custom_duration(self):
        tile = self._house()
        tile.morph_duration = 200.0
        tile.begin_morph(Level.SHOP, now=0.0)
        assert tile.advance_morph(200.0) is True

    def test_to_dict(self):
        tile = self._house()
        d = tile.to_dict()
        assert d == {
            "q": 0, "r": 0, "state": 2, "level": 1,
            "target_level": 1, "morph_progress": 1.0,
        }


def test_promotion_scenario_from_empty_grid():
    grid = HexGrid(5, 5)
    center = place(grid, 2, 2)
    place(grid, 1, 1)
    place(grid, 2, 1)
    assert center.can_promote(grid)
