"""Tests for the cost engine — placement, upgrade and demolition pricing."""

import math
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from citysim.config import SimulationConfig
from citysim.core.enums import BuildingKind
from citysim.core.grid import Grid
from citysim.systems.costs import building_cost, demolish_refund, round_half_up, upgrade_cost
from citysim.systems.land_value import compute_land_value


def _grid(n: int = 20) -> Grid:
    return Grid(n)


class TestRounding:
    def test_half_rounds_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(115.5) == 116

    def test_below_half_rounds_down(self):
        assert round_half_up(104.49) == 104


class TestBuildingCost:
    def test_bulldozer_is_free(self):
        g = _grid()
        assert building_cost(BuildingKind.NONE, 0, 0, g, None, 1000) == 0

    def test_base_cost_without_field(self):
        g = _grid()
        assert building_cost(BuildingKind.RESIDENTIAL, 3, 3, g, None, 1000) == 100
        assert building_cost(BuildingKind.POLICE, 3, 3, g, None, 1000) == 500

    def test_floor_land_value_surcharge(self):
        g = _grid()
        field = compute_land_value(g)
        # Floor value 0.1 → +5%
        assert building_cost(BuildingKind.RESIDENTIAL, 3, 3, g, field, 1000) == 105

    def test_full_land_value_surcharge(self):
        g = _grid()
        g.set_building(5, 5, BuildingKind.PARK)
        field = compute_land_value(g)
        assert field.at(5, 5) == 1.0
        # Fully desirable tile → +50%
        assert building_cost(BuildingKind.ROAD, 5, 5, g, field, 1000) == 75

    def test_scaling_by_existing_count(self):
        g = _grid()
        g.set_building(0, 0, BuildingKind.COMMERCIAL)
        g.set_building(1, 0, BuildingKind.COMMERCIAL)
        expected = round_half_up(200 * 1.2 ** 2)
        assert building_cost(BuildingKind.COMMERCIAL, 5, 5, g, None, 1000) == expected

    def test_monotonic_scaling(self):
        g = _grid()
        field = compute_land_value(g)
        prices = []
        for i in range(6):
            prices.append(building_cost(BuildingKind.RESIDENTIAL, 10, 10, g, field, 1000))
            g.set_building(i, 0, BuildingKind.RESIDENTIAL)
        assert all(a < b for a, b in zip(prices, prices[1:]))

    def test_other_kinds_do_not_scale(self):
        g = _grid()
        for i in range(5):
            g.set_building(i, 0, BuildingKind.ROAD)
        assert building_cost(BuildingKind.RESIDENTIAL, 10, 10, g, None, 1000) == 100

    def test_wealth_tax_above_threshold(self):
        g = _grid()
        assert building_cost(BuildingKind.RESIDENTIAL, 0, 0, g, None, 10001) == 125

    def test_no_wealth_tax_at_threshold(self):
        g = _grid()
        assert building_cost(BuildingKind.RESIDENTIAL, 0, 0, g, None, 10000) == 100

    def test_deterministic(self):
        g = _grid()
        g.set_building(4, 4, BuildingKind.PARK)
        g.set_building(6, 4, BuildingKind.INDUSTRIAL)
        field = compute_land_value(g)
        a = building_cost(BuildingKind.INDUSTRIAL, 5, 6, g, field, 12000)
        b = building_cost(BuildingKind.INDUSTRIAL, 5, 6, g, field, 12000)
        assert a == b

    def test_does_not_mutate_grid(self):
        g = _grid()
        rev = g.revision
        building_cost(BuildingKind.SCHOOL, 1, 1, g, None, 1000)
        assert g.revision == rev
        assert g.count(BuildingKind.SCHOOL) == 0

    def test_config_surcharge(self):
        g = _grid()
        field = compute_land_value(g)
        cfg = SimulationConfig(land_value_surcharge=1.0)
        assert building_cost(BuildingKind.RESIDENTIAL, 0, 0, g, field, 0, config=cfg) == 110


class TestUpgradeAndRefund:
    def test_upgrade_cost_level_one(self):
        g = _grid()
        g.set_building(0, 0, BuildingKind.RESIDENTIAL)
        base = building_cost(BuildingKind.RESIDENTIAL, 0, 0, g, None, 1000)
        assert upgrade_cost(0, 0, g, None, 1000) == round_half_up(base * 1.8)

    def test_upgrade_cost_grows_with_level(self):
        g = _grid()
        g.set_building(0, 0, BuildingKind.RESIDENTIAL, level=1)
        low = upgrade_cost(0, 0, g, None, 1000)
        g.set_level(0, 0, 3)
        high = upgrade_cost(0, 0, g, None, 1000)
        base = building_cost(BuildingKind.RESIDENTIAL, 0, 0, g, None, 1000)
        assert high == round_half_up(base * (1 + 3 * 0.8))
        assert high > low

    def test_upgrade_empty_tile_is_zero(self):
        assert upgrade_cost(1, 1, _grid(), None, 1000) == 0

    def test_demolish_refund(self):
        g = _grid()
        g.set_building(2, 2, BuildingKind.COMMERCIAL)
        cost = building_cost(BuildingKind.COMMERCIAL, 2, 2, g, None, 1000)
        assert demolish_refund(2, 2, g, None, 1000) == math.floor(cost * 0.3)

    def test_demolish_empty_is_zero(self):
        assert demolish_refund(2, 2, _grid(), None, 1000) == 0
