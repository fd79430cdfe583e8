"""Tests for CityEngine commands — validation, atomicity, rewards, undo/redo."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from citysim.config import SimulationConfig
from citysim.core.enums import BuildingKind, DecorationKind, QuestTarget
from citysim.core.errors import InvalidCommand
from citysim.core.models import DEFAULT_TILE_COLOR, Vector2
from citysim.core.quests import Quest
from citysim.core.snapshot import Snapshot
from citysim.core.state import SimulationState
from citysim.engine.city_engine import CityEngine


def _engine(**overrides) -> CityEngine:
    cfg = SimulationConfig(grid_size=overrides.pop("grid_size", 10), **overrides)
    return CityEngine(cfg, auto_goal=False)


class TestPlace:
    def test_place_charges_cost(self):
        e = _engine()
        price = e.cost(BuildingKind.ROAD, 2, 2)
        assert price == 53  # 50 * 1.05 rounded half up
        result = e.place(BuildingKind.ROAD, 2, 2)
        assert result.ok
        assert result.money_delta == -53
        assert result.changed_tiles == [Vector2(2, 2)]
        assert e.state.stats.money == 1000 - 53
        assert e.state.grid.kind_at(2, 2) == BuildingKind.ROAD

    def test_insufficient_funds_changes_nothing(self):
        e = _engine(initial_money=100)
        before = Snapshot.from_state(e.state)
        result = e.place(BuildingKind.POLICE, 1, 1)
        assert not result.ok
        assert result.reason == "insufficient_funds"
        assert Snapshot.from_state(e.state) == before
        assert not e.history.can_undo

    def test_occupied(self):
        e = _engine()
        e.place(BuildingKind.ROAD, 0, 0)
        money = e.state.stats.money
        result = e.place(BuildingKind.PARK, 0, 0)
        assert result.reason == "occupied"
        assert e.state.stats.money == money
        assert e.state.grid.kind_at(0, 0) == BuildingKind.ROAD

    @pytest.mark.parametrize("x,y", [(-1, 0), (0, 10), (10, 10)])
    def test_out_of_bounds(self, x, y):
        e = _engine()
        result = e.place(BuildingKind.ROAD, x, y)
        assert not result.ok
        assert result.reason == "out_of_bounds"
        assert e.state.stats.money == 1000

    def test_placing_empty_is_rejected(self):
        result = _engine().place(BuildingKind.NONE, 0, 0)
        assert result.reason == "invalid_kind"

    def test_placing_clears_decoration(self):
        e = _engine()
        e.decorate(3, 3, DecorationKind.TREE, "#00ff00")
        e.place(BuildingKind.RESIDENTIAL, 3, 3)
        assert e.state.grid.tile(3, 3).decoration == DecorationKind.NONE

    def test_second_copy_costs_more(self):
        e = _engine()
        first = e.cost(BuildingKind.RESIDENTIAL, 0, 0)
        e.place(BuildingKind.RESIDENTIAL, 0, 0)
        assert e.cost(BuildingKind.RESIDENTIAL, 5, 5) > first


class TestUpgradeDemolish:
    def test_upgrade(self):
        e = _engine()
        e.place(BuildingKind.RESIDENTIAL, 4, 4)
        price = e.upgrade_price(4, 4)
        money = e.state.stats.money
        result = e.upgrade(4, 4)
        assert result.ok
        assert e.state.grid.tile(4, 4).level == 2
        assert e.state.stats.money == money - price

    def test_upgrade_empty_tile(self):
        assert _engine().upgrade(1, 1).reason == "empty_tile"

    def test_upgrade_stops_at_max_level(self):
        e = _engine(initial_money=100_000)
        e.place(BuildingKind.ROAD, 0, 0)
        for _ in range(4):
            assert e.upgrade(0, 0).ok
        assert e.state.grid.tile(0, 0).level == 5
        result = e.upgrade(0, 0)
        assert result.reason == "max_level"

    def test_demolish_refunds(self):
        e = _engine()
        e.place(BuildingKind.COMMERCIAL, 2, 3)
        refund = e.refund(2, 3)
        assert refund == 75  # floor(252 * 0.3)
        money = e.state.stats.money
        result = e.demolish(2, 3)
        assert result.ok
        assert result.money_delta == refund
        assert e.state.stats.money == money + refund
        tile = e.state.grid.tile(2, 3)
        assert tile.kind == BuildingKind.NONE
        assert tile.level == 1

    def test_demolish_empty_tile(self):
        e = _engine()
        result = e.demolish(0, 0)
        assert result.reason == "empty_tile"
        assert e.state.stats.money == 1000


class TestDecorate:
    def test_decorate_sets_color(self):
        e = _engine()
        result = e.decorate(1, 2, DecorationKind.FLOWER, "#ff00ff")
        assert result.ok
        tile = e.state.grid.tile(1, 2)
        assert tile.decoration == DecorationKind.FLOWER
        assert tile.color == "#ff00ff"
        assert result.money_delta == 0

    def test_clearing_resets_color(self):
        e = _engine()
        e.decorate(1, 2, DecorationKind.POND, "#0000ff")
        e.decorate(1, 2, DecorationKind.NONE)
        assert e.state.grid.tile(1, 2).color == DEFAULT_TILE_COLOR

    def test_no_change_is_rejected(self):
        e = _engine()
        result = e.decorate(0, 0, DecorationKind.NONE)
        assert not result.ok
        assert result.reason == "no_change"
        assert not e.history.can_undo


class TestHistory:
    def test_undo_restores_exact_state(self):
        e = _engine()
        before = Snapshot.from_state(e.state)
        e.place(BuildingKind.PARK, 5, 5)
        after = Snapshot.from_state(e.state)
        assert e.undo().ok
        assert Snapshot.from_state(e.state) == before
        assert e.redo().ok
        assert Snapshot.from_state(e.state) == after

    def test_undo_money_delta(self):
        e = _engine()
        e.place(BuildingKind.ROAD, 0, 0)
        result = e.undo()
        assert result.money_delta == 53
        assert e.state.stats.money == 1000

    def test_undo_without_history(self):
        e = _engine()
        assert e.undo().reason == "nothing_to_undo"
        assert e.redo().reason == "nothing_to_redo"

    def test_new_command_drops_redo(self):
        e = _engine()
        e.place(BuildingKind.ROAD, 0, 0)
        e.undo()
        e.place(BuildingKind.ROAD, 1, 1)
        assert not e.history.can_redo
        assert e.redo().reason == "nothing_to_redo"

    def test_history_is_bounded(self):
        e = _engine(initial_money=1_000_000)
        for i in range(25):
            assert e.place(BuildingKind.ROAD, i % 10, i // 10).ok
        undos = 0
        while e.undo().ok:
            undos += 1
        assert undos == 19

    def test_land_value_follows_undo(self):
        e = _engine()
        e.place(BuildingKind.PARK, 0, 0)
        assert e.land_value().at(1, 0) == pytest.approx(0.9)
        e.undo()
        assert e.land_value().at(1, 0) == pytest.approx(0.1)

    def test_ticks_do_not_create_history(self):
        e = _engine()
        e.tick()
        e.tick()
        assert not e.history.can_undo


class TestRewards:
    def test_claim_completed_quest(self):
        e = _engine()
        for x in range(3):
            assert e.place(BuildingKind.RESIDENTIAL, x, 0).ok
        q1 = e.state.find_quest("q1")
        assert q1.completed
        money = e.state.stats.money
        result = e.claim_quest_reward("q1")
        assert result.ok
        assert result.money_delta == 500
        assert e.state.stats.money == money + 500
        assert e.state.find_quest("q1") is None

    def test_reward_is_paid_once(self):
        e = _engine()
        for x in range(3):
            e.place(BuildingKind.RESIDENTIAL, x, 0)
        e.claim_quest_reward("q1")
        assert e.claim_quest_reward("q1").reason == "unknown_quest"

    def test_incomplete_quest(self):
        e = _engine()
        result = e.claim_quest_reward("q2")
        assert result.reason == "not_completed"
        assert e.state.stats.money == 1000

    def test_claim_goal_and_replace(self):
        cfg = SimulationConfig(grid_size=10)
        e = CityEngine(cfg)
        goal = Quest("custom", QuestTarget.BUILD_COUNT, 1, 300, BuildingKind.PARK)
        e.set_goal(goal)
        assert e.claim_goal_reward().reason == "not_completed"
        e.place(BuildingKind.PARK, 0, 0)
        assert e.state.goal.completed
        money = e.state.stats.money
        result = e.claim_goal_reward()
        assert result.ok
        assert e.state.stats.money == money + 300
        assert e.state.goal is not None
        assert e.state.goal.quest_id != "custom"

    def test_set_goal_is_undoable(self):
        e = CityEngine(SimulationConfig(grid_size=10))
        before = e.state.goal.quest_id
        e.set_goal(Quest("custom", QuestTarget.MONEY, 9999, 50))
        assert e.state.goal.quest_id == "custom"
        assert e.undo().ok
        assert e.state.goal.quest_id == before

    def test_reclaim_after_undo_gives_same_goal(self):
        e = CityEngine(SimulationConfig(grid_size=10))
        e.set_goal(Quest("custom", QuestTarget.BUILD_COUNT, 1, 300, BuildingKind.PARK))
        e.place(BuildingKind.PARK, 0, 0)
        e.claim_goal_reward()
        first = e.state.goal.copy()
        serial = e.state.goal_serial
        e.undo()
        assert e.state.goal.quest_id == "custom"
        assert e.state.goal_serial == serial - 1
        e.claim_goal_reward()
        assert e.state.goal == first

    def test_no_goal(self):
        e = _engine()
        e.set_goal(None)
        assert e.claim_goal_reward().reason == "no_goal"

    def test_quest_completion_reported_in_news(self):
        e = _engine()
        for x in range(3):
            e.place(BuildingKind.RESIDENTIAL, x, 0)
        categories = [ev.category for ev in e.state.news.latest()]
        assert "quest" in categories


class TestSession:
    def test_auto_goal_on_start(self):
        e = CityEngine(SimulationConfig(grid_size=10))
        assert e.state.goal is not None
        assert not e.state.goal.completed

    def test_add_news(self):
        e = _engine()
        e.add_news("The mayor cut a ribbon.")
        latest = e.state.news.latest()[-1]
        assert latest.message == "The mayor cut a ribbon."
        assert latest.day == 1

    def test_news_is_bounded(self):
        e = _engine()
        for i in range(20):
            e.add_news(f"item {i}")
        assert len(e.state.news) == 13

    def test_load_state_size_mismatch(self):
        e = _engine()
        with pytest.raises(InvalidCommand):
            e.load_state(SimulationState.fresh(SimulationConfig(grid_size=12)))

    def test_load_state_resets_history(self):
        e = _engine()
        e.place(BuildingKind.ROAD, 0, 0)
        e.load_state(SimulationState.fresh(e.config))
        assert not e.history.can_undo
        assert e.state.grid.kind_at(0, 0) == BuildingKind.NONE

    def test_find_path_uses_live_grid(self):
        e = _engine()
        path = e.find_path(Vector2(0, 0), Vector2(2, 0))
        assert path == [Vector2(0, 0), Vector2(1, 0), Vector2(2, 0)]
        e.place(BuildingKind.SCHOOL, 2, 0)
        assert e.find_path(Vector2(0, 0), Vector2(2, 0)) is None
