"""Tests for the agent record and the world grid."""

from __future__ import annotations

import random
from dataclasses import replace

import pytest

from homestead.simulation.entities import Agent, clamp_drive
from homestead.simulation.world import EntityKind, Position, WorldState, generate_world

from tests.conftest import make_world


class TestAgent:
    def test_defaults(self):
        agent = Agent()
        assert agent.alive
        assert agent.inventory == {}
        assert agent.plan == ()
        assert agent.count("stones") == 0

    def test_with_item_returns_copy(self, agent):
        richer = agent.with_item("stones", 2)
        assert richer.count("stones") == 2
        assert agent.count("stones") == 0

    def test_with_item_allows_negative_counts(self, agent):
        assert agent.with_item("logs", -2).count("logs") == -2

    def test_with_drive_clamps(self, agent):
        assert agent.with_drive("energy", 150).energy == 100
        assert agent.with_drive("energy", -5).energy == 0

    def test_drives_and_worst_vital(self, agent):
        assert agent.drives() == {"hunger": 60, "thirst": 60, "energy": 40, "social": 80}
        assert agent.worst_vital() == 40

    def test_lonely_agent_is_not_depleted(self, agent):
        assert not replace(agent, social=0).is_depleted()
        assert replace(agent, thirst=0).is_depleted()

    def test_decay_lowers_and_clamps(self, agent):
        decayed = agent.decay(0.5, 1.0, 50.0, 0.25)
        assert decayed.hunger == pytest.approx(59.5)
        assert decayed.thirst == pytest.approx(59.0)
        assert decayed.energy == 0
        assert decayed.social == pytest.approx(79.75)

    @pytest.mark.parametrize("value, expected", [(-1, 0), (0, 0), (55.5, 55.5), (101, 100)])
    def test_clamp_drive(self, value, expected):
        assert clamp_drive(value) == expected


class TestPosition:
    def test_manhattan_distance(self):
        assert Position(0, 0).distance_to(Position(2, 3)) == 5

    def test_step_towards_moves_diagonally(self):
        assert Position(2, 2).step_towards(Position(0, 4)) == Position(1, 3)
        assert Position(2, 2).step_towards(Position(2, 0)) == Position(2, 1)
        assert Position(2, 2).step_towards(Position(2, 2)) == Position(2, 2)


class TestWorldState:
    def test_empty_world(self):
        world = WorldState.empty(4, 3)
        assert world.width == 4
        assert world.height == 3
        assert world.entities() == []
        assert world.agents == ()

    def test_entity_at_out_of_bounds(self, world):
        assert world.entity_at(Position(-1, 0)) is None
        assert world.entity_at(Position(0, 5)) is None

    def test_entities_in_row_major_order(self, world):
        stones = world.entities(EntityKind.STONE)
        assert [e.position for e in stones] == [Position(4, 3), Position(4, 4)]
        assert len(world.entities()) == 5

    def test_find_nearest(self, world):
        assert world.find_nearest(EntityKind.STONE, Position(4, 4)) == Position(4, 4)
        assert world.find_nearest(EntityKind.WELL, Position(0, 0)) is None

    def test_find_nearest_ties_go_to_first_in_row_major_order(self):
        world = make_world({(0, 2): EntityKind.TREE, (2, 0): EntityKind.TREE})
        assert world.find_nearest(EntityKind.TREE, Position(0, 0)) == Position(0, 2)

    def test_with_entity_is_a_copy(self, world):
        built = world.with_entity(EntityKind.WELL, Position(1, 1))
        assert built.has_entity(EntityKind.WELL)
        assert not world.has_entity(EntityKind.WELL)

    def test_with_entity_out_of_bounds_is_ignored(self, world):
        assert world.with_entity(EntityKind.WELL, Position(9, 9)) is world

    def test_without_entity_checks_kind(self, world):
        assert world.without_entity_at(Position(0, 0), EntityKind.TREE) is world
        eaten = world.without_entity_at(Position(0, 0), EntityKind.APPLE)
        assert not eaten.has_entity(EntityKind.APPLE)

    def test_daytime_window(self):
        assert WorldState.empty(1, 1, time_of_day=12).is_daytime()
        assert not WorldState.empty(1, 1, time_of_day=7).is_daytime()
        assert not WorldState.empty(1, 1, time_of_day=20).is_daytime()

    def test_advance_time_wraps(self):
        world = WorldState.empty(1, 1, time_of_day=23.9)
        assert world.advance_time(0.2).time_of_day == pytest.approx(0.1)


class TestGenerateWorld:
    def test_same_seed_same_world(self, config):
        first = generate_world(config, random.Random(7))
        second = generate_world(config, random.Random(7))
        assert first == second

    def test_size_and_time_follow_config(self, config):
        world = generate_world(config, random.Random(1))
        assert (world.width, world.height) == (16, 8)
        assert world.time_of_day == config.start_time_of_day
        assert not world.has_entity(EntityKind.HOUSE)
        assert not world.has_entity(EntityKind.WELL)

    def test_thresholds_control_spawns(self, config):
        thresholds = ("apple_threshold", "tree_threshold", "branch_threshold", "stone_threshold")
        barren = config.model_copy(update={name: 1.0 for name in thresholds})
        assert generate_world(barren, random.Random(1)).entities() == []
