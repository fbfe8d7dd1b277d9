"""Tests for goal selection and the planning monitor."""

from __future__ import annotations

from dataclasses import replace

import pytest

from homestead.planning.goal import (
    BUILD_SHELTER,
    DRINK,
    EAT,
    EAT_FULL,
    SLEEP,
    SOCIALISE,
    Goal,
    choose_goal,
    fallback_goals,
    goal_satisfied,
)
from homestead.planning.monitor import PlanMonitor
from homestead.planning.planner import PlanningStats


@pytest.fixture
def content(agent):
    return replace(agent, hunger=100.0, thirst=100.0, energy=100.0, social=100.0)


class TestChooseGoal:
    """Needs are checked sleep, drink, eat, socialise."""

    @pytest.mark.parametrize(
        "drives, expected",
        [
            ({"energy": 49.0}, SLEEP),
            ({"thirst": 69.0}, DRINK),
            ({"hunger": 49.0}, EAT),
            ({"social": 39.0}, SOCIALISE),
            ({}, EAT_FULL),
            ({"energy": 50.0, "thirst": 70.0, "hunger": 50.0, "social": 40.0}, EAT_FULL),
        ],
    )
    def test_thresholds(self, config, content, drives, expected):
        assert choose_goal(replace(content, **drives), config) == expected

    def test_sleep_outranks_everything(self, config, content):
        exhausted = replace(content, energy=10.0, thirst=10.0, hunger=10.0, social=10.0)
        assert choose_goal(exhausted, config) == SLEEP

    def test_thresholds_come_from_config(self, config, content):
        strict = config.model_copy(update={"drink_below": 99.5})
        assert choose_goal(replace(content, thirst=99.0), strict) == DRINK

    def test_both_eat_goals_share_a_name(self):
        assert EAT.name == EAT_FULL.name == "Eat"
        assert EAT != EAT_FULL


class TestFallbackGoals:
    def test_lists_unfilled_drives_then_shelter(self, agent):
        assert fallback_goals(agent) == [SLEEP, DRINK, EAT_FULL, SOCIALISE, BUILD_SHELTER]

    def test_excludes_the_failed_goal(self, agent):
        assert DRINK not in fallback_goals(agent, exclude=DRINK)

    def test_content_sheltered_agent_has_none(self, content):
        assert fallback_goals(replace(content, has_shelter=True)) == []


class TestGoalSatisfied:
    def test_met_and_unmet(self, world, agent):
        assert goal_satisfied(world, agent, Goal("Snack", {"hunger": 50}))
        assert not goal_satisfied(world, agent, EAT)
        assert not goal_satisfied(world, agent, BUILD_SHELTER)


class TestPlanMonitor:
    def test_empty_monitor(self):
        stats = PlanMonitor().planning_stats
        assert stats["total_calls"] == 0
        assert stats["success_rate"] == 0.0
        assert stats["mean_expansions"] == 0.0

    def test_aggregates_outcomes(self):
        monitor = PlanMonitor()
        monitor.record(PlanningStats("Eat", outcome="found", expansions=4))
        monitor.record(PlanningStats("Drink", outcome="unreachable", expansions=10))
        monitor.record(PlanningStats("Sleep", outcome="exhausted", expansions=100))
        monitor.record_invalidation("Eat Apple")
        monitor.record_invalidation("Eat Apple")
        monitor.record_invalidation("Fell Tree")
        monitor.record_completion()
        monitor.record_fallback()

        stats = monitor.planning_stats
        assert stats["total_calls"] == 3
        assert stats["plans_found"] == 1
        assert stats["no_plan"] == 2
        assert stats["budget_exhausted"] == 1
        assert stats["success_rate"] == pytest.approx(1 / 3)
        assert stats["mean_expansions"] == pytest.approx(38.0)
        assert stats["invalidated_plans"] == 3
        assert stats["invalidations_by_action"] == {"Eat Apple": 2, "Fell Tree": 1}
        assert stats["completed_plans"] == 1
        assert stats["fallback_goals"] == 1

    def test_history_is_a_copy(self):
        monitor = PlanMonitor()
        monitor.record(PlanningStats("Eat"))
        monitor.history.clear()
        assert len(monitor.history) == 1
