"""Tests for strict execution and permissive simulation of action lists."""

from __future__ import annotations

import pytest

from homestead.errors import InvalidActionError
from homestead.planning.transition import apply, execute, first_blocked, simulate
from homestead.simulation.actions import (
    BUILD_SHELTER,
    GATHER_BRANCH,
    GATHER_STONE,
    MAKE_AXE,
    Action,
    Snapshot,
)
from homestead.simulation.entities import Equipment


class TestExecute:
    """Strict application stops at the first blocked action."""

    def test_runs_performable_chain(self, snapshot):
        result = execute([GATHER_STONE, GATHER_BRANCH, MAKE_AXE], snapshot)
        assert result.agent.holding == Equipment.AXE
        assert result.agent.count("stones") == 0
        assert result.agent.count("branches") == 0

    def test_stops_before_blocked_action(self, snapshot):
        """Make Axe needs a branch, so it and everything after is skipped."""
        result = execute([GATHER_STONE, MAKE_AXE, GATHER_BRANCH], snapshot)
        assert result.agent.count("stones") == 1
        assert result.agent.count("branches") == 0
        assert result.agent.holding is None

    def test_empty_list_returns_input(self, snapshot):
        assert execute([], snapshot) is snapshot

    def test_does_not_mutate_input(self, snapshot):
        execute([GATHER_STONE, GATHER_STONE], snapshot)
        assert snapshot.agent.inventory == {}


class TestSimulate:
    """Permissive application fires every effect."""

    def test_fires_blocked_effects(self, snapshot):
        result = simulate([BUILD_SHELTER], snapshot)
        assert result.agent.has_shelter
        assert result.agent.count("logs") == -2

    def test_differs_from_execute_on_blocked_plan(self, snapshot):
        plan = [MAKE_AXE]
        assert execute(plan, snapshot).agent.holding is None
        assert simulate(plan, snapshot).agent.holding == Equipment.AXE


class TestApply:
    def test_strict_flag_selects_execute(self, snapshot):
        assert apply([MAKE_AXE], snapshot, strict=True).agent.holding is None

    def test_permissive_flag_selects_simulate(self, snapshot):
        assert apply([MAKE_AXE], snapshot, strict=False).agent.holding == Equipment.AXE


class TestFirstBlocked:
    def test_reports_index_of_blocked_action(self, snapshot):
        assert first_blocked([GATHER_STONE, MAKE_AXE], snapshot) == 1

    def test_none_when_all_run(self, snapshot):
        assert first_blocked([GATHER_STONE, GATHER_BRANCH, MAKE_AXE], snapshot) is None


def test_negative_deficit_is_rejected(snapshot):
    """A precondition returning a negative deficit is a catalog bug."""
    broken = Action(
        name="Broken",
        precondition=lambda state, agent: -1,
        effect=lambda state, agent: Snapshot(state, agent),
    )
    with pytest.raises(InvalidActionError):
        execute([broken], snapshot)
