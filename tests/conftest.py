"""Shared test fixtures for the homestead test suite."""

from __future__ import annotations

import pytest

from homestead.config import SimulationConfig
from homestead.simulation.actions import Snapshot
from homestead.simulation.entities import Agent
from homestead.simulation.world import EntityKind, Position, WorldState


def make_world(
    entities: dict[tuple[int, int], EntityKind] | None = None,
    width: int = 5,
    height: int = 5,
    agents: tuple[Agent, ...] = (),
    time_of_day: float = 8.0,
) -> WorldState:
    """Build a small world with entities at the given (row, column) spots."""
    world = WorldState.empty(width, height, time_of_day=time_of_day)
    for (row, column), kind in (entities or {}).items():
        world = world.with_entity(kind, Position(row, column))
    return world.with_agents(agents)


@pytest.fixture
def config() -> SimulationConfig:
    """Default config with a small world for fast tests."""
    return SimulationConfig(
        world_width=16,
        world_height=8,
        seed=42,
        max_ticks=100,
        num_agents=1,
    )


@pytest.fixture
def agent() -> Agent:
    """A settler in the middle of a 5x5 world, standing on an empty cell."""
    return Agent(
        agent_id="test0001",
        name="test settler",
        position=Position(2, 2),
        hunger=60.0,
        thirst=60.0,
        energy=40.0,
        social=80.0,
    )


@pytest.fixture
def world() -> WorldState:
    """5x5 world with one of each raw material and a pair of stones.

    The agent fixture stands at (2, 2), away from all of them, so gathering
    effects in look-ahead never deplete the map.
    """
    return make_world(
        {
            (0, 0): EntityKind.APPLE,
            (0, 4): EntityKind.TREE,
            (4, 0): EntityKind.BRANCH,
            (4, 3): EntityKind.STONE,
            (4, 4): EntityKind.STONE,
        }
    )


@pytest.fixture
def snapshot(world: WorldState, agent: Agent) -> Snapshot:
    return Snapshot(state=world, agent=agent)
