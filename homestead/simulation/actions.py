"""Action definitions for the homestead simulation.

An Action is an operator with a graded precondition, a cost, and an effect.
Preconditions return how much is still missing (0 means the action can be
performed right now), which is what lets the planner reward partial progress
such as gathering the first of two required stones. Effects return a new
``Snapshot`` and never touch their inputs.

``ALL_ACTIONS`` is the catalog the engine hands to the planner.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable

from homestead.simulation.entities import DRIVE_MAX, Agent, Equipment
from homestead.simulation.world import EntityKind, Position, WorldState


@dataclass(frozen=True)
class Snapshot:
    """A (world state, agent) pair threaded through action effects."""

    state: WorldState
    agent: Agent


PreconditionCheck = Callable[[WorldState, Agent], float]
Effect = Callable[[WorldState, Agent], Snapshot]
TargetFinder = Callable[[WorldState, Agent], "Position | None"]


@dataclass(frozen=True)
class Action:
    """An operator the planner can chain into a plan.

    ``requires_in_range`` and ``find_target`` are only read by the engine:
    they say whether the agent must walk somewhere before performing the
    action, and where.
    """

    name: str
    precondition: PreconditionCheck
    effect: Effect
    cost: float = 1.0
    requires_in_range: bool = False
    find_target: TargetFinder | None = None

    def deficit(self, state: WorldState, agent: Agent) -> float:
        """Remaining precondition deficit (0 = performable now)."""
        return self.precondition(state, agent)

    def is_performable(self, state: WorldState, agent: Agent) -> bool:
        return self.precondition(state, agent) == 0

    def apply(self, state: WorldState, agent: Agent) -> Snapshot:
        """Fire the effect regardless of the precondition."""
        return self.effect(state, agent)

    def __repr__(self) -> str:
        return f"Action({self.name!r})"


# ----------------------------------------------------------------------
# Precondition combinators
# ----------------------------------------------------------------------


def has(item: str, quantity: int) -> PreconditionCheck:
    """Deficit of ``item`` below ``quantity`` (never negative)."""

    def check(state: WorldState, agent: Agent) -> float:
        return max(0, quantity - agent.count(item))

    return check


def holding(equipment: Equipment) -> PreconditionCheck:
    def check(state: WorldState, agent: Agent) -> float:
        return 0 if agent.holding == equipment else 1

    return check


def entity_exists(kind: EntityKind) -> PreconditionCheck:
    def check(state: WorldState, agent: Agent) -> float:
        return 0 if state.has_entity(kind) else 1

    return check


def has_shelter(state: WorldState, agent: Agent) -> float:
    return 0 if agent.has_shelter else 1


def neighbour_exists(state: WorldState, agent: Agent) -> float:
    return 0 if _neighbours(state, agent) else 1


def both(a: PreconditionCheck, b: PreconditionCheck) -> PreconditionCheck:
    """Sum of two deficits: both must be met for the result to be 0."""

    def check(state: WorldState, agent: Agent) -> float:
        return a(state, agent) + b(state, agent)

    return check


# ----------------------------------------------------------------------
# Target finders
# ----------------------------------------------------------------------


def find(kind: EntityKind) -> TargetFinder:
    """Target the nearest entity of ``kind``."""

    def finder(state: WorldState, agent: Agent) -> Position | None:
        return state.find_nearest(kind, agent.position)

    return finder


def find_shelter(state: WorldState, agent: Agent) -> Position | None:
    return agent.shelter_location


def find_neighbour(state: WorldState, agent: Agent) -> Position | None:
    others = _neighbours(state, agent)
    if not others:
        return None
    return min(others, key=lambda o: o.position.distance_to(agent.position)).position


def _neighbours(state: WorldState, agent: Agent) -> list[Agent]:
    return [o for o in state.agents if o.alive and o.agent_id != agent.agent_id]


# ----------------------------------------------------------------------
# Effect helpers
# ----------------------------------------------------------------------


def build_site(state: WorldState, agent: Agent) -> Position:
    """Where a structure goes: north of the agent, or south on the top row."""
    north = Position(agent.position.row - 1, agent.position.column)
    if state.in_bounds(north):
        return north
    return Position(agent.position.row + 1, agent.position.column)


def _eat_apple(state: WorldState, agent: Agent) -> Snapshot:
    return Snapshot(
        state=state.without_entity_at(agent.position, EntityKind.APPLE),
        agent=agent.with_drive("hunger", DRIVE_MAX),
    )


def _build_shelter(state: WorldState, agent: Agent) -> Snapshot:
    site = build_site(state, agent)
    built = replace(agent, has_shelter=True, shelter_location=site)
    return Snapshot(
        state=state.with_entity(EntityKind.HOUSE, site),
        agent=built.with_item("logs", -2),
    )


def _build_well(state: WorldState, agent: Agent) -> Snapshot:
    return Snapshot(
        state=state.with_entity(EntityKind.WELL, build_site(state, agent)),
        agent=agent.with_item("stones", -2),
    )


def _fell_tree(state: WorldState, agent: Agent) -> Snapshot:
    return Snapshot(
        state=state.without_entity_at(agent.position, EntityKind.TREE),
        agent=agent.with_item("logs", 1),
    )


def _make_axe(state: WorldState, agent: Agent) -> Snapshot:
    crafted = replace(agent, holding=Equipment.AXE)
    return Snapshot(state=state, agent=crafted.with_item("stones", -1).with_item("branches", -1))


def _gather(kind: EntityKind, item: str) -> Effect:
    def effect(state: WorldState, agent: Agent) -> Snapshot:
        return Snapshot(
            state=state.without_entity_at(agent.position, kind),
            agent=agent.with_item(item, 1),
        )

    return effect


def _drink(state: WorldState, agent: Agent) -> Snapshot:
    return Snapshot(state=state, agent=agent.with_drive("thirst", DRIVE_MAX))


def _sleep(state: WorldState, agent: Agent) -> Snapshot:
    return Snapshot(state=state, agent=agent.with_drive("energy", agent.energy + 100))


def _chat(state: WorldState, agent: Agent) -> Snapshot:
    return Snapshot(state=state, agent=agent.with_drive("social", DRIVE_MAX))


# ----------------------------------------------------------------------
# Catalog
# ----------------------------------------------------------------------

EAT_APPLE = Action(
    name="Eat Apple",
    precondition=entity_exists(EntityKind.APPLE),
    effect=_eat_apple,
    requires_in_range=True,
    find_target=find(EntityKind.APPLE),
)

BUILD_SHELTER = Action(
    name="Build Shelter",
    precondition=has("logs", 2),
    effect=_build_shelter,
)

BUILD_WELL = Action(
    name="Build Well",
    precondition=has("stones", 2),
    effect=_build_well,
)

FELL_TREE = Action(
    name="Fell Tree",
    precondition=both(holding(Equipment.AXE), entity_exists(EntityKind.TREE)),
    effect=_fell_tree,
    requires_in_range=True,
    find_target=find(EntityKind.TREE),
)

MAKE_AXE = Action(
    name="Make Axe",
    precondition=both(has("stones", 1), has("branches", 1)),
    effect=_make_axe,
)

GATHER_STONE = Action(
    name="Gather Stone",
    precondition=entity_exists(EntityKind.STONE),
    effect=_gather(EntityKind.STONE, "stones"),
    requires_in_range=True,
    find_target=find(EntityKind.STONE),
)

GATHER_BRANCH = Action(
    name="Gather Branch",
    precondition=entity_exists(EntityKind.BRANCH),
    effect=_gather(EntityKind.BRANCH, "branches"),
    requires_in_range=True,
    find_target=find(EntityKind.BRANCH),
)

DRINK_FROM_WELL = Action(
    name="Drink from Well",
    precondition=entity_exists(EntityKind.WELL),
    effect=_drink,
    requires_in_range=True,
    find_target=find(EntityKind.WELL),
)

SLEEP_AT_SHELTER = Action(
    name="Sleep at Shelter",
    precondition=has_shelter,
    effect=_sleep,
    requires_in_range=True,
    find_target=find_shelter,
)

CHAT_WITH_NEIGHBOUR = Action(
    name="Chat with Neighbour",
    precondition=neighbour_exists,
    effect=_chat,
    requires_in_range=True,
    find_target=find_neighbour,
)

ALL_ACTIONS: tuple[Action, ...] = (
    EAT_APPLE,
    BUILD_SHELTER,
    BUILD_WELL,
    FELL_TREE,
    MAKE_AXE,
    GATHER_STONE,
    GATHER_BRANCH,
    DRINK_FROM_WELL,
    SLEEP_AT_SHELTER,
    CHAT_WITH_NEIGHBOUR,
)


def action_by_name(name: str) -> Action:
    """Look up a catalog action by its display name."""
    for action in ALL_ACTIONS:
        if action.name == name:
            return action
    raise KeyError(name)
