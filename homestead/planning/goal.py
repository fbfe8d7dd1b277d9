"""Goals: named partial target states, and how agents pick them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from homestead.planning.heuristic import distance

if TYPE_CHECKING:
    from homestead.config import SimulationConfig
    from homestead.simulation.entities import Agent
    from homestead.simulation.world import WorldState


@dataclass(frozen=True)
class Goal:
    """A goal the agent wants to achieve.

    ``goal_state`` maps agent attribute names to targets. Numeric targets
    are met at or above the value; booleans and ``holding`` need an exact
    match; ``inventory`` maps item names to wanted counts.
    """

    name: str
    goal_state: dict[str, Any] = field(default_factory=dict)


SLEEP = Goal("Sleep", {"energy": 100})
DRINK = Goal("Drink", {"thirst": 100})
EAT = Goal("Eat", {"hunger": 80})
EAT_FULL = Goal("Eat", {"hunger": 100})
SOCIALISE = Goal("Socialise", {"social": 100})
BUILD_SHELTER = Goal("Build Shelter", {"has_shelter": True})


def goal_satisfied(state: WorldState, agent: Agent, goal: Goal) -> bool:
    """True when the agent is at zero distance from ``goal``."""
    return distance(state, agent, goal.goal_state) == 0


def choose_goal(agent: Agent, config: SimulationConfig) -> Goal:
    """Pick the most pressing goal for the agent.

    Needs are checked in order of how quickly neglecting them hurts: sleep,
    then drink, then food, then company. A contented agent tops up on food.
    """
    if agent.energy < config.sleep_below:
        return SLEEP
    if agent.thirst < config.drink_below:
        return DRINK
    if agent.hunger < config.eat_below:
        return EAT
    if agent.social < config.socialise_below:
        return SOCIALISE
    return EAT_FULL


def fallback_goals(agent: Agent, exclude: Goal | None = None) -> list[Goal]:
    """Other goals worth trying when the chosen one has no plan.

    Returns the need goals for every drive not yet full, followed by
    building a shelter if the agent has none. ``exclude`` is left out.
    """
    candidates: list[Goal] = []
    if agent.energy < 100:
        candidates.append(SLEEP)
    if agent.thirst < 100:
        candidates.append(DRINK)
    if agent.hunger < 100:
        candidates.append(EAT_FULL)
    if agent.social < 100:
        candidates.append(SOCIALISE)
    if not agent.has_shelter:
        candidates.append(BUILD_SHELTER)
    return [goal for goal in candidates if goal != exclude]
