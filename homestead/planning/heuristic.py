"""Distance heuristic: how far an agent is from a goal state.

The same number drives both the search order and the success test: a
distance of exactly 0 means the goal is satisfied.
"""

from __future__ import annotations

from numbers import Number
from typing import TYPE_CHECKING, Any

from homestead.errors import UnknownGoalFieldError

if TYPE_CHECKING:
    from homestead.simulation.entities import Agent
    from homestead.simulation.world import WorldState

# Drives live on a 0-100 scale; dividing by this keeps each numeric field's
# contribution within 0-1, comparable to a single missing boolean.
NUMERIC_SCALE = 100.0

_MISSING = object()


def _agent_value(agent: Agent, key: str) -> Any:
    value = getattr(agent, key, _MISSING)
    if value is _MISSING:
        raise UnknownGoalFieldError(key)
    return value


def check_goal_fields(agent: Agent, goal_state: dict[str, Any], goal_name: str | None = None) -> None:
    """Raise ``UnknownGoalFieldError`` for any key the agent does not have."""
    for key in goal_state:
        if key != "inventory" and not hasattr(agent, key):
            raise UnknownGoalFieldError(key, goal_name)


def _is_numeric(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def distance(state: WorldState, agent: Agent, goal_state: dict[str, Any]) -> float:
    """Remaining work between the agent and ``goal_state``.

    Per field:

    * ``inventory``: sum of ``|target - count|`` over the wanted items.
    * ``holding``, booleans and other discrete values: 0 on a match, else 1.
    * numbers: ``|target - value| / 100`` while below target.

    A numeric field that already meets its target makes the whole distance
    0, regardless of the other fields.

    Raises:
        UnknownGoalFieldError: a key names no agent attribute
    """
    total = 0.0

    for key, target in goal_state.items():
        if key == "inventory":
            for item, wanted in target.items():
                total += abs(wanted - agent.count(item))
            continue

        value = _agent_value(agent, key)

        if key == "holding":
            total += 0 if value == target else 1
            continue

        if isinstance(target, bool):
            total += 0 if value == target else 1
        elif _is_numeric(target):
            if value >= target:
                return 0
            total += abs(target - value) / NUMERIC_SCALE
        else:
            total += 0 if value == target else 1

    return total


def state_delta(state: WorldState, agent: Agent, goal_state: dict[str, Any]) -> dict[str, Any]:
    """What is still outstanding for each goal field.

    Only non-zero entries are kept. Inventory entries hold the signed count
    still missing, ``holding`` holds the wanted item, numbers hold their
    scaled gap and booleans 1.
    """
    output: dict[str, Any] = {}

    for key, target in goal_state.items():
        if key == "inventory":
            missing = {
                item: wanted - agent.count(item)
                for item, wanted in target.items()
                if wanted - agent.count(item) != 0
            }
            if missing:
                output["inventory"] = missing
            continue

        value = _agent_value(agent, key)

        if key == "holding":
            if value != target:
                output[key] = target
            continue

        if _is_numeric(target):
            gap = max(0.0, target - value) / NUMERIC_SCALE
            if gap:
                output[key] = gap
        elif value != target:
            output[key] = 1

    return output


def is_satisfied(state: WorldState, agent: Agent, goal_state: dict[str, Any]) -> bool:
    return distance(state, agent, goal_state) == 0
