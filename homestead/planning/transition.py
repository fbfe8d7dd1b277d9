"""Applying action sequences to a snapshot.

Two operations with different contracts:

* ``execute`` is what really happens: actions run in order and the run stops
  at the first one whose precondition is not met.
* ``simulate`` is look-ahead only: every effect fires whether or not it could
  have been performed. The planner uses it to score candidates; nothing
  should use it to advance the real world.
"""

from __future__ import annotations

from typing import Iterable

from homestead.errors import InvalidActionError
from homestead.simulation.actions import Action, Snapshot


def deficit(action: Action, snapshot: Snapshot) -> float:
    """Precondition deficit of ``action`` in ``snapshot``, checked non-negative."""
    missing = action.deficit(snapshot.state, snapshot.agent)
    if missing < 0:
        raise InvalidActionError(action.name, f"negative precondition deficit {missing}")
    return missing


def execute(actions: Iterable[Action], snapshot: Snapshot) -> Snapshot:
    """Apply actions in order, stopping before the first blocked one."""
    current = snapshot
    for action in actions:
        if deficit(action, current) != 0:
            break
        current = action.apply(current.state, current.agent)
    return current


def simulate(actions: Iterable[Action], snapshot: Snapshot) -> Snapshot:
    """Apply every action's effect, ignoring preconditions."""
    current = snapshot
    for action in actions:
        current = action.apply(current.state, current.agent)
    return current


def apply(actions: Iterable[Action], snapshot: Snapshot, strict: bool) -> Snapshot:
    """``execute`` when ``strict``, ``simulate`` otherwise."""
    if strict:
        return execute(actions, snapshot)
    return simulate(actions, snapshot)


def first_blocked(actions: Iterable[Action], snapshot: Snapshot) -> int | None:
    """Index of the action ``execute`` would stop on, or None if all run."""
    current = snapshot
    for index, action in enumerate(actions):
        if deficit(action, current) != 0:
            return index
        current = action.apply(current.state, current.agent)
    return None
