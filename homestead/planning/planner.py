"""Goal-directed action planner.

Backward-chaining search over partial plans, cheapest first. Each search
node is a level of a partial plan that is either working on the goal itself
(the root level) or on making one previously chosen action performable.
Candidates are scored with graded measures rather than yes/no checks, so an
action that only narrows a gap (the first of two stones) still counts as
progress.

For a popped node:

1. Flatten it into a forward plan and ``execute`` it from the real
   snapshot. Zero distance to the goal ends the search.
2. Otherwise measure what the node is fixing: goal distance on the root
   level, the ``to_perform`` action's deficit on any other level, both
   taken after ``simulate``-ing the node's own actions.
3. Prepend each catalog action to the node's actions and re-measure.
   A candidate that closes the gap opens a new level aimed at making that
   action performable; one that only narrows it extends the current level;
   the rest are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Sequence

from homestead.errors import InvalidActionError, PlanningError
from homestead.planning.heuristic import check_goal_fields, distance
from homestead.planning.solution import SolutionArena, SolutionNode, SolutionQueue
from homestead.planning.transition import deficit, execute, simulate
from homestead.simulation.actions import Action, Snapshot

if TYPE_CHECKING:
    from homestead.planning.goal import Goal
    from homestead.planning.monitor import PlanMonitor
    from homestead.simulation.entities import Agent
    from homestead.simulation.world import WorldState

logger = logging.getLogger(__name__)

DEFAULT_MAX_EXPANSIONS = 5000

Plan = tuple[Action, ...]


@dataclass
class PlanningStats:
    """What one planning call did."""

    goal_name: str
    outcome: str = "pending"  # "found" | "unreachable" | "exhausted"
    expansions: int = 0  # nodes popped from the queue
    pushed: int = 0  # candidates queued
    pruned: int = 0  # candidates dropped for making no progress
    plan_length: int = 0
    plan_cost: float = 0.0


class ActionPlanner:
    """Plans action sequences over a fixed catalog.

    Args:
        actions: The catalog, in the order candidates are tried
        max_expansions: Queue pops allowed per call before giving up
        monitor: Optional sink for per-call statistics
    """

    def __init__(
        self,
        actions: Sequence[Action],
        max_expansions: int = DEFAULT_MAX_EXPANSIONS,
        monitor: PlanMonitor | None = None,
    ):
        for action in actions:
            if action.cost < 0:
                raise InvalidActionError(action.name, f"negative cost {action.cost}")
        if max_expansions < 1:
            raise ValueError("max_expansions must be at least 1")
        self.actions: tuple[Action, ...] = tuple(actions)
        self.max_expansions = max_expansions
        self.monitor = monitor
        self.last_stats: PlanningStats | None = None

    def plan(self, agent: Agent, state: WorldState, goal: Goal) -> Plan | None:
        """Find a cheapest-first plan that takes ``agent`` to ``goal``.

        Returns:
            The actions in execution order (empty if the goal already holds),
            or None when the goal is out of reach or the expansion budget
            ran out
        """
        origin = Snapshot(state=state, agent=agent)
        goal_state = goal.goal_state
        check_goal_fields(agent, goal_state, goal.name)
        stats = PlanningStats(goal_name=goal.name)

        arena = SolutionArena()
        queue = SolutionQueue(arena)
        queue.push(arena.add())

        while queue:
            if stats.expansions >= self.max_expansions:
                logger.warning(
                    "Planner gave up on %r after %d expansions (%d nodes queued)",
                    goal.name,
                    stats.expansions,
                    len(queue),
                )
                return self._finish(stats, "exhausted", None)

            index = queue.pop()
            stats.expansions += 1
            node = arena[index]

            candidate_plan = arena.flatten(index)
            reached = execute(candidate_plan, origin)
            if distance(reached.state, reached.agent, goal_state) == 0:
                found = _shortest_prefix(candidate_plan, origin, goal_state)
                return self._finish(stats, "found", found)

            measure = self._progress_measure(node, goal_state)
            before = measure(simulate(node.actions, origin))

            for action in self.actions:
                candidate = (action,) + node.actions
                after = measure(simulate(candidate, origin))
                if before - after <= 0:
                    stats.pruned += 1
                    continue

                extended = arena.extend(index, candidate)
                if after == 0:
                    queue.push(arena.add(to_perform=action, next_index=extended))
                else:
                    queue.push(extended)
                stats.pushed += 1

        logger.debug("No plan for %r: search space exhausted", goal.name)
        return self._finish(stats, "unreachable", None)

    def _progress_measure(
        self, node: SolutionNode, goal_state: dict
    ) -> Callable[[Snapshot], float]:
        if node.is_root_level:
            return lambda snapshot: distance(snapshot.state, snapshot.agent, goal_state)
        to_perform = node.to_perform
        if to_perform is None:
            raise PlanningError("non-root solution node has no action to enable")
        return lambda snapshot: deficit(to_perform, snapshot)

    def _finish(self, stats: PlanningStats, outcome: str, plan: Plan | None) -> Plan | None:
        stats.outcome = outcome
        if plan is not None:
            stats.plan_length = len(plan)
            stats.plan_cost = sum(action.cost for action in plan)
            logger.debug(
                "Planned %r in %d expansions: %s",
                stats.goal_name,
                stats.expansions,
                [action.name for action in plan],
            )
        self.last_stats = stats
        if self.monitor is not None:
            self.monitor.record(stats)
        return plan


def _shortest_prefix(candidate_plan: Plan, origin: Snapshot, goal_state: dict) -> Plan:
    """Cut ``candidate_plan`` after the first action that reaches the goal.

    Strict execution stops at a blocked action, so anything from there on
    never ran and is not part of the answer.
    """
    current = origin
    if distance(current.state, current.agent, goal_state) == 0:
        return ()
    for index, action in enumerate(candidate_plan):
        if deficit(action, current) != 0:
            break
        current = action.apply(current.state, current.agent)
        if distance(current.state, current.agent, goal_state) == 0:
            return candidate_plan[: index + 1]
    return candidate_plan


def plan(
    agent: Agent,
    state: WorldState,
    goal: Goal,
    actions: Sequence[Action] | None = None,
    max_expansions: int = DEFAULT_MAX_EXPANSIONS,
) -> Plan | None:
    """One-off planning call; defaults to the homestead catalog."""
    if actions is None:
        from homestead.simulation.actions import ALL_ACTIONS

        actions = ALL_ACTIONS
    return ActionPlanner(actions, max_expansions=max_expansions).plan(agent, state, goal)
