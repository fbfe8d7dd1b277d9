"""Search nodes for the planner: an arena of partial plans and a cost queue.

A node is one level of a partial backward plan. It holds the actions
prepended at that level and, unless it is the root level, the action it is
trying to make performable (``to_perform``) plus the index of the level it
extends (``next_index``). Nodes never change once added; refining a node
always adds a new one that points at the old.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass
from typing import Callable

from homestead.simulation.actions import Action


@dataclass(frozen=True)
class SolutionNode:
    """One level of a partial plan."""

    actions: tuple[Action, ...] = ()
    to_perform: Action | None = None
    next_index: int | None = None
    cost: float = 0.0  # every action on this level and all linked levels

    @property
    def is_root_level(self) -> bool:
        return self.next_index is None


class SolutionArena:
    """Owns every node created during one planning call."""

    def __init__(self) -> None:
        self._nodes: list[SolutionNode] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, index: int) -> SolutionNode:
        return self._nodes[index]

    def add(
        self,
        actions: tuple[Action, ...] = (),
        to_perform: Action | None = None,
        next_index: int | None = None,
    ) -> int:
        """Create a node and return its index.

        The stored cost covers this level's actions plus everything reachable
        through ``next_index``.
        """
        cost = sum(action.cost for action in actions)
        if next_index is not None:
            cost += self._nodes[next_index].cost
        self._nodes.append(
            SolutionNode(actions=actions, to_perform=to_perform, next_index=next_index, cost=cost)
        )
        return len(self._nodes) - 1

    def extend(self, index: int, actions: tuple[Action, ...]) -> int:
        """Copy of node ``index`` with a different action list for its level."""
        node = self._nodes[index]
        return self.add(actions, node.to_perform, node.next_index)

    def flatten(self, index: int) -> tuple[Action, ...]:
        """Forward-order plan: this level's actions, then each linked level's."""
        plan: list[Action] = []
        current: int | None = index
        while current is not None:
            node = self._nodes[current]
            plan.extend(node.actions)
            current = node.next_index
        return tuple(plan)

    def depth(self, index: int) -> int:
        """Number of levels from this node down to the root level."""
        levels = 0
        current: int | None = index
        while current is not None:
            levels += 1
            current = self._nodes[current].next_index
        return levels


def node_cost(node: SolutionNode) -> float:
    return node.cost


class SolutionQueue:
    """Min-priority queue of arena indices ordered by an extracted key.

    Entries with equal keys come out in insertion order.
    """

    def __init__(self, arena: SolutionArena, key: Callable[[SolutionNode], float] = node_cost):
        self._arena = arena
        self._key = key
        self._heap: list[tuple[float, int, int]] = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def push(self, index: int) -> None:
        heapq.heappush(self._heap, (self._key(self._arena[index]), next(self._counter), index))

    def pop(self) -> int:
        """Index of the lowest-key node. Raises IndexError when empty."""
        _, _, index = heapq.heappop(self._heap)
        return index
