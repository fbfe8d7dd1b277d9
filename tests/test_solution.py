"""Tests for the solution arena and its cost-ordered queue."""

from __future__ import annotations

from dataclasses import replace

import pytest

from homestead.planning.solution import SolutionArena, SolutionQueue
from homestead.simulation.actions import BUILD_SHELTER, FELL_TREE, GATHER_STONE, MAKE_AXE


class TestSolutionArena:
    """Node creation, linking and flattening."""

    def test_root_node_is_empty(self):
        arena = SolutionArena()
        root = arena.add()
        node = arena[root]
        assert node.actions == ()
        assert node.to_perform is None
        assert node.is_root_level
        assert node.cost == 0
        assert arena.flatten(root) == ()

    def test_cost_includes_linked_levels(self):
        arena = SolutionArena()
        base = arena.add((FELL_TREE, BUILD_SHELTER))
        level = arena.add((MAKE_AXE,), to_perform=FELL_TREE, next_index=base)
        assert arena[base].cost == 2
        assert arena[level].cost == 3

    def test_flatten_puts_own_actions_first(self):
        arena = SolutionArena()
        base = arena.add((FELL_TREE, FELL_TREE, BUILD_SHELTER))
        mid = arena.add((MAKE_AXE,), to_perform=FELL_TREE, next_index=base)
        top = arena.add((GATHER_STONE,), to_perform=MAKE_AXE, next_index=mid)
        assert arena.flatten(top) == (GATHER_STONE, MAKE_AXE, FELL_TREE, FELL_TREE, BUILD_SHELTER)
        assert arena.depth(top) == 3

    def test_extend_leaves_original_untouched(self):
        arena = SolutionArena()
        base = arena.add((BUILD_SHELTER,))
        level = arena.add((), to_perform=BUILD_SHELTER, next_index=base)
        extended = arena.extend(level, (FELL_TREE,))

        assert arena[level].actions == ()
        assert arena[extended].actions == (FELL_TREE,)
        assert arena[extended].to_perform is BUILD_SHELTER
        assert arena[extended].next_index == base
        assert len(arena) == 3

    def test_costs_follow_action_costs(self):
        arena = SolutionArena()
        pricey = replace(GATHER_STONE, cost=2.5)
        index = arena.add((pricey, MAKE_AXE))
        assert arena[index].cost == pytest.approx(3.5)


class TestSolutionQueue:
    """Ordering by extracted cost key."""

    def test_pops_cheapest_first(self):
        arena = SolutionArena()
        queue = SolutionQueue(arena)
        expensive = arena.add((FELL_TREE, FELL_TREE))
        cheap = arena.add((FELL_TREE,))
        queue.push(expensive)
        queue.push(cheap)
        assert queue.pop() == cheap
        assert queue.pop() == expensive
        assert not queue

    def test_equal_costs_pop_in_insertion_order(self):
        arena = SolutionArena()
        queue = SolutionQueue(arena)
        indices = [arena.add((action,)) for action in (MAKE_AXE, FELL_TREE, GATHER_STONE)]
        for index in indices:
            queue.push(index)
        assert [queue.pop() for _ in range(3)] == indices

    def test_custom_key(self):
        """Ordering comes only from the key function."""
        arena = SolutionArena()
        queue = SolutionQueue(arena, key=lambda node: -node.cost)
        short = arena.add((FELL_TREE,))
        long = arena.add((FELL_TREE, FELL_TREE, FELL_TREE))
        queue.push(short)
        queue.push(long)
        assert queue.pop() == long
        assert len(queue) == 1

    def test_pop_empty_raises(self):
        queue = SolutionQueue(SolutionArena())
        with pytest.raises(IndexError):
            queue.pop()
