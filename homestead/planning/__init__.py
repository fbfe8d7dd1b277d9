"""Goal-directed action planning for homestead agents.

This module implements a regression-style planner with:
- Graded preconditions and a numeric distance-to-goal heuristic
- Cheapest-first search over partial plans kept in an index-linked arena
- Strict execution and permissive look-ahead as separate operations
- Per-call statistics and run-level monitoring
"""

from __future__ import annotations

from homestead.planning.goal import Goal, choose_goal, fallback_goals, goal_satisfied
from homestead.planning.heuristic import distance, state_delta
from homestead.planning.monitor import PlanMonitor
from homestead.planning.planner import ActionPlanner, Plan, PlanningStats, plan
from homestead.planning.transition import execute, simulate

__all__ = [
    "Goal",
    "choose_goal",
    "fallback_goals",
    "goal_satisfied",
    "distance",
    "state_delta",
    "PlanMonitor",
    "ActionPlanner",
    "Plan",
    "PlanningStats",
    "plan",
    "execute",
    "simulate",
]
