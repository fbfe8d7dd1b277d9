"""Planning metrics tracking."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from homestead.planning.planner import PlanningStats


class PlanMonitor:
    """Tracks planner calls and plan execution outcomes across a run."""

    def __init__(self):
        self._history: list[PlanningStats] = []
        self._invalidations: Counter[str] = Counter()
        self._completed_count: int = 0
        self._fallback_count: int = 0

    def record(self, stats: PlanningStats) -> None:
        """Record the outcome of one planning call."""
        self._history.append(stats)

    def record_invalidation(self, action_name: str) -> None:
        """Record a plan discarded because ``action_name`` became unperformable."""
        self._invalidations[action_name] += 1

    def record_completion(self) -> None:
        """Record a plan executed to its last action."""
        self._completed_count += 1

    def record_fallback(self) -> None:
        """Record a fallback goal being planned after the chosen goal failed."""
        self._fallback_count += 1

    @property
    def history(self) -> list[PlanningStats]:
        return list(self._history)

    @property
    def planning_stats(self) -> dict:
        """Summary stats for the run."""
        total = len(self._history)
        found = sum(1 for s in self._history if s.outcome == "found")
        exhausted = sum(1 for s in self._history if s.outcome == "exhausted")
        expansions = sum(s.expansions for s in self._history)

        return {
            "total_calls": total,
            "plans_found": found,
            "no_plan": total - found,
            "budget_exhausted": exhausted,
            "success_rate": found / total if total > 0 else 0.0,
            "mean_expansions": expansions / total if total > 0 else 0.0,
            "invalidated_plans": sum(self._invalidations.values()),
            "invalidations_by_action": dict(self._invalidations),
            "completed_plans": self._completed_count,
            "fallback_goals": self._fallback_count,
        }
