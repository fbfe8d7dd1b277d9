"""Entities in the simulation: the Agent and its drives.

The Agent is an immutable record. Actions, the engine, and the planner all
derive new agents with ``dataclasses.replace`` (or the helpers below) instead
of mutating one in place.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from homestead.simulation.world import Position

if TYPE_CHECKING:
    from homestead.planning.goal import Goal
    from homestead.simulation.actions import Action

DRIVES = ("hunger", "thirst", "energy", "social")

# Running out of any of these is fatal; loneliness is not.
VITAL_DRIVES = ("hunger", "thirst", "energy")

DRIVE_MIN = 0.0
DRIVE_MAX = 100.0


class Equipment(str, enum.Enum):
    """Items an agent can hold in its single hand slot."""

    AXE = "axe"


def clamp_drive(value: float) -> float:
    """Clamp a drive value into the 0-100 range."""
    return max(DRIVE_MIN, min(DRIVE_MAX, value))


@dataclass(frozen=True)
class Agent:
    """An agent that must keep its drives up to survive.

    Drives run from 0 (critical) to 100 (fully satisfied).
    """

    agent_id: str = "agent-0"
    name: str = "settler"
    position: Position = Position(0, 0)

    # Drives
    hunger: float = 80.0  # 0 = starving, 100 = full
    thirst: float = 80.0  # 0 = dehydrated, 100 = hydrated
    energy: float = 90.0  # 0 = exhausted, 100 = rested
    social: float = 80.0  # 0 = lonely, 100 = content

    # Planning-relevant possessions
    holding: Equipment | None = None
    has_shelter: bool = False
    shelter_location: Position | None = None
    inventory: dict[str, int] = field(default_factory=dict)

    # Execution state, owned by the engine
    alive: bool = True
    goal: Goal | None = None
    plan: tuple[Action, ...] = ()
    destination: Position | None = None
    in_range: bool = False

    def count(self, item: str) -> int:
        """How many of ``item`` the agent carries (0 if none)."""
        return self.inventory.get(item, 0)

    def with_item(self, item: str, delta: int) -> Agent:
        """Return a copy with ``delta`` added to the count of ``item``.

        Counts are not floored: the planner simulates effects whose
        preconditions may not hold, and a negative count is what lets it see
        that spending materials moves it further from a goal.
        """
        inventory = dict(self.inventory)
        inventory[item] = inventory.get(item, 0) + delta
        return replace(self, inventory=inventory)

    def with_drive(self, drive: str, value: float) -> Agent:
        """Return a copy with ``drive`` set to ``value`` (clamped to 0-100)."""
        return replace(self, **{drive: clamp_drive(value)})

    def drives(self) -> dict[str, float]:
        """Current drive values by name."""
        return {name: getattr(self, name) for name in DRIVES}

    def worst_vital(self) -> float:
        """Lowest of hunger, thirst and energy."""
        return min(getattr(self, name) for name in VITAL_DRIVES)

    def is_depleted(self) -> bool:
        """True once any vital drive has hit zero."""
        return any(getattr(self, name) <= DRIVE_MIN for name in VITAL_DRIVES)

    def decay(
        self,
        hunger_rate: float,
        thirst_rate: float,
        energy_rate: float,
        social_rate: float = 0.0,
    ) -> Agent:
        """Apply one tick of drive decay.

        Args:
            hunger_rate: Amount to decrease hunger
            thirst_rate: Amount to decrease thirst
            energy_rate: Amount to decrease energy
            social_rate: Amount to decrease social

        Returns:
            A new agent with decayed (and clamped) drives
        """
        return replace(
            self,
            hunger=clamp_drive(self.hunger - hunger_rate),
            thirst=clamp_drive(self.thirst - thirst_rate),
            energy=clamp_drive(self.energy - energy_rate),
            social=clamp_drive(self.social - social_rate),
        )
