"""World grid for the homestead simulation.

The world is an immutable snapshot: a grid of cells, each holding at most one
entity (apple, tree, branch, stone, or an agent-built house or well), plus the
agents living on it and the time of day. Every change produces a new
``WorldState``; nothing here mutates in place, which lets the planner look
ahead freely against the same snapshot.
"""

from __future__ import annotations

import enum
import random
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from homestead.config import SimulationConfig
    from homestead.simulation.entities import Agent


class Position(NamedTuple):
    """A grid coordinate."""

    row: int
    column: int

    def distance_to(self, other: Position) -> int:
        """Manhattan distance to another position."""
        return abs(self.row - other.row) + abs(self.column - other.column)

    def step_towards(self, other: Position) -> Position:
        """Return the position one step (diagonals allowed) closer to ``other``."""
        return Position(
            self.row + _sign(other.row - self.row),
            self.column + _sign(other.column - self.column),
        )


def _sign(n: int) -> int:
    if n < 0:
        return -1
    if n > 0:
        return 1
    return 0


class EntityKind(str, enum.Enum):
    """Things that can occupy a cell."""

    APPLE = "apple"
    TREE = "tree"
    BRANCH = "branch"
    STONE = "stone"
    HOUSE = "house"  # agent-built
    WELL = "well"  # agent-built


@dataclass(frozen=True)
class Entity:
    """A single entity sitting on a cell."""

    kind: EntityKind
    position: Position


@dataclass(frozen=True)
class WorldState:
    """Immutable snapshot of the world."""

    width: int
    height: int
    cells: tuple[tuple[Entity | None, ...], ...]
    agents: tuple[Agent, ...] = ()
    time_of_day: float = 8.0

    @classmethod
    def empty(cls, width: int, height: int, time_of_day: float = 8.0) -> WorldState:
        """Create a world with no entities and no agents."""
        cells = tuple(tuple(None for _ in range(width)) for _ in range(height))
        return cls(width=width, height=height, cells=cells, time_of_day=time_of_day)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def in_bounds(self, position: Position) -> bool:
        return 0 <= position.row < self.height and 0 <= position.column < self.width

    def entity_at(self, position: Position) -> Entity | None:
        """Get the entity at the given position, or None if empty/out of bounds."""
        if not self.in_bounds(position):
            return None
        return self.cells[position.row][position.column]

    def entities(self, kind: EntityKind | None = None) -> list[Entity]:
        """All entities in row-major order, optionally filtered by kind."""
        return [
            entity
            for row in self.cells
            for entity in row
            if entity is not None and (kind is None or entity.kind == kind)
        ]

    def has_entity(self, kind: EntityKind) -> bool:
        """Check whether at least one entity of ``kind`` exists anywhere."""
        return any(entity is not None and entity.kind == kind for row in self.cells for entity in row)

    def find_nearest(self, kind: EntityKind, origin: Position) -> Position | None:
        """Position of the closest entity of ``kind``; ties go to row-major order."""
        candidates = self.entities(kind)
        if not candidates:
            return None
        nearest = min(candidates, key=lambda e: e.position.distance_to(origin))
        return nearest.position

    def is_daytime(self) -> bool:
        return 7 < self.time_of_day < 20

    # ------------------------------------------------------------------
    # Updates (all return a new WorldState)
    # ------------------------------------------------------------------

    def with_entity(self, kind: EntityKind, position: Position) -> WorldState:
        """Place an entity, replacing whatever occupied the cell."""
        if not self.in_bounds(position):
            return self
        return self._with_cell(position, Entity(kind, position))

    def without_entity_at(self, position: Position, kind: EntityKind) -> WorldState:
        """Remove the entity at ``position`` if it is of ``kind``."""
        entity = self.entity_at(position)
        if entity is None or entity.kind != kind:
            return self
        return self._with_cell(position, None)

    def with_agents(self, agents: tuple[Agent, ...]) -> WorldState:
        return replace(self, agents=tuple(agents))

    def advance_time(self, hours: float) -> WorldState:
        return replace(self, time_of_day=(self.time_of_day + hours) % 24)

    def _with_cell(self, position: Position, value: Entity | None) -> WorldState:
        row = list(self.cells[position.row])
        row[position.column] = value
        cells = list(self.cells)
        cells[position.row] = tuple(row)
        return replace(self, cells=tuple(cells))


def generate_world(config: SimulationConfig, rng: random.Random) -> WorldState:
    """Scatter apples, trees, branches, and stones over a fresh grid.

    Args:
        config: Supplies the grid size, start time, and spawn thresholds
        rng: Seeded random source for reproducible worlds

    Returns:
        A world with entities but no agents
    """
    rows = []
    for row in range(config.world_height):
        cells: list[Entity | None] = []
        for column in range(config.world_width):
            r = rng.random()
            position = Position(row, column)
            if r > config.apple_threshold:
                cells.append(Entity(EntityKind.APPLE, position))
            elif r > config.tree_threshold:
                cells.append(Entity(EntityKind.TREE, position))
            elif r > config.branch_threshold:
                cells.append(Entity(EntityKind.BRANCH, position))
            elif r > config.stone_threshold:
                cells.append(Entity(EntityKind.STONE, position))
            else:
                cells.append(None)
        rows.append(tuple(cells))

    return WorldState(
        width=config.world_width,
        height=config.world_height,
        cells=tuple(rows),
        time_of_day=config.start_time_of_day,
    )
