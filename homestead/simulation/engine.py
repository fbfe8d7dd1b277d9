"""Simulation engine for the homestead world.

Manages the tick loop: drive decay, death, goal selection, planning,
walking to action targets, and performing actions. Each agent plans against
the world as it stood at the start of the tick; actions themselves are
applied to the live world in agent order.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace
from typing import Sequence

from homestead.config import SimulationConfig
from homestead.errors import EngineStateError
from homestead.planning.goal import Goal, choose_goal, fallback_goals, goal_satisfied
from homestead.planning.heuristic import state_delta
from homestead.planning.monitor import PlanMonitor
from homestead.planning.planner import ActionPlanner
from homestead.simulation.actions import ALL_ACTIONS, Action
from homestead.simulation.entities import Agent
from homestead.simulation.world import Position, WorldState, generate_world

logger = logging.getLogger(__name__)


@dataclass
class AgentTickRecord:
    """Record of one agent's turn in a tick."""

    agent_id: str
    event: str  # "dead" | "died" | "idle" | "targeting" | "arrived" | "moved" | "performed" | "invalidated"
    action_name: str | None = None
    goal_name: str | None = None
    position: Position = Position(0, 0)
    replanned: bool = False


@dataclass
class TickRecord:
    """Record of a single simulation tick."""

    tick: int
    time_of_day: float
    agent_records: list[AgentTickRecord] = field(default_factory=list)


@dataclass
class SimulationState:
    """Run-level bookkeeping."""

    tick: int = 0
    history: list[TickRecord] = field(default_factory=list)


class SimulationEngine:
    """Core simulation engine.

    Args:
        config: Simulation settings (defaults from environment)
        actions: Action catalog handed to the planner
        world: Start from this world instead of generating one
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        actions: Sequence[Action] = ALL_ACTIONS,
        world: WorldState | None = None,
    ):
        self.config = config or SimulationConfig()
        self.actions = tuple(actions)
        self.monitor = PlanMonitor()
        self.planner = ActionPlanner(
            self.actions,
            max_expansions=self.config.planner_max_expansions,
            monitor=self.monitor,
        )
        self._rng = random.Random(self.config.seed)
        self.world: WorldState | None = world
        self.state = SimulationState()

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def setup(self) -> None:
        """Generate the world (unless one was given) and spawn agents."""
        if self.world is None:
            self.world = generate_world(self.config, self._rng)
        if not self.world.agents:
            self.world = self.world.with_agents(
                tuple(self._spawn_agent(i) for i in range(self.config.num_agents))
            )
        logger.info(
            "World %dx%d ready with %d agent(s)",
            self.world.width,
            self.world.height,
            len(self.world.agents),
        )

    def _spawn_agent(self, index: int) -> Agent:
        assert self.world is not None
        row = self.world.height // 2
        column = min(self.world.width - 1, (index + 1) * self.world.width // (self.config.num_agents + 1))
        agent = Agent(
            agent_id=f"agent-{index}",
            name=f"settler {index}",
            position=Position(row, column),
            hunger=50 + self._rng.random() * 50,
            thirst=50 + self._rng.random() * 50,
            energy=self.config.initial_energy,
            social=self.config.initial_social,
        )
        return replace(agent, goal=choose_goal(agent, self.config))

    @property
    def agents(self) -> tuple[Agent, ...]:
        return self.world.agents if self.world is not None else ()

    @property
    def living_agents(self) -> list[Agent]:
        return [a for a in self.agents if a.alive]

    # ------------------------------------------------------------------
    # Tick loop
    # ------------------------------------------------------------------

    def is_over(self) -> bool:
        """Check if the run has hit its tick limit or every agent is dead."""
        if self.world is None:
            return False
        return self.state.tick >= self.config.max_ticks or not self.living_agents

    def step(self) -> TickRecord:
        """Advance the simulation by one tick."""
        if self.world is None:
            raise EngineStateError("setup() must be called before step()")

        world = self.world.advance_time(self.config.time_step)
        snapshot = world
        record = TickRecord(tick=self.state.tick, time_of_day=world.time_of_day)

        updated: list[Agent] = []
        for agent in snapshot.agents:
            world, agent, agent_record = self._update_agent(world, snapshot, agent)
            updated.append(agent)
            record.agent_records.append(agent_record)

        self.world = world.with_agents(tuple(updated))
        self.state.tick += 1
        self.state.history.append(record)
        return record

    def run(self, max_ticks: int | None = None) -> list[TickRecord]:
        """Run until ``max_ticks`` more ticks pass or the run is over."""
        if self.world is None:
            self.setup()
        records = []
        limit = max_ticks if max_ticks is not None else self.config.max_ticks
        for _ in range(limit):
            if self.is_over():
                break
            records.append(self.step())
        return records

    def _update_agent(
        self, world: WorldState, snapshot: WorldState, agent: Agent
    ) -> tuple[WorldState, Agent, AgentTickRecord]:
        """One agent's turn; returns the new live world, agent and record."""
        rec = AgentTickRecord(agent_id=agent.agent_id, event="idle", position=agent.position)

        if not agent.alive:
            rec.event = "dead"
            return world, agent, rec

        if agent.is_depleted():
            logger.info(
                "%s died (hunger=%.1f thirst=%.1f energy=%.1f)",
                agent.name,
                agent.hunger,
                agent.thirst,
                agent.energy,
            )
            rec.event = "died"
            return world, replace(agent, alive=False, plan=()), rec

        # Goal and plan are decided on the pre-decay agent, as at tick start.
        current = agent
        agent = agent.decay(
            self.config.hunger_decay,
            self.config.thirst_decay,
            self.config.energy_decay_day if world.is_daytime() else self.config.energy_decay_night,
            self.config.social_decay,
        )

        goal = current.goal
        if goal is None or goal_satisfied(snapshot, current, goal):
            goal = choose_goal(current, self.config)
            agent = replace(agent, goal=goal)

        if not current.plan:
            goal, new_plan = self._make_plan(current, snapshot, goal)
            agent = replace(agent, goal=goal, plan=new_plan)
            rec.replanned = True
            current = replace(current, plan=new_plan)
        rec.goal_name = goal.name

        if not current.plan:
            return world, agent, rec

        next_action = current.plan[0]
        rec.action_name = next_action.name

        if next_action.requires_in_range and not current.in_range:
            return self._approach(world, agent, next_action, rec)

        if next_action.is_performable(world, agent):
            outcome = next_action.apply(world, agent)
            remaining = agent.plan[1:]
            if not remaining:
                self.monitor.record_completion()
            rec.event = "performed"
            done = replace(outcome.agent, plan=remaining, in_range=False, destination=None)
            rec.position = done.position
            return outcome.state, done, rec

        logger.info("%s can no longer %s; discarding plan", agent.name, next_action.name)
        self.monitor.record_invalidation(next_action.name)
        rec.event = "invalidated"
        return world, replace(agent, plan=(), in_range=False, destination=None), rec

    def _make_plan(
        self, agent: Agent, snapshot: WorldState, goal: Goal
    ) -> tuple[Goal, tuple[Action, ...]]:
        """Plan for ``goal``, falling back to easier goals when it has no plan."""
        found = self.planner.plan(agent, snapshot, goal)
        if found is not None:
            return goal, found

        logger.info(
            "%s could not find a plan for %s (outstanding: %s)",
            agent.name,
            goal.name,
            state_delta(snapshot, agent, goal.goal_state),
        )
        for fallback in fallback_goals(agent, exclude=goal):
            found = self.planner.plan(agent, snapshot, fallback)
            if found is not None:
                self.monitor.record_fallback()
                logger.info("%s falls back to %s", agent.name, fallback.name)
                return fallback, found
        return goal, ()

    def _approach(
        self, world: WorldState, agent: Agent, action: Action, rec: AgentTickRecord
    ) -> tuple[WorldState, Agent, AgentTickRecord]:
        """Walk toward the target of ``action``, one step per tick."""
        if agent.destination is None:
            target = action.find_target(world, agent) if action.find_target else None
            if target is None:
                logger.info("%s found no target for %s; discarding plan", agent.name, action.name)
                self.monitor.record_invalidation(action.name)
                rec.event = "invalidated"
                return world, replace(agent, plan=()), rec
            rec.event = "targeting"
            return world, replace(agent, destination=target), rec

        if agent.position == agent.destination:
            rec.event = "arrived"
            return world, replace(agent, destination=None, in_range=True), rec

        moved = replace(agent, position=agent.position.step_towards(agent.destination))
        rec.event = "moved"
        rec.position = moved.position
        return world, moved, rec
