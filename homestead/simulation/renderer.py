"""Rich terminal renderer for the homestead simulation."""

from __future__ import annotations

import io
import sys
from typing import TYPE_CHECKING

from rich.console import Console

from homestead.simulation.entities import Agent, Equipment
from homestead.simulation.world import EntityKind, Position

if TYPE_CHECKING:
    from homestead.simulation.engine import SimulationEngine


def _make_console() -> Console:
    """Create a Rich Console that works on Windows (force UTF-8)."""
    if sys.platform == "win32" and hasattr(sys.stdout, "buffer"):
        utf8_stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
        return Console(file=utf8_stdout, force_terminal=True)
    return Console()


# Entity characters for the map
ENTITY_CHARS = {
    EntityKind.APPLE: ("a", "red"),
    EntityKind.TREE: ("T", "dark_green"),
    EntityKind.BRANCH: ("\\", "yellow4"),
    EntityKind.STONE: ("o", "grey50"),
    EntityKind.HOUSE: ("H", "yellow"),
    EntityKind.WELL: ("W", "blue"),
}

# Worst vital drive must be strictly above the threshold for the mood.
MOODS = [
    (95, "full", "\U0001f60b"),
    (80, "happy", "\U0001f600"),
    (60, "slightly happy", "\U0001f642"),
    (50, "neutral", "\U0001f610"),
    (40, "slightly unhappy", "\U0001f641"),
    (20, "unhappy", "☹️"),
]
VERY_UNHAPPY = ("very unhappy", "\U0001f62b")
DEAD = ("dead", "\U0001f635")

MOOD_COLORS = {
    "full": "bold green",
    "happy": "green",
    "slightly happy": "green",
    "neutral": "yellow",
    "slightly unhappy": "yellow",
    "unhappy": "red",
    "very unhappy": "bold red",
    "dead": "grey50",
}


def agent_mood(agent: Agent) -> tuple[str, str]:
    """Mood label and face for an agent, from its worst vital drive."""
    if not agent.alive:
        return DEAD
    worst = agent.worst_vital()
    for threshold, label, face in MOODS:
        if worst > threshold:
            return label, face
    return VERY_UNHAPPY


class Renderer:
    """Rich terminal renderer: the grid plus a panel for one agent."""

    def __init__(self, console: Console | None = None):
        self.console = console or _make_console()
        self._follow_agent_idx: int = 0

    def set_follow(self, idx: int) -> None:
        """Set which agent index the side panel describes."""
        self._follow_agent_idx = idx

    def render_frame(self, engine: SimulationEngine) -> str:
        """Render one frame of the simulation as a markup string."""
        parts = [self._render_header(engine), "", self._render_map(engine), ""]
        followed = self._get_followed_agent(engine)
        if followed:
            parts.append(self._render_agent_panel(followed))
        return "\n".join(parts)

    def _render_header(self, engine: SimulationEngine) -> str:
        world = engine.world
        assert world is not None
        period = "day" if world.is_daytime() else "night"
        alive = len(engine.living_agents)
        dead = len(engine.agents) - alive
        return (
            f"  homestead | Tick {engine.state.tick:>5} | {world.time_of_day:5.1f}h ({period}) | "
            f"Alive: {alive} | Dead: {dead}"
        )

    def _render_map(self, engine: SimulationEngine) -> str:
        world = engine.world
        assert world is not None
        agents_at: dict[Position, Agent] = {}
        for agent in world.agents:
            agents_at.setdefault(agent.position, agent)  # first agent at a position wins

        lines = []
        for row in range(world.height):
            line = "  "
            for column in range(world.width):
                position = Position(row, column)
                agent = agents_at.get(position)
                if agent is not None:
                    label, _ = agent_mood(agent)
                    symbol = "x" if not agent.alive else "@"
                    style = MOOD_COLORS[label]
                    if agent.holding == Equipment.AXE:
                        style += " underline"
                    line += f"[{style}]{symbol}[/]"
                    continue
                entity = world.entity_at(position)
                if entity is None:
                    line += " "
                else:
                    char, color = ENTITY_CHARS[entity.kind]
                    line += f"[{color}]{_escape(char)}[/]"
            lines.append(line)
        return "\n".join(lines)

    def _render_agent_panel(self, agent: Agent) -> str:
        label, face = agent_mood(agent)
        lines = [f"  === {agent.name} {face} ({label}) ==="]
        goal_name = agent.goal.name if agent.goal else "(none)"
        lines.append(f"  Goal: [bold]{goal_name}[/bold]")
        if agent.plan:
            for action in agent.plan:
                lines.append(f"    - {action.name}")
        else:
            lines.append("    (no plan)")
        lines.append(self._render_drive_bars(agent))
        lines.append(f"  Shelter: {agent.has_shelter}")
        holding = agent.holding.value if agent.holding else "nothing"
        lines.append(f"  Holding: {holding}")
        items = {k: v for k, v in sorted(agent.inventory.items()) if v}
        if items:
            lines.append("  Inventory: " + ", ".join(f"{k}: {v}" for k, v in items.items()))
        else:
            lines.append("  Inventory: (empty)")
        return "\n".join(lines)

    def _render_drive_bars(self, agent: Agent) -> str:
        bars = []
        for name, value in agent.drives().items():
            bar_len = 20
            filled = int(value / 100 * bar_len)
            empty = bar_len - filled
            bars.append(f"  {name.capitalize():>6}: [{'█' * filled}{'░' * empty}] {value:5.1f}")
        return "\n".join(bars)

    def _get_followed_agent(self, engine: SimulationEngine) -> Agent | None:
        agents = engine.agents
        if not agents:
            return None
        return agents[self._follow_agent_idx % len(agents)]

    def print_frame(self, engine: SimulationEngine) -> None:
        """Clear and print one frame."""
        self.console.clear()
        self.console.print(self.render_frame(engine))

    def print_summary(self, engine: SimulationEngine) -> None:
        """Print end-of-run summary."""
        self.console.print("\n  [bold cyan]=== homestead: SIMULATION COMPLETE ===[/bold cyan]")
        self.console.print(f"  Duration: {engine.state.tick} ticks")
        self.console.print(f"  Agents alive: {len(engine.living_agents)}")
        for agent in engine.agents:
            status = "[green]ALIVE[/green]" if agent.alive else "[red]DEAD[/red]"
            shelter = "sheltered" if agent.has_shelter else "no shelter"
            self.console.print(f"    {agent.name:>16} | {status} | {shelter}")

        stats = engine.monitor.planning_stats
        self.console.print("\n  [bold]Planning:[/bold]")
        self.console.print(
            f"    Calls: {stats['total_calls']} | Found: {stats['plans_found']} | "
            f"Exhausted: {stats['budget_exhausted']} | "
            f"Mean expansions: {stats['mean_expansions']:.1f}"
        )
        self.console.print(
            f"    Completed: {stats['completed_plans']} | "
            f"Invalidated: {stats['invalidated_plans']} | "
            f"Fallbacks: {stats['fallback_goals']}"
        )


def _escape(char: str) -> str:
    # A lone backslash would escape the closing markup tag.
    return "\\\\" if char == "\\" else char
