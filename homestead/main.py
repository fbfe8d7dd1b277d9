"""Entry point for the homestead simulation."""

from __future__ import annotations

import logging
import sys
import time

from homestead.config import SimulationConfig
from homestead.errors import ValidationError
from homestead.simulation.engine import SimulationEngine
from homestead.simulation.renderer import Renderer

USAGE = """homestead v0.1.0

Usage: python -m homestead.main [OPTIONS]

Options:
  --agents=N            Number of agents (default: 1)
  --seed=N              Random seed (default: 42)
  --ticks=N             Max simulation ticks (default: 2000)
  --width=N             World width (default: 60)
  --height=N            World height (default: 20)
  --delay=N             Seconds between frames (default: 0.2)
  --fast                Set delay to 0.01s
  --headless            No rendering, print summary only
  --follow=N            Show agent index N in the side panel
  --log-level=LEVEL     Logging level (default: WARNING)

Environment variables (override any setting):
  HOMESTEAD_SEED, HOMESTEAD_NUM_AGENTS, HOMESTEAD_PLANNER_MAX_EXPANSIONS, etc.
"""


def _flag_value(arg: str, convert):
    name, _, raw = arg.partition("=")
    try:
        return convert(raw)
    except ValueError:
        raise ValidationError(f"{name}: {raw!r} is not a valid {convert.__name__}") from None


def parse_args(argv: list[str], config: SimulationConfig) -> dict:
    """Apply CLI flags to ``config`` and return the run options.

    Raises:
        SystemExit: on --help (code 0) or an unknown flag (code 2)
        ValidationError: a flag value does not parse
    """
    options = {"tick_delay": 0.2, "headless": False, "follow": 0, "log_level": "WARNING"}

    for arg in argv:
        if arg == "--fast":
            options["tick_delay"] = 0.01
        elif arg == "--headless":
            options["headless"] = True
            options["tick_delay"] = 0.0
        elif arg.startswith("--delay="):
            options["tick_delay"] = _flag_value(arg, float)
        elif arg.startswith("--ticks="):
            config.max_ticks = _flag_value(arg, int)
        elif arg.startswith("--agents="):
            config.num_agents = _flag_value(arg, int)
        elif arg.startswith("--seed="):
            config.seed = _flag_value(arg, int)
        elif arg.startswith("--width="):
            config.world_width = _flag_value(arg, int)
        elif arg.startswith("--height="):
            config.world_height = _flag_value(arg, int)
        elif arg.startswith("--follow="):
            options["follow"] = _flag_value(arg, int)
        elif arg.startswith("--log-level="):
            options["log_level"] = arg.split("=", 1)[1].upper()
        elif arg == "--help" or arg == "-h":
            print(USAGE)
            sys.exit(0)
        else:
            print(f"Unknown option: {arg}", file=sys.stderr)
            print(USAGE, file=sys.stderr)
            sys.exit(2)

    return options


def main(argv: list[str] | None = None) -> None:
    """Run the simulation."""
    config = SimulationConfig()
    try:
        options = parse_args(sys.argv[1:] if argv is None else argv, config)
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    logging.basicConfig(
        level=options["log_level"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = SimulationEngine(config)
    engine.setup()

    renderer = Renderer()
    renderer.set_follow(options["follow"])

    if options["headless"]:
        print("  homestead v0.1.0")
        print(f"  World: {config.world_width}x{config.world_height} | Seed: {config.seed}")
        print(f"  Agents: {len(engine.agents)} | Max ticks: {config.max_ticks}")
        print()

    try:
        while not engine.is_over():
            engine.step()
            if not options["headless"]:
                renderer.print_frame(engine)
            if options["tick_delay"] > 0:
                time.sleep(options["tick_delay"])
    except KeyboardInterrupt:
        print("\n  Interrupted.")

    renderer.print_summary(engine)


if __name__ == "__main__":
    main()
