"""Configuration settings for the homestead simulation.

Uses Pydantic Settings for validation and environment variable support.
All settings can be overridden via HOMESTEAD_* environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class SimulationConfig(BaseSettings):
    """Global configuration for the homestead simulation."""

    # World
    world_width: int = 60
    world_height: int = 20
    seed: int = 42

    # Entity generation: a cell holds an apple above apple_threshold, a tree
    # above tree_threshold, and so on down the list.
    apple_threshold: float = 0.95
    tree_threshold: float = 0.80
    branch_threshold: float = 0.75
    stone_threshold: float = 0.70

    # Agents
    num_agents: int = 1
    initial_energy: float = 90.0
    initial_social: float = 80.0

    # Drive decay per tick
    hunger_decay: float = 0.5
    thirst_decay: float = 1.0
    energy_decay_day: float = 0.5
    energy_decay_night: float = 1.0  # sleeping rough at night is tiring
    social_decay: float = 0.25

    # Time of day (hours, wraps at 24)
    start_time_of_day: float = 8.0
    time_step: float = 0.2

    # Goal selection thresholds
    sleep_below: float = 50.0
    drink_below: float = 70.0
    eat_below: float = 50.0
    socialise_below: float = 40.0

    # Planner
    planner_max_expansions: int = Field(default=5000, ge=1)

    # Tick
    max_ticks: int = 2000

    model_config = {"env_prefix": "HOMESTEAD_"}
