"""Structured error hierarchy for homestead."""


class HomesteadError(Exception):
    """Base for all homestead errors."""

    pass


class PlanningError(HomesteadError):
    """The planner was handed inputs it cannot interpret."""

    pass


class UnknownGoalFieldError(PlanningError):
    """A goal names a field the agent does not have."""

    def __init__(self, field: str, goal_name: str | None = None):
        self.field = field
        self.goal_name = goal_name
        where = f" in goal {goal_name!r}" if goal_name else ""
        super().__init__(f"Unknown goal field {field!r}{where}")


class InvalidActionError(PlanningError):
    """An action reported a negative precondition deficit or cost."""

    def __init__(self, action_name: str, reason: str):
        self.action_name = action_name
        self.reason = reason
        super().__init__(f"Invalid action {action_name!r}: {reason}")


class ValidationError(HomesteadError):
    """Input validation at boundary failed."""

    pass


class EngineStateError(HomesteadError):
    """Engine in invalid state for requested operation."""

    pass
