"""homestead: needs-driven agents that plan how to gather, craft, and build."""

__version__ = "0.1.0"
