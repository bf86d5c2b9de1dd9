"""GitHub issue dashboard: dependency graphs, time tracking and label metadata."""

__version__ = "0.1.0"
