"""TaskNest - personal task trees with per-task discussion channels."""

__version__ = "0.1.0"
