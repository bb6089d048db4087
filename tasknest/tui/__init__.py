"""Textual terminal UI for TaskNest."""
