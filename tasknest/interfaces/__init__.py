"""User-facing interfaces for TaskNest (command line)."""
