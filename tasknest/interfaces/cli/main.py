"""Entry point for the TaskNest CLI.

Usage:
    python -m tasknest.interfaces.cli.main

Or via installed entry point:
    tasknest <command>
"""

from tasknest.interfaces.cli import app


def main() -> None:
    """Run the TaskNest CLI application."""
    app()


if __name__ == "__main__":
    main()
