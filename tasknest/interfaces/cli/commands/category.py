"""Category CLI commands."""

import typer

from tasknest.application import category_counts
from tasknest.interfaces.cli.common import get_registry, print_success

app = typer.Typer(help="Category commands")


@app.command("list")
def list_categories() -> None:
    """Show known categories with their root task counts."""
    for category, count in category_counts(get_registry()).items():
        typer.echo(f"{category:<20} {count}")


@app.command("add")
def add(label: str = typer.Argument(..., help="Category label")) -> None:
    """Add a category label."""
    label = label.strip()
    if not label:
        raise typer.BadParameter("Category label cannot be empty")
    get_registry().add_category(label)
    print_success(f"Category {label} added")
