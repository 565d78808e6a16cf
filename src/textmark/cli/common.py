"""Shared CLI utilities: console, colors, message helpers."""

from rich.console import Console
from rich.table import Table

TEAL = "#5eead4"
AMBER = "#fbbf24"
ROSE = "#fb7185"
VIOLET = "#a78bfa"
LIME = "#a3e635"

# Styled output only; plain results (resolved strings, JSON) go through typer.echo
console = Console()


def success(message: str) -> None:
    console.print(f"[{LIME}]✓[/{LIME}] {message}")


def error(message: str) -> None:
    console.print(f"[{ROSE}]✗[/{ROSE}] {message}")


def warn(message: str) -> None:
    console.print(f"[{AMBER}]![/{AMBER}] {message}")


def info(message: str) -> None:
    console.print(f"[{TEAL}]→[/{TEAL}] {message}")


def create_table(title: str | None = None, *columns: str) -> Table:
    """Table with the first column highlighted and numeric columns right-aligned."""
    table = Table(title=title, border_style=TEAL)
    for i, col in enumerate(columns):
        numeric = col.lower() in ("strings", "total", "translated", "pending", "coverage")
        table.add_column(
            col,
            style=VIOLET if i == 0 else TEAL,
            justify="right" if numeric else "left",
        )
    return table


def format_coverage(coverage: float) -> str:
    """Coverage percentage colored by how complete it is."""
    color = LIME if coverage >= 100 else AMBER if coverage > 0 else ROSE
    return f"[{color}]{coverage:.1f}%[/{color}]"
