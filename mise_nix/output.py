"""Status output for mise-nix.

Status lines go to stderr so stdout stays parseable by mise.
"""

from rich.console import Console
from rich.markup import escape

console = Console(stderr=True, highlight=False)


def step(message: str) -> None:
    """Print a progress step (e.g., "Building flake ...")."""
    console.print(f"[blue]>[/blue] {escape(message)}")


def info(message: str) -> None:
    console.print(f"[dim]{escape(message)}[/dim]")


def warn(message: str) -> None:
    console.print(f"[yellow]Warning:[/yellow] {escape(message)}")


def error(message: str) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}")
