"""Rich display helpers for CLI output."""

import json
import logging
from collections.abc import Mapping
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from action_prefabs.actions.registry import ActionRegistry


# Shared console instance
console = Console()


def configure_logging(level: str = "INFO") -> None:
    """Send log records through Rich at ``level``."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


def display_error(message: str) -> None:
    """Display error message.

    Args:
        message: Error message.
    """
    console.print(f"[bold red]Error:[/bold red] {message}")


def display_success(message: str) -> None:
    """Display success message.

    Args:
        message: Success message.
    """
    console.print(f"[bold green]{message}[/bold green]")


def display_info(message: str) -> None:
    console.print(f"[dim]{message}[/dim]")


def display_types_table(registry: ActionRegistry) -> None:
    """Display registered action types with their option groups."""
    table = Table(title="Action Types")
    table.add_column("Type", style="cyan")
    table.add_column("Variant")
    table.add_column("Options", style="dim")

    for type_name, variant in registry.types.items():
        groups = ", ".join(registry.options_of(type_name)) or "-"
        table.add_row(type_name, type(variant).__name__, groups)

    console.print(table)


def display_options(type_name: str, options: Mapping[str, list[Any]]) -> None:
    """Display the option groups of one action type."""
    if not options:
        display_info(f"{type_name} has no options")
        return

    table = Table(title=f"{type_name} Options")
    table.add_column("Group", style="cyan")
    table.add_column("Allowed values")
    for group, values in options.items():
        table.add_row(group, ", ".join(str(value) for value in values))

    console.print(table)


def display_document(document: Mapping[str, Any]) -> None:
    """Pretty-print a document snapshot as JSON."""
    console.print_json(json.dumps(document, default=str))
