"""Action type inspection and resolution commands."""

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import typer

from action_prefabs.actions.registry import build_registry
from action_prefabs.api import init_actions
from action_prefabs.chat import ConsoleChat
from action_prefabs.cli.display import (
    console,
    display_document,
    display_error,
    display_options,
    display_success,
    display_types_table,
)
from action_prefabs.config import Settings, get_settings
from action_prefabs.dice.parser import DiceParseError
from action_prefabs.documents.memory import MemoryDocument, MemoryDocumentStore
from action_prefabs.errors import ActionError
from action_prefabs.executor.authority import Principal, Role
from action_prefabs.observability.console_observer import RichConsoleObserver


def _settings(system: Optional[str]) -> Settings:
    settings = get_settings()
    if system is not None:
        settings = settings.model_copy(update={"system_id": system})
    return settings


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        display_error(f"Could not read {path}: {e}")
        raise typer.Exit(1)


def list_types(
    system: Optional[str] = typer.Option(None, "--system", help="Game system id"),
) -> None:
    """List registered action types."""
    registry = build_registry(_settings(system).system_id)
    display_types_table(registry)


def show_options(
    type_name: str = typer.Argument(..., help="Action type name"),
    system: Optional[str] = typer.Option(None, "--system", help="Game system id"),
) -> None:
    """Show the option groups of an action type."""
    registry = build_registry(_settings(system).system_id)
    if type_name not in registry:
        display_error(f"Unknown action type: {type_name}")
        raise typer.Exit(1)
    display_options(type_name, registry.options_of(type_name))


def run(
    document_file: Path = typer.Argument(..., help="Document JSON file"),
    actions_file: Path = typer.Argument(..., help="Actions JSON file"),
    system: Optional[str] = typer.Option(None, "--system", help="Game system id"),
    role: str = typer.Option("gamemaster", "--role", "-r", help="Caller role"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the result here"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Trace resolution"),
) -> None:
    """Resolve actions against a document and print the result."""
    try:
        caller_role = Role[role.upper()]
    except KeyError:
        display_error(f"Unknown role: {role}")
        raise typer.Exit(1)

    document = MemoryDocument.from_dict(_read_json(document_file))
    raw_actions = _read_json(actions_file)
    observer = RichConsoleObserver(console) if verbose else None

    api = init_actions(
        settings=_settings(system),
        store=MemoryDocumentStore([document]),
        principal=Principal(role, caller_role),
        chat=ConsoleChat(console),
        hook=observer,
    )

    try:
        actions = api.registry.load(raw_actions)
        asyncio.run(api.resolve(document.uuid, actions))
    except (ActionError, DiceParseError) as e:
        display_error(str(e))
        raise typer.Exit(1)

    if observer is not None:
        observer.print_timing_summary()

    result = document.to_dict()
    if output is not None:
        output.write_text(json.dumps(result, indent=2))
        display_success(f"Wrote {output}")
    else:
        display_document(result)
