"""SQL document store commands."""

import asyncio
import json
from pathlib import Path

import typer

from action_prefabs.cli.display import display_document, display_error, display_success
from action_prefabs.database.connection import get_db_session, init_db
from action_prefabs.documents.sql import SqlDocumentStore

app = typer.Typer(help="Document store commands")


@app.command("import")
def import_document(
    document_file: Path = typer.Argument(..., help="Document JSON file"),
) -> None:
    """Import a document into the database."""
    try:
        raw = json.loads(document_file.read_text())
    except (OSError, json.JSONDecodeError) as e:
        display_error(f"Could not read {document_file}: {e}")
        raise typer.Exit(1)

    if "uuid" not in raw:
        display_error("Document has no 'uuid'")
        raise typer.Exit(1)

    init_db()
    with get_db_session() as db:
        store = SqlDocumentStore(db)
        if asyncio.run(store.get(raw["uuid"])) is not None:
            display_error(f"Document {raw['uuid']} already exists")
            raise typer.Exit(1)
        store.add(
            raw["uuid"],
            raw.get("data", {}),
            document_type=raw.get("type", "base"),
            name=raw.get("name"),
            embedded=raw.get("embedded"),
        )

    display_success(f"Imported {raw['uuid']}")


@app.command()
def show(
    uuid: str = typer.Argument(..., help="Document uuid"),
) -> None:
    """Show a stored document."""
    init_db()
    with get_db_session() as db:
        document = asyncio.run(SqlDocumentStore(db).get(uuid))
        if document is None:
            display_error(f"Document {uuid} not found")
            raise typer.Exit(1)
        display_document(document.to_dict())
