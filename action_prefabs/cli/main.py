"""Main CLI application for action prefabs."""

import typer

from action_prefabs.cli.commands import actions, documents
from action_prefabs.cli.display import configure_logging
from action_prefabs.config import get_settings

# Create main app
app = typer.Typer(
    name="prefabs",
    help="Build and resolve validated game actions against documents",
    add_completion=False,
)

# Add sub-commands
app.add_typer(documents.app, name="document")
app.command("types")(actions.list_types)
app.command("options")(actions.show_options)
app.command("run")(actions.run)


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Override LOG_LEVEL"),
) -> None:
    """Action prefabs.

    Use 'prefabs types' to see what can be built, then 'prefabs run' to
    resolve actions against a document file.
    """
    configure_logging(log_level or get_settings().log_level)


if __name__ == "__main__":
    app()
