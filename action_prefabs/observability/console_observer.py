"""Rich console observer for real-time resolution visibility.

Uses the Rich library to render action resolution as an indented tree with
branch outcomes, rolls and document writes.
"""

from rich.console import Console

from action_prefabs.observability.events import (
    ActionEndEvent,
    ActionStartEvent,
    BranchEvent,
    DocumentUpdateEvent,
    ForwardEvent,
    RollEvent,
)


class RichConsoleObserver:
    """Pretty console output using Rich."""

    def __init__(
        self,
        console: Console | None = None,
        show_updates: bool = True,
        indent: str = "  ",
    ) -> None:
        """Initialize the console observer.

        Args:
            console: Rich Console instance. Creates new one if not provided.
            show_updates: Show the fields written by each update.
            indent: Indentation string per tree level.
        """
        self.console = console or Console()
        self.show_updates = show_updates
        self.indent = indent
        self._depth = 0
        self._durations: dict[str, float] = {}

    def on_action_start(self, event: ActionStartEvent) -> None:
        """Render action start."""
        self._depth = event.depth
        self.console.print(f"{self.indent * event.depth}[cyan]>[/] {event.action_type}")

    def on_action_end(self, event: ActionEndEvent) -> None:
        """Render action completion with timing."""
        prefix = self.indent * (event.depth + 1)
        if event.success:
            self.console.print(f"{prefix}[green]done[/] ({event.duration_ms:.0f}ms)")
        else:
            self.console.print(f"{prefix}[red]failed[/] {event.error or ''}")
        self._durations[event.action_type] = (
            self._durations.get(event.action_type, 0.0) + event.duration_ms
        )

    def on_branch(self, event: BranchEvent) -> None:
        """Render branch choice."""
        branch = "[green]true[/]" if event.outcome else "[yellow]false[/]"
        self.console.print(
            f"{self.indent * (event.depth + 1)}-> {branch} branch ({event.branch_size} actions)"
        )

    def on_roll(self, event: RollEvent) -> None:
        """Render a dice roll."""
        rolls = ", ".join(str(r) for r in event.individual_rolls)
        self.console.print(
            f"{self.indent * (self._depth + 1)}[magenta]roll[/] {event.formula} "
            f"= [bold]{event.total}[/] [dim]({rolls})[/]"
        )

    def on_document_update(self, event: DocumentUpdateEvent) -> None:
        """Render a document write."""
        if not self.show_updates:
            return
        for path, value in event.fields.items():
            self.console.print(
                f"{self.indent * (self._depth + 1)}[yellow]{path}[/] := {value!r}"
            )

    def on_forward(self, event: ForwardEvent) -> None:
        """Render a forwarded request."""
        self.console.print(
            f"[blue]forward[/] {event.action_count} actions on {event.document_uuid} "
            f"for {event.principal}"
        )

    def print_timing_summary(self) -> None:
        """Print summary of time spent per action type."""
        if not self._durations:
            return

        self.console.print("\n[bold]Action Timing Summary:[/]")
        total = 0.0
        for action_type, ms in self._durations.items():
            self.console.print(f"  {action_type}: {ms:.0f}ms")
            total += ms
        self.console.print(f"  [bold]Total: {total:.0f}ms[/]")

    def reset(self) -> None:
        """Reset state for a new resolution."""
        self._depth = 0
        self._durations = {}
