"""Console reporter: WeaveSummary → rich formatted string."""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from persistweave.domain.model.summary import WeaveSummary


@dataclass(frozen=True, slots=True)
class ConsoleConfig:
    """Configuration for console reporter.

    Attributes:
        show_classes: List every discovered class with its markers.
        force_terminal: Emit ANSI styling even when not attached to a tty.
        width: Console width in columns.
    """

    show_classes: bool = True
    force_terminal: bool = False
    width: int = 120


class ConsoleReporter:
    """Console reporter: outputs rich formatted text.

    Output is str, not print(). Caller decides destination.
    """

    def __init__(self, config: ConsoleConfig | None = None) -> None:
        """Initialize reporter.

        Args:
            config: Reporter configuration. Uses defaults if None.
        """
        self._config = config or ConsoleConfig()

    def report(self, summary: WeaveSummary) -> str:
        """Format weave summary as rich formatted string."""
        output = StringIO()
        console = Console(
            file=output,
            force_terminal=self._config.force_terminal,
            width=self._config.width,
        )

        self._render_header(console, summary)
        if self._config.show_classes and summary.discovered:
            self._render_classes(console, summary)
        if summary.reconciliation.has_warning:
            self._render_undeclared(console, summary)

        return output.getvalue()

    def _render_header(self, console: Console, summary: WeaveSummary) -> None:
        """Render header with counts and descriptor location."""
        console.rule("[bold]PERSISTENCE SCAN[/bold]")
        state = "created" if summary.descriptor_created else "updated"
        console.print(f"[bold]Entities found:[/bold] {summary.entity_count}")
        console.print(
            f"[bold]Added:[/bold] {len(summary.reconciliation.to_add)} "
            f"([dim]{state}[/dim] {summary.descriptor_path})",
        )
        console.print(f"[bold]Woven:[/bold] {'yes' if summary.woven else 'no'}")

    def _render_classes(self, console: Console, summary: WeaveSummary) -> None:
        """Render discovered classes, sorted by name."""
        table = Table(show_header=True, header_style="bold")
        table.add_column("Class")
        table.add_column("Markers")
        table.add_column("Status")

        added = summary.reconciliation.to_add
        for discovered in sorted(summary.discovered, key=lambda c: c.name):
            kinds = ", ".join(sorted(kind.value for kind in discovered.kinds))
            status = "[green]added[/green]" if discovered.name in added else "declared"
            table.add_row(discovered.name, kinds, status)

        console.print(table)

    def _render_undeclared(self, console: Console, summary: WeaveSummary) -> None:
        """Render classes missing from the existing descriptor."""
        undeclared = summary.reconciliation.undeclared
        console.print(f"[bold yellow]NOT PREVIOUSLY DECLARED[/bold yellow] ({len(undeclared)})")
        for name in undeclared:
            console.print(f"  {name}")
