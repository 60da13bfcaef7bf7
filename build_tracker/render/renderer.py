"""Rich terminal renderer for build comparisons.

Turns ``BuildDelta``, ``ComparisonTable`` and artifact histories into Rich
renderables.  Every number shown comes from the comparison engine; this
module only formats and colors.

Color scheme
------------
- red       : artifact or total grew
- green     : artifact or total shrank
- dim       : unchanged
- yellow    : content hash changed with no size change
"""

from __future__ import annotations

from datetime import timezone
from typing import TYPE_CHECKING

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from build_tracker.core.artifact_math import format_bytes, format_percent

if TYPE_CHECKING:
    from build_tracker.core.build_delta import BuildDelta
    from build_tracker.core.comparator import (
        ArtifactHistoryPoint,
        ComparisonRow,
        ComparisonTable,
    )
    from build_tracker.models.artifacts import ArtifactDelta


def _change_style(size: float, hash_changed: bool = False) -> str:
    if size > 0:
        return "red"
    if size < 0:
        return "green"
    return "yellow" if hash_changed else "dim"


def _delta_markup(size: float | None, percent: float | None, hash_changed: bool = False) -> str:
    if size is None:
        return "[dim]-[/dim]"
    style = _change_style(size, hash_changed)
    return (
        f"[{style}]{format_bytes(size, signed=True)} "
        f"({format_percent(percent or 0)})[/{style}]"
    )


class ComparisonRenderer:
    """Renders comparisons as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Single comparison
    # ------------------------------------------------------------------

    def render_delta(
        self,
        build_delta: BuildDelta,
        size_key: str,
        *,
        changed_only: bool = False,
    ) -> Panel:
        """Render one ``BuildDelta`` as a Panel with a per-artifact table."""
        deltas = (
            build_delta.changed_artifact_deltas
            if changed_only
            else build_delta.artifact_deltas
        )
        table = self._build_artifact_table(build_delta, deltas, size_key)

        total = build_delta.total_delta
        base_total = build_delta.base_build.get_totals(build_delta.artifact_filters)
        summary_parts: list[str] = [
            f"[bold]Base:[/bold] {build_delta.base_build.revision}",
            f"[bold]Against:[/bold] {total.against_revision}",
            f"[bold]Total {size_key}:[/bold] {format_bytes(base_total.get(size_key, 0))}",
            f"[bold]Change:[/bold] "
            + _delta_markup(total.sizes.get(size_key), total.percents.get(size_key)),
            f"[bold]Changed artifacts:[/bold] "
            f"{len(build_delta.changed_artifact_deltas)}/{len(build_delta.artifact_deltas)}",
        ]
        summary = "  |  ".join(summary_parts)

        return Panel(
            Group(table, Text(""), Text.from_markup(summary)),
            title="[bold]Build Comparison[/bold]",
            subtitle=build_delta.timestamp.astimezone(timezone.utc).strftime(
                "%Y-%m-%d %H:%M:%S UTC"
            ),
            border_style="blue",
            padding=(1, 2),
        )

    def _build_artifact_table(
        self,
        build_delta: BuildDelta,
        deltas: tuple[ArtifactDelta, ...],
        size_key: str,
    ) -> Table:
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("Artifact", min_width=20)
        table.add_column(f"Size ({size_key})", justify="right")
        table.add_column("Change", justify="right")
        table.add_column("Hash", justify="center", width=8)

        for artifact_delta in deltas:
            base_artifact = build_delta.base_build.get_artifact(artifact_delta.name)
            if base_artifact is None:
                size_cell = "[dim]removed[/dim]"
            else:
                size_cell = format_bytes(base_artifact.sizes.get(size_key, 0))
            hash_cell = (
                "[yellow]changed[/yellow]" if artifact_delta.hash_changed else "[dim]-[/dim]"
            )
            table.add_row(
                artifact_delta.name,
                size_cell,
                _delta_markup(
                    artifact_delta.sizes.get(size_key),
                    artifact_delta.percents.get(size_key),
                    artifact_delta.hash_changed,
                ),
                hash_cell,
            )
        return table

    # ------------------------------------------------------------------
    # Multi-build table
    # ------------------------------------------------------------------

    def render_table(self, comparison: ComparisonTable) -> Table:
        """Render a ``ComparisonTable``, total row first."""
        table = Table(
            title=f"Artifact sizes ({comparison.size_key})",
            show_header=True,
            header_style="bold cyan",
            show_lines=False,
        )
        for i, title in enumerate(comparison.header):
            table.add_column(title, justify="left" if i == 0 else "right")

        table.add_row(*self._row_cells(comparison.total, bold=True))
        for row in comparison.rows:
            table.add_row(*self._row_cells(row))
        return table

    @staticmethod
    def _row_cells(row: ComparisonRow, *, bold: bool = False) -> list[str]:
        name = f"[bold]{row.name}[/bold]" if bold else row.name
        sizes = [
            format_bytes(s) if s is not None else "[dim]-[/dim]" for s in row.sizes
        ]
        changes = [
            _delta_markup(d, p, h)
            for d, p, h in zip(row.deltas, row.percents, row.hash_changed)
        ]
        return [name, *sizes, *changes]

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def render_history(
        self, name: str, history: list[ArtifactHistoryPoint], size_key: str
    ) -> Table:
        """Render an artifact's size in every build; absent builds say so."""
        table = Table(
            title=f"History of {name} ({size_key})",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("Revision", style="cyan")
        table.add_column("Timestamp", style="dim")
        table.add_column("Size", justify="right")
        table.add_column("Hash")

        for point in history:
            if point.artifact is None:
                size_cell = "[dim]absent[/dim]"
                hash_cell = "[dim]-[/dim]"
            else:
                size = point.size(size_key)
                size_cell = format_bytes(size) if size is not None else "[dim]-[/dim]"
                hash_cell = point.artifact.hash[:12]
            table.add_row(
                point.revision,
                point.timestamp.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M"),
                size_cell,
                hash_cell,
            )
        return table

    # ------------------------------------------------------------------
    # Standalone print
    # ------------------------------------------------------------------

    def print_delta(
        self, build_delta: BuildDelta, size_key: str, *, changed_only: bool = False
    ) -> None:
        self.console.print(self.render_delta(build_delta, size_key, changed_only=changed_only))

    def print_table(self, comparison: ComparisonTable) -> None:
        self.console.print(self.render_table(comparison))

    def print_history(
        self, name: str, history: list[ArtifactHistoryPoint], size_key: str
    ) -> None:
        self.console.print(self.render_history(name, history, size_key))
