"""``build-tracker table FILES...`` — artifact sizes across many builds.

Builds are ordered by timestamp.  Output is a Rich table or, for piping,
Markdown, CSV or JSON.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from build_tracker.config import config
from build_tracker.core import report
from build_tracker.core.comparator import Comparator
from build_tracker.core.filters import FilterError
from build_tracker.ingest.loader import BuildFileError, find_build_files, load_builds
from build_tracker.render.renderer import ComparisonRenderer

console = Console()


class OutputFormat(str, Enum):
    RICH = "rich"
    MARKDOWN = "markdown"
    CSV = "csv"
    JSON = "json"


def table_cmd(
    files: list[Path] = typer.Argument(
        None,
        help="Build files to tabulate (defaults to every file in the builds directory).",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.RICH,
        "--format",
        "-F",
        help="Output format.",
    ),
    filters: list[str] = typer.Option(
        None,
        "--filter",
        "-f",
        help="Regex of artifact names to exclude (repeatable).",
    ),
    size_key: str = typer.Option(
        None,
        "--size-key",
        "-s",
        help="Size metric to tabulate.",
    ),
    builds_dir: Path = typer.Option(
        None,
        "--builds-dir",
        "-d",
        help="Directory of build files (defaults to BUILD_TRACKER_BUILDS_DIR).",
    ),
) -> None:
    """Tabulate every artifact's size across the given builds."""
    try:
        paths = files or find_build_files(builds_dir or config.builds_dir)
        builds = load_builds(paths)
    except BuildFileError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1)

    if not builds:
        console.print("[dim]No builds to compare.[/dim]")
        raise typer.Exit(code=1)

    try:
        comparator = Comparator(builds, filters or config.artifact_filters)
    except FilterError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        raise typer.Exit(code=1)

    key = size_key or config.default_size_key

    if output_format == OutputFormat.MARKDOWN:
        typer.echo(report.to_markdown(comparator, key), nl=False)
    elif output_format == OutputFormat.CSV:
        typer.echo(report.to_csv(comparator, key), nl=False)
    elif output_format == OutputFormat.JSON:
        typer.echo(report.to_json_text(comparator), nl=False)
    else:
        ComparisonRenderer(console=console).print_table(comparator.to_table(key))
