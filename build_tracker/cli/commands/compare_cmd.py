"""``build-tracker compare BASE PREV`` — compare two build files.

Shows every artifact's size change, whether its content hash changed,
and the change of the filtered total.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from build_tracker.config import config
from build_tracker.core.comparator import Comparator
from build_tracker.core.filters import FilterError
from build_tracker.ingest.loader import BuildFileError, load_build
from build_tracker.render.renderer import ComparisonRenderer

console = Console()


def compare_cmd(
    base: Path = typer.Argument(..., help="Build file to inspect."),
    prev: Path = typer.Argument(..., help="Build file to compare against."),
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
        help="Size metric to display (defaults to BUILD_TRACKER_DEFAULT_SIZE_KEY).",
    ),
    changed_only: bool = typer.Option(
        False,
        "--changed-only",
        "-c",
        help="Only list artifacts whose size or hash changed.",
    ),
) -> None:
    """Compare BASE against PREV and print the per-artifact changes."""
    try:
        base_build = load_build(base)
        prev_build = load_build(prev)
    except BuildFileError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1)

    try:
        comparator = Comparator(
            [prev_build, base_build], filters or config.artifact_filters
        )
    except FilterError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        raise typer.Exit(code=1)

    build_delta = comparator.get_build_delta(base_build, prev_build)
    ComparisonRenderer(console=console).print_delta(
        build_delta,
        size_key or config.default_size_key,
        changed_only=changed_only,
    )
