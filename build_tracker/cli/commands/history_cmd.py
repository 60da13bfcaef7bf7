"""``build-tracker history ARTIFACT FILES...`` — one artifact over time."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from build_tracker.config import config
from build_tracker.core.comparator import Comparator
from build_tracker.ingest.loader import BuildFileError, find_build_files, load_builds
from build_tracker.render.renderer import ComparisonRenderer

console = Console()


def history_cmd(
    artifact: str = typer.Argument(..., help="Artifact name."),
    files: list[Path] = typer.Argument(
        None,
        help="Build files (defaults to every file in the builds directory).",
    ),
    size_key: str = typer.Option(
        None,
        "--size-key",
        "-s",
        help="Size metric to show.",
    ),
    builds_dir: Path = typer.Option(
        None,
        "--builds-dir",
        "-d",
        help="Directory of build files (defaults to BUILD_TRACKER_BUILDS_DIR).",
    ),
) -> None:
    """Show ARTIFACT's size in every build, oldest first."""
    try:
        paths = files or find_build_files(builds_dir or config.builds_dir)
        builds = load_builds(paths)
    except BuildFileError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1)

    comparator = Comparator(builds)
    history = comparator.get_artifact_history(artifact)
    if not any(point.present for point in history):
        console.print(f"[bold red]Artifact not found in any build:[/bold red] {artifact}")
        if comparator.artifact_names:
            console.print("\n[bold]Available artifacts:[/bold]")
            for name in comparator.artifact_names[:10]:
                console.print(f"  [cyan]{name}[/cyan]")
            if len(comparator.artifact_names) > 10:
                console.print(
                    f"  [dim]... and {len(comparator.artifact_names) - 10} more[/dim]"
                )
        raise typer.Exit(code=1)

    ComparisonRenderer(console=console).print_history(
        artifact, history, size_key or config.default_size_key
    )
