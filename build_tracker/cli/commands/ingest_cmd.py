"""``build-tracker ingest PAYLOAD`` — check a new build against its parent.

Validates the payload the way the ingestion endpoint would, looks up its
parent among the files in the builds directory and prints the summary.
Nothing is written.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from build_tracker.config import config
from build_tracker.core.filters import FilterError
from build_tracker.ingest.ingestor import BuildIngestor, IngestionError
from build_tracker.ingest.loader import (
    BuildFileError,
    find_build_files,
    load_builds,
    parent_lookup,
)

console = Console()


def ingest_cmd(
    payload: Path = typer.Argument(..., help="Build payload JSON file."),
    builds_dir: Path = typer.Option(
        None,
        "--builds-dir",
        "-d",
        help="Directory of existing build files (defaults to BUILD_TRACKER_BUILDS_DIR).",
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
        help="Size metric for the summary.",
    ),
) -> None:
    """Validate PAYLOAD and summarize its changes against its parent build."""
    try:
        data = json.loads(payload.read_text(encoding="utf-8"))
        existing = load_builds(find_build_files(builds_dir or config.builds_dir))
    except (OSError, json.JSONDecodeError, BuildFileError) as exc:
        console.print(f"[bold red]Cannot read input:[/bold red] {exc}")
        raise typer.Exit(code=1)

    try:
        ingestor = BuildIngestor(
            parent_lookup(existing),
            artifact_filters=filters or None,
            size_key=size_key,
        )
    except FilterError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        raise typer.Exit(code=1)

    try:
        result = ingestor.insert(data)
    except IngestionError as exc:
        console.print(f"[bold red]Rejected:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    if result.parent is None:
        body = "[yellow]No parent build found; nothing to compare against.[/yellow]"
    else:
        body = "\n".join(result.summary)

    console.print(
        Panel(
            body,
            title=f"[bold]{result.build.revision}[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
