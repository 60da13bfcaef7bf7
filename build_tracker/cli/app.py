"""Main Typer application — imports and registers all CLI commands.

Entry point: ``build-tracker`` (configured via pyproject.toml console_scripts).

Commands: compare, table, history, ingest.
"""

from __future__ import annotations

import logging

import typer

from build_tracker.cli.commands.compare_cmd import compare_cmd
from build_tracker.cli.commands.history_cmd import history_cmd
from build_tracker.cli.commands.ingest_cmd import ingest_cmd
from build_tracker.cli.commands.table_cmd import table_cmd
from build_tracker.config import config

app = typer.Typer(
    name="build-tracker",
    help="build-tracker: compare build artifact sizes across revisions.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to BUILD_TRACKER_LOG_LEVEL or INFO).",
    ),
) -> None:
    """Configure logging before any command runs."""
    logging.basicConfig(
        level=(log_level or config.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Register subcommands
app.command(name="compare", help="Compare one build against another.")(compare_cmd)
app.command(name="table", help="Tabulate artifact sizes across several builds.")(table_cmd)
app.command(name="history", help="Show one artifact's size in every build.")(history_cmd)
app.command(name="ingest", help="Validate a build payload and compare it to its parent.")(ingest_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
