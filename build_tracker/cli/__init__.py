"""build-tracker CLI — Typer-based command-line interface.

Provides the ``build-tracker`` command with subcommands for comparing two
builds, tabulating many builds, following one artifact's history and
checking a new build payload against its parent.

All output uses Rich for formatted terminal display.
"""
