"""Read build JSON files and look up parent builds among them.

Each file holds one ingestion record ``{"meta": {...}, "artifacts": [...]}``.
Files are only read, never written.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from build_tracker.core.build import Build
from build_tracker.core.comparator import sort_builds
from build_tracker.ingest.ingestor import BuildIngestor, IngestionError, ParentLookup

logger = logging.getLogger(__name__)

PARENT_REVISION_KEY = "parentRevision"


class BuildFileError(RuntimeError):
    """Raised when a build file cannot be read or parsed."""


def load_build(path: Path) -> Build:
    """Load and validate a single build file."""
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise BuildFileError(f"Cannot read build file {path}: {exc}") from exc
    try:
        return BuildIngestor.parse(payload)
    except IngestionError as exc:
        raise BuildFileError(f"Malformed build file {path}: {exc}") from exc


def load_builds(paths: Iterable[Path]) -> list[Build]:
    """Load several build files, ordered oldest first."""
    builds = [load_build(p) for p in paths]
    logger.debug("Loaded %d build files", len(builds))
    return sort_builds(builds)


def find_build_files(directory: Path) -> list[Path]:
    """All ``*.json`` files directly inside *directory*, sorted by name."""
    directory = Path(directory)
    if not directory.is_dir():
        raise BuildFileError(f"Builds directory not found: {directory}")
    return sorted(directory.glob("*.json"))


def parent_lookup(builds: Sequence[Build]) -> ParentLookup:
    """A ``get_parent_build`` over an in-memory list of builds.

    A build naming its parent via the ``parentRevision`` meta field gets
    that build.  Otherwise the newest build strictly older than it is used.
    """
    by_revision = {b.revision: b for b in builds}
    ordered = sort_builds(builds)

    def _get_parent_build(build: Build) -> Build | None:
        parent_revision = build.get_meta_value(PARENT_REVISION_KEY)
        if parent_revision is not None:
            parent = by_revision.get(parent_revision)
            if parent is None:
                logger.warning(
                    "Parent revision %s of %s not found", parent_revision, build.revision
                )
            return parent

        older = [
            b
            for b in ordered
            if b.timestamp < build.timestamp and b.revision != build.revision
        ]
        return older[-1] if older else None

    return _get_parent_build
