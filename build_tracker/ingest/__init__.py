"""Ingestion boundary: payload validation, parent lookup, build files.

Modules
-------
records
    ``BuildRecord`` / ``ArtifactRecord`` — validated payload shapes.
ingestor
    ``BuildIngestor`` — accepts a payload, finds its parent, compares.
loader
    Reads build JSON files for the CLI and provides ``parent_lookup``.
"""

from build_tracker.ingest.ingestor import BuildIngestor, IngestionError, InsertResult
from build_tracker.ingest.loader import (
    BuildFileError,
    find_build_files,
    load_build,
    load_builds,
    parent_lookup,
)
from build_tracker.ingest.records import ArtifactRecord, BuildRecord

__all__ = [
    "ArtifactRecord",
    "BuildFileError",
    "BuildIngestor",
    "BuildRecord",
    "IngestionError",
    "InsertResult",
    "find_build_files",
    "load_build",
    "load_builds",
    "parent_lookup",
]
