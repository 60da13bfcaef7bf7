"""BuildIngestor — accepts a new build and compares it against its parent.

This is the transport-free core of the ``POST /api/builds`` handler: the
caller supplies the payload, a ``get_parent_build`` lookup and an optional
``on_build_inserted`` hook.  Where builds are stored and how they arrive
is up to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from build_tracker.config import config
from build_tracker.core.build import Build
from build_tracker.core.comparator import Comparator
from build_tracker.core.filters import ArtifactFilter, compile_filters
from build_tracker.core.report import to_summary
from build_tracker.ingest.records import BuildRecord

logger = logging.getLogger(__name__)

ParentLookup = Callable[[Build], Build | None]
InsertedHook = Callable[[Comparator], None]


class IngestionError(RuntimeError):
    """Raised when a build payload fails validation."""


class InsertResult(BaseModel):
    """Outcome of a successful insert."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    build: Build
    parent: Build | None = None
    comparator: Comparator
    summary: list[str] = []


class BuildIngestor:
    """Validates build payloads and compares each against its parent.

    Parameters
    ----------
    get_parent_build:
        Returns the build a new build should be compared against, or
        None when it has no parent (first build of a branch).
    on_build_inserted:
        Called with a ``Comparator`` over ``[parent, build]`` (or just
        ``[build]``) after every accepted insert.  Exceptions propagate.
    artifact_filters:
        Name filters for the comparison and its summary.  Compiled here, so
        an invalid pattern raises ``FilterError`` before any insert.
    size_key:
        Metric used for the summary; defaults to ``config.default_size_key``.
    """

    def __init__(
        self,
        get_parent_build: ParentLookup,
        on_build_inserted: InsertedHook | None = None,
        *,
        artifact_filters: Iterable[str | ArtifactFilter] | None = None,
        size_key: str | None = None,
    ) -> None:
        self._get_parent_build = get_parent_build
        self._on_build_inserted = on_build_inserted
        self._filters = compile_filters(
            artifact_filters if artifact_filters is not None else config.artifact_filters
        )
        self._size_key = size_key or config.default_size_key

    @staticmethod
    def parse(payload: dict[str, Any] | BuildRecord) -> Build:
        """Validate *payload* and construct its ``Build``.

        Raises
        ------
        IngestionError
            If the payload is malformed.
        """
        try:
            record = (
                payload
                if isinstance(payload, BuildRecord)
                else BuildRecord.model_validate(payload)
            )
            return Build(
                meta=record.meta,
                artifacts=[a.model_dump() for a in record.artifacts],
            )
        except ValidationError as exc:
            raise IngestionError(f"Invalid build payload: {exc}") from exc

    def insert(self, payload: dict[str, Any] | BuildRecord) -> InsertResult:
        """Accept a build payload.

        Returns
        -------
        InsertResult
            The new build, its parent (if any), the comparator handed to
            ``on_build_inserted`` and a textual summary of the changes.
        """
        build = self.parse(payload)
        logger.info(
            "Accepted build %s with %d artifacts", build.revision, len(build.artifacts)
        )

        parent = self._get_parent_build(build)
        if parent is None:
            logger.warning("No parent build found for %s", build.revision)
            comparator = Comparator([build], self._filters)
            summary: list[str] = []
        else:
            comparator = Comparator([parent, build], self._filters)
            summary = to_summary(
                comparator.get_build_delta(build, parent), self._size_key
            )
            logger.info("Compared %s against parent %s", build.revision, parent.revision)

        if self._on_build_inserted is not None:
            self._on_build_inserted(comparator)

        return InsertResult(
            build=build,
            parent=parent,
            comparator=comparator,
            summary=summary,
        )
