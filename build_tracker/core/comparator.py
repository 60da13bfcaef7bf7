"""Comparator — an ordered set of builds and the comparisons between them.

The Comparator never reorders, deduplicates or mutates its builds.  It
creates ``BuildDelta`` instances on demand and keeps them so a repeated
request for the same pair (and filter list) returns the same object.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Sequence
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from build_tracker.core.build import Build
from build_tracker.core.build_delta import BuildDelta
from build_tracker.core.filters import (
    ArtifactFilter,
    compile_filters,
    filter_key,
    is_excluded,
)
from build_tracker.models.artifacts import Artifact, ArtifactDelta, ArtifactSizes

logger = logging.getLogger(__name__)

TOTAL_ROW_NAME = "All"


class BuildNotFoundError(LookupError):
    """Raised when a comparison names a build outside the Comparator's set."""


class ArtifactHistoryPoint(BaseModel):
    """State of one artifact in one build.

    ``artifact`` is None when the build does not contain it; absence is
    never reported as a zero size.
    """

    model_config = ConfigDict(frozen=True)

    revision: str
    timestamp: datetime
    artifact: Artifact | None = None

    @property
    def present(self) -> bool:
        return self.artifact is not None

    def size(self, size_key: str) -> float | None:
        """The artifact's size for *size_key*, or None if absent."""
        if self.artifact is None:
            return None
        return self.artifact.sizes.get(size_key)


class TotalHistoryPoint(BaseModel):
    """Filtered totals of one build."""

    model_config = ConfigDict(frozen=True)

    revision: str
    timestamp: datetime
    sizes: ArtifactSizes


class ComparisonRow(BaseModel):
    """One artifact (or the total) across every build of a comparison.

    ``sizes`` has one entry per build (None where the artifact is absent);
    ``deltas`` has one entry per consecutive pair of builds.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    sizes: list[float | None]
    deltas: list[float | None]
    percents: list[float | None]
    hash_changed: list[bool]


class ComparisonTable(BaseModel):
    """Plain tabular view of a Comparator for a single metric."""

    model_config = ConfigDict(frozen=True)

    size_key: str
    revisions: list[str]
    rows: list[ComparisonRow]
    total: ComparisonRow

    @property
    def header(self) -> list[str]:
        """Column titles: artifact, each revision, then each chain delta."""
        deltas = [f"Δ{i}" for i in range(1, len(self.revisions))]
        return ["Artifact", *self.revisions, *deltas]


class Comparator:
    """Ordered builds plus lazily created pairwise comparisons.

    Parameters
    ----------
    builds:
        Builds in display order (normally chronological).  The caller's
        order is kept as-is.
    artifact_filters:
        Default name filters, applied to every comparison that does not
        pass its own.
    """

    def __init__(
        self,
        builds: Iterable[Build],
        artifact_filters: Iterable[str | ArtifactFilter] | None = None,
    ) -> None:
        self._builds: tuple[Build, ...] = tuple(builds)
        self._filters = compile_filters(artifact_filters)
        self._lock = threading.RLock()
        self._deltas: dict[tuple, BuildDelta] = {}
        self._artifact_names: tuple[str, ...] | None = None

    def __iter__(self) -> Iterator[Build]:
        return iter(self._builds)

    def __len__(self) -> int:
        return len(self._builds)

    def __repr__(self) -> str:
        return f"Comparator({len(self._builds)} builds)"

    # ------------------------------------------------------------------
    # Builds
    # ------------------------------------------------------------------

    @property
    def builds(self) -> tuple[Build, ...]:
        return self._builds

    @property
    def revisions(self) -> list[str]:
        return [b.revision for b in self._builds]

    @property
    def artifact_filters(self) -> tuple[ArtifactFilter, ...]:
        return self._filters

    def get_build(self, revision: str) -> Build | None:
        """First build with *revision*, or None."""
        for build in self._builds:
            if build.revision == revision:
                return build
        return None

    def _resolve(self, build: Build | str) -> Build:
        if isinstance(build, Build):
            if any(b is build for b in self._builds):
                return build
            revision = build.revision
        else:
            revision = build
        found = self.get_build(revision)
        if found is None:
            raise BuildNotFoundError(
                f"Build {revision!r} is not part of this comparator "
                f"(known: {', '.join(self.revisions) or 'none'})"
            )
        return found

    @property
    def artifact_names(self) -> tuple[str, ...]:
        """Sorted, filtered union of artifact names across every build."""
        with self._lock:
            if self._artifact_names is None:
                names: set[str] = set()
                for build in self._builds:
                    names.update(build.artifact_names)
                self._artifact_names = tuple(
                    sorted(n for n in names if not is_excluded(n, self._filters))
                )
            return self._artifact_names

    # ------------------------------------------------------------------
    # Comparisons
    # ------------------------------------------------------------------

    def get_build_delta(
        self,
        base: Build | str,
        prev: Build | str,
        artifact_filters: Iterable[str | ArtifactFilter] | None = None,
    ) -> BuildDelta:
        """Comparison of *base* against *prev*, created once and reused.

        Both builds may be given as ``Build`` instances or revisions and
        must belong to this comparator.  Without *artifact_filters* the
        comparator's default filters apply.

        Raises
        ------
        BuildNotFoundError
            If either build is not part of this comparator.
        """
        base_build = self._resolve(base)
        prev_build = self._resolve(prev)
        filters = (
            compile_filters(artifact_filters)
            if artifact_filters is not None
            else self._filters
        )
        key = (base_build.revision, prev_build.revision, filter_key(filters))

        with self._lock:
            build_delta = self._deltas.get(key)
            if build_delta is None:
                build_delta = BuildDelta(base_build, prev_build, filters)
                self._deltas[key] = build_delta
                logger.debug("Created %r", build_delta)
            return build_delta

    def chain_deltas(self) -> list[BuildDelta]:
        """Each build compared against the one before it."""
        return [
            self.get_build_delta(self._builds[i], self._builds[i - 1])
            for i in range(1, len(self._builds))
        ]

    def matrix(self) -> list[list[BuildDelta]]:
        """For each build, its comparisons against every earlier build.

        Row ``i`` holds ``i`` deltas, oldest baseline first.
        """
        return [
            [self.get_build_delta(self._builds[i], self._builds[j]) for j in range(i)]
            for i in range(len(self._builds))
        ]

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def get_artifact_history(self, name: str) -> list[ArtifactHistoryPoint]:
        """The artifact's state in every build, in build order."""
        return [
            ArtifactHistoryPoint(
                revision=build.revision,
                timestamp=build.timestamp,
                artifact=build.get_artifact(name),
            )
            for build in self._builds
        ]

    def get_total_history(self) -> list[TotalHistoryPoint]:
        """Filtered totals of every build, in build order."""
        return [
            TotalHistoryPoint(
                revision=build.revision,
                timestamp=build.timestamp,
                sizes=build.get_totals(self._filters),
            )
            for build in self._builds
        ]

    # ------------------------------------------------------------------
    # Tabular view
    # ------------------------------------------------------------------

    def to_table(self, size_key: str) -> ComparisonTable:
        """Tabulate *size_key* for every artifact across every build."""
        chain = self.chain_deltas()
        rows: list[ComparisonRow] = []
        for name in self.artifact_names:
            deltas: list[ArtifactDelta | None] = [
                d.get_artifact_delta(name) for d in chain
            ]
            rows.append(
                ComparisonRow(
                    name=name,
                    sizes=[p.size(size_key) for p in self.get_artifact_history(name)],
                    deltas=[d.sizes.get(size_key) if d else None for d in deltas],
                    percents=[d.percents.get(size_key) if d else None for d in deltas],
                    hash_changed=[bool(d and d.hash_changed) for d in deltas],
                )
            )

        total_deltas = [d.total_delta for d in chain]
        total = ComparisonRow(
            name=TOTAL_ROW_NAME,
            sizes=[p.sizes.get(size_key) for p in self.get_total_history()],
            deltas=[t.sizes.get(size_key) for t in total_deltas],
            percents=[t.percents.get(size_key) for t in total_deltas],
            hash_changed=[False for _ in total_deltas],
        )
        return ComparisonTable(
            size_key=size_key,
            revisions=self.revisions,
            rows=rows,
            total=total,
        )


def sort_builds(builds: Sequence[Build]) -> list[Build]:
    """Builds ordered oldest first, for callers that need chronological order."""
    return sorted(builds, key=lambda b: b.timestamp)
