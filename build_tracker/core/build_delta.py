"""BuildDelta — size changes between a base build and a previous build.

Every derived value (artifact names, per-artifact deltas, total delta) is
computed lazily on first access and cached for the lifetime of the
instance.  A new comparison means a new ``BuildDelta``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from datetime import datetime

from build_tracker.core.artifact_math import delta, percent_delta
from build_tracker.core.build import Build
from build_tracker.core.filters import ArtifactFilter, compile_filters, is_excluded
from build_tracker.models.artifacts import ArtifactDelta, BuildSizeDelta
from build_tracker.models.meta import BuildMeta

logger = logging.getLogger(__name__)


class BuildDelta:
    """Comparison of *base_build* against *prev_build*.

    The two builds are shared, not owned.  Metric sets of the two builds
    are not validated against each other: when an artifact exists in both
    builds its delta covers exactly the metrics of the previous artifact.

    Parameters
    ----------
    base_build:
        The build being inspected.
    prev_build:
        The build it is compared against.
    artifact_filters:
        Patterns excluding artifacts by name from names, deltas and totals.
    """

    def __init__(
        self,
        base_build: Build,
        prev_build: Build,
        artifact_filters: Iterable[str | ArtifactFilter] | None = None,
    ) -> None:
        self._base = base_build
        self._prev = prev_build
        self._filters = compile_filters(artifact_filters)
        self._lock = threading.RLock()

        self._ordered_names: tuple[str, ...] | None = None
        self._artifact_names: frozenset[str] | None = None
        self._artifact_deltas: dict[str, ArtifactDelta] | None = None
        self._artifact_delta_list: tuple[ArtifactDelta, ...] | None = None
        self._total_delta: BuildSizeDelta | None = None

    def __repr__(self) -> str:
        return f"BuildDelta({self._base.revision!r} vs {self._prev.revision!r})"

    # ------------------------------------------------------------------
    # Builds and metadata
    # ------------------------------------------------------------------

    @property
    def base_build(self) -> Build:
        return self._base

    @property
    def prev_build(self) -> Build:
        return self._prev

    @property
    def artifact_filters(self) -> tuple[ArtifactFilter, ...]:
        return self._filters

    @property
    def meta(self) -> BuildMeta:
        """Metadata of the base build."""
        return self._base.meta

    @property
    def timestamp(self) -> datetime:
        return self._base.timestamp

    def get_meta_value(self, key: str) -> str | None:
        return self._base.get_meta_value(key)

    def get_meta_url(self, key: str) -> str | None:
        return self._base.get_meta_url(key)

    # ------------------------------------------------------------------
    # Artifact names
    # ------------------------------------------------------------------

    def _names_in_order(self) -> tuple[str, ...]:
        with self._lock:
            if self._ordered_names is None:
                seen: dict[str, None] = {}
                for build in (self._base, self._prev):
                    for artifact in build.artifacts:
                        if not is_excluded(artifact.name, self._filters):
                            seen.setdefault(artifact.name, None)
                self._ordered_names = tuple(seen)
            return self._ordered_names

    @property
    def artifact_names(self) -> frozenset[str]:
        """Union of both builds' artifact names, minus filtered names."""
        with self._lock:
            if self._artifact_names is None:
                self._artifact_names = frozenset(self._names_in_order())
            return self._artifact_names

    # ------------------------------------------------------------------
    # Artifact deltas
    # ------------------------------------------------------------------

    def _compute_artifact_delta(self, name: str) -> ArtifactDelta:
        base_artifact = self._base.get_artifact(name)
        prev_artifact = self._prev.get_artifact(name)

        if prev_artifact is None:
            # Newly added: the whole base size is the change.
            return ArtifactDelta(
                name=name,
                hash_changed=True,
                sizes=dict(base_artifact.sizes),
                percents={key: 0 for key in base_artifact.sizes},
            )

        base_sizes = base_artifact.sizes if base_artifact is not None else None
        prev_sizes = prev_artifact.sizes
        return ArtifactDelta(
            name=name,
            hash_changed=(
                base_artifact is None or base_artifact.hash != prev_artifact.hash
            ),
            sizes={key: delta(key, base_sizes, prev_sizes) for key in prev_sizes},
            percents={
                key: percent_delta(key, base_sizes, prev_sizes) for key in prev_sizes
            },
        )

    def _ensure_artifact_deltas(self) -> dict[str, ArtifactDelta]:
        with self._lock:
            if self._artifact_deltas is None:
                names = self._names_in_order()
                logger.debug("Computing %d artifact deltas for %r", len(names), self)
                self._artifact_deltas = {
                    name: self._compute_artifact_delta(name) for name in names
                }
                self._artifact_delta_list = tuple(self._artifact_deltas.values())
            return self._artifact_deltas

    @property
    def artifact_deltas(self) -> tuple[ArtifactDelta, ...]:
        """One delta per name in ``artifact_names``.

        Ordered by the base build's artifact order, then names only found
        in the previous build.
        """
        self._ensure_artifact_deltas()
        return self._artifact_delta_list

    def get_artifact_delta(self, name: str) -> ArtifactDelta | None:
        """Delta of the named artifact, or None if it is unknown or filtered."""
        return self._ensure_artifact_deltas().get(name)

    @property
    def changed_artifact_deltas(self) -> tuple[ArtifactDelta, ...]:
        """Deltas whose content or any size changed."""
        return tuple(d for d in self.artifact_deltas if not d.is_unchanged)

    # ------------------------------------------------------------------
    # Total delta
    # ------------------------------------------------------------------

    @property
    def total_delta(self) -> BuildSizeDelta:
        """Change of the filtered totals, keyed by the base build's metrics."""
        with self._lock:
            if self._total_delta is None:
                base_totals = self._base.get_totals(self._filters)
                prev_totals = self._prev.get_totals(self._filters)
                self._total_delta = BuildSizeDelta(
                    against_revision=self._prev.revision,
                    sizes={
                        key: delta(key, base_totals, prev_totals)
                        for key in base_totals
                    },
                    percents={
                        key: percent_delta(key, base_totals, prev_totals)
                        for key in base_totals
                    },
                )
                logger.debug("Total delta for %r: %s", self, self._total_delta.sizes)
            return self._total_delta
