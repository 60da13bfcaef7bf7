"""Build — an immutable snapshot of artifact sizes for one revision.

A build owns its metadata and an ordered collection of uniquely named
artifacts.  It is never mutated after construction; derived lookups are
computed once on first access and reused.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr

from build_tracker.core.filters import ArtifactFilter, compile_filters, is_excluded
from build_tracker.models.artifacts import Artifact
from build_tracker.models.meta import BuildMeta, LinkedMeta

logger = logging.getLogger(__name__)


class Build(BaseModel):
    """One recorded build: metadata plus named artifacts.

    Parameters
    ----------
    meta:
        A ``BuildMeta`` or the flat ingestion mapping
        (``{"revision": ..., "timestamp": ..., ...}``).
    artifacts:
        Ordered artifacts (or ``{name, hash, sizes}`` mappings).  Names are
        expected to be unique; duplicates are an ingestion error and are
        not detected here.
    """

    model_config = ConfigDict(frozen=True)

    meta: BuildMeta
    artifacts: tuple[Artifact, ...] = ()

    _lock: Any = PrivateAttr(default_factory=threading.RLock)
    _artifact_names: frozenset[str] | None = PrivateAttr(default=None)
    _by_name: dict[str, Artifact] | None = PrivateAttr(default=None)

    # ------------------------------------------------------------------
    # Value semantics: the lock and lookup caches are not part of a build
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Build):
            return NotImplemented
        return self.meta == other.meta and self.artifacts == other.artifacts

    __hash__ = None  # type: ignore[assignment]

    def __deepcopy__(self, memo: dict[int, Any] | None = None) -> Build:
        return type(self)(
            meta=copy.deepcopy(self.meta, memo),
            artifacts=copy.deepcopy(self.artifacts, memo),
        )

    def __getstate__(self) -> dict[str, Any]:
        state = super().__getstate__()
        state["__pydantic_private__"] = None
        return state

    def __setstate__(self, state: dict[str, Any]) -> None:
        super().__setstate__(state)
        object.__setattr__(
            self,
            "__pydantic_private__",
            {"_lock": threading.RLock(), "_artifact_names": None, "_by_name": None},
        )

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Build:
        """Build from an ingestion record ``{meta, artifacts}``."""
        return cls(meta=record["meta"], artifacts=record.get("artifacts", []))

    def to_record(self) -> dict[str, Any]:
        """Inverse of ``from_record``."""
        return {
            "meta": self.meta.to_record(),
            "artifacts": [a.model_dump() for a in self.artifacts],
        }

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    def revision(self) -> str:
        return self.meta.revision.value

    @property
    def timestamp(self) -> datetime:
        return self.meta.timestamp

    def get_meta_value(self, key: str) -> str | None:
        """Displayable value of a metadata field, whichever shape it has."""
        field = self.meta.get(key)
        return field.value if field is not None else None

    def get_meta_url(self, key: str) -> str | None:
        """Link of a metadata field, or None for plain scalar fields."""
        field = self.meta.get(key)
        return field.url if isinstance(field, LinkedMeta) else None

    # ------------------------------------------------------------------
    # Artifacts
    # ------------------------------------------------------------------

    @property
    def artifact_names(self) -> frozenset[str]:
        """Names of every artifact in this build."""
        with self._lock:
            if self._artifact_names is None:
                self._artifact_names = frozenset(a.name for a in self.artifacts)
            return self._artifact_names

    @property
    def size_keys(self) -> tuple[str, ...]:
        """Metric names of this build, taken from its first artifact."""
        if not self.artifacts:
            return ()
        return tuple(self.artifacts[0].sizes)

    def get_artifact(self, name: str) -> Artifact | None:
        """Return the named artifact, or None if this build lacks it."""
        with self._lock:
            if self._by_name is None:
                self._by_name = {a.name: a for a in self.artifacts}
            return self._by_name.get(name)

    def get_totals(
        self, filters: Iterable[str | ArtifactFilter] | None = None
    ) -> dict[str, float]:
        """Sum every metric across artifacts not excluded by *filters*.

        Computed fresh on every call since callers pass different filters.
        """
        compiled = compile_filters(filters)
        totals: dict[str, float] = {key: 0 for key in self.size_keys}
        for artifact in self.artifacts:
            if is_excluded(artifact.name, compiled):
                continue
            for key in totals:
                totals[key] += artifact.sizes.get(key, 0)
        logger.debug(
            "Totals for %s with %d filters: %s", self.revision, len(compiled), totals
        )
        return totals

    def get_sum(self, artifact_names: Iterable[str]) -> dict[str, float]:
        """Sum every metric across the named artifacts.

        Names this build does not contain contribute nothing.
        """
        totals: dict[str, float] = {key: 0 for key in self.size_keys}
        for name in artifact_names:
            artifact = self.get_artifact(name)
            if artifact is None:
                continue
            for key in totals:
                totals[key] += artifact.sizes.get(key, 0)
        return totals
