"""Artifact and delta models — all frozen."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, PlainSerializer


class FrozenSizes(Mapping[str, float]):
    """Read-only metric -> size mapping.

    Compares equal to any mapping with the same items, so it can be checked
    against plain dicts.  Item assignment raises ``TypeError``.
    """

    def __init__(self, sizes: Mapping[str, float] | None = None) -> None:
        self._sizes: dict[str, float] = dict(sizes or {})

    def __getitem__(self, key: str) -> float:
        return self._sizes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._sizes)

    def __len__(self) -> int:
        return len(self._sizes)

    def __hash__(self) -> int:
        return hash(frozenset(self._sizes.items()))

    def __repr__(self) -> str:
        return f"FrozenSizes({self._sizes!r})"


def _freeze_sizes(sizes: Mapping[str, float]) -> FrozenSizes:
    return FrozenSizes(sizes)


def _sizes_to_dict(sizes: Mapping[str, float]) -> dict[str, float]:
    return dict(sizes)


# Metric name ("stat", "gzip", ...) -> size.  Stored read-only, dumped as a dict.
ArtifactSizes = Annotated[
    Mapping[str, float],
    AfterValidator(_freeze_sizes),
    PlainSerializer(_sizes_to_dict, return_type=dict[str, float]),
]


class Artifact(BaseModel):
    """One named output of a build.

    Two artifacts with the same ``name`` in different builds are the same
    artifact for comparison purposes; a differing ``hash`` means its
    content changed even when every size is equal.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    hash: str
    sizes: ArtifactSizes = FrozenSizes()


class ArtifactDelta(BaseModel):
    """Size change of a single artifact between two builds.

    Derived by ``BuildDelta`` — never stored independently.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    hash_changed: bool
    sizes: ArtifactSizes
    percents: ArtifactSizes

    @property
    def is_unchanged(self) -> bool:
        """No content change and every size delta is zero."""
        return not self.hash_changed and not any(self.sizes.values())


class BuildSizeDelta(BaseModel):
    """Change of a build's filtered totals against another build."""

    model_config = ConfigDict(frozen=True)

    against_revision: str
    sizes: ArtifactSizes
    percents: ArtifactSizes
