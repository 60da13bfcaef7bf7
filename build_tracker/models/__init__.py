"""build-tracker data models — all Pydantic v2, all frozen (immutable)."""

from build_tracker.models.artifacts import (
    Artifact,
    ArtifactDelta,
    ArtifactSizes,
    BuildSizeDelta,
)
from build_tracker.models.meta import (
    BuildMeta,
    LinkedMeta,
    MetaField,
    ScalarMeta,
    coerce_meta_field,
)

__all__ = [
    # artifacts
    "Artifact",
    "ArtifactDelta",
    "ArtifactSizes",
    "BuildSizeDelta",
    # meta
    "BuildMeta",
    "LinkedMeta",
    "MetaField",
    "ScalarMeta",
    "coerce_meta_field",
]
