"""Validated ingestion records.

Incoming build payloads are checked here, before any ``Build`` is
constructed: the comparison engine assumes what these models enforce.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ArtifactRecord(BaseModel):
    """One artifact as posted by a build job."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    hash: str
    sizes: dict[str, float]

    @field_validator("sizes")
    @classmethod
    def _non_negative(cls, sizes: dict[str, float]) -> dict[str, float]:
        negative = [key for key, value in sizes.items() if value < 0]
        if negative:
            raise ValueError(f"negative sizes for metrics: {', '.join(negative)}")
        return sizes


class BuildRecord(BaseModel):
    """A whole build payload: ``{meta, artifacts}``."""

    model_config = ConfigDict(frozen=True)

    meta: dict[str, Any]
    artifacts: list[ArtifactRecord] = []

    @field_validator("meta")
    @classmethod
    def _required_meta(cls, meta: dict[str, Any]) -> dict[str, Any]:
        missing = [key for key in ("revision", "timestamp") if key not in meta]
        if missing:
            raise ValueError(f"meta is missing required keys: {', '.join(missing)}")
        return meta

    @field_validator("artifacts")
    @classmethod
    def _unique_names(cls, artifacts: list[ArtifactRecord]) -> list[ArtifactRecord]:
        seen: set[str] = set()
        duplicates: list[str] = []
        for artifact in artifacts:
            if artifact.name in seen:
                duplicates.append(artifact.name)
            seen.add(artifact.name)
        if duplicates:
            raise ValueError(f"duplicate artifact names: {', '.join(duplicates)}")
        return artifacts
