"""Build metadata models.

Metadata values are either a plain scalar or a displayable value carrying
an optional hyperlink.  Both arrive in the same open-ended ingestion shape
and are normalized here into the ``MetaField`` tagged variant.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ScalarMeta(BaseModel):
    """A plain metadata value with no link."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["scalar"] = "scalar"
    value: str


class LinkedMeta(BaseModel):
    """A metadata value that may point somewhere (commit page, CI job)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["linked"] = "linked"
    value: str
    url: str | None = None


MetaField = Annotated[Union[ScalarMeta, LinkedMeta], Field(discriminator="kind")]


def coerce_meta_field(raw: Any) -> ScalarMeta | LinkedMeta:
    """Normalize a raw ingestion value into a ``MetaField``.

    Mappings carrying a ``value`` key become ``LinkedMeta``; every other
    value is stringified into ``ScalarMeta``.
    """
    if isinstance(raw, (ScalarMeta, LinkedMeta)):
        return raw
    if isinstance(raw, dict):
        if "kind" in raw:
            return LinkedMeta(**raw) if raw["kind"] == "linked" else ScalarMeta(**raw)
        if "value" in raw:
            url = raw.get("url")
            return LinkedMeta(value=str(raw["value"]), url=str(url) if url else None)
    return ScalarMeta(value=str(raw))


def meta_field_to_raw(field: ScalarMeta | LinkedMeta) -> Any:
    """Inverse of ``coerce_meta_field`` for JSON output."""
    if isinstance(field, LinkedMeta):
        out: dict[str, str] = {"value": field.value}
        if field.url:
            out["url"] = field.url
        return out
    return field.value


class BuildMeta(BaseModel):
    """Frozen metadata of a single build.

    ``revision`` identifies the build and ``timestamp`` orders it.  Any
    further keys of the flat ingestion shape are collected into ``attributes``.
    """

    model_config = ConfigDict(frozen=True)

    revision: MetaField
    timestamp: datetime
    attributes: dict[str, MetaField] = {}

    @model_validator(mode="before")
    @classmethod
    def _collect_attributes(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        # A mapping under "attributes" is an already-collected set; any other
        # value is an ordinary field with that name.
        collected = data.get("attributes")
        if isinstance(collected, Mapping):
            known = {"revision", "timestamp", "attributes"}
            attributes = {k: coerce_meta_field(v) for k, v in collected.items()}
        else:
            known = {"revision", "timestamp"}
            attributes = {}
        attributes.update(
            {k: coerce_meta_field(v) for k, v in data.items() if k not in known}
        )
        out: dict[str, Any] = {
            "timestamp": data.get("timestamp"),
            "attributes": attributes,
        }
        if "revision" in data:
            out["revision"] = coerce_meta_field(data["revision"])
        return out

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def get(self, key: str) -> ScalarMeta | LinkedMeta | None:
        """Look up a metadata field by key; ``revision`` included."""
        if key == "revision":
            return self.revision
        return self.attributes.get(key)

    def to_record(self) -> dict[str, Any]:
        """Flat ingestion-shaped dict (timestamp as Unix seconds)."""
        record: dict[str, Any] = {
            "revision": meta_field_to_raw(self.revision),
            "timestamp": int(self.timestamp.timestamp()),
        }
        for key, value in self.attributes.items():
            record[key] = meta_field_to_raw(value)
        return record
