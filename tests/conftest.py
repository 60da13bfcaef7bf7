"""Shared test fixtures for build-tracker."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from build_tracker.core.build import Build

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def builds_dir() -> Path:
    """Directory holding three chronological build files."""
    return FIXTURES_DIR / "builds"


# ---------------------------------------------------------------------------
# Build factories — shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_build() -> Callable[..., Build]:
    """Factory fixture: build a Build from ``name -> (hash, sizes)``.

    ``make_build("abc", main=("h1", {"gzip": 100}))``
    """

    def _factory(
        revision: str = "rev-001",
        timestamp: int = 1700000000,
        meta: dict[str, Any] | None = None,
        **artifacts: tuple[str, dict[str, float]],
    ) -> Build:
        meta_record: dict[str, Any] = {"revision": revision, "timestamp": timestamp}
        meta_record.update(meta or {})
        return Build(
            meta=meta_record,
            artifacts=[
                {"name": name, "hash": artifact_hash, "sizes": sizes}
                for name, (artifact_hash, sizes) in artifacts.items()
            ],
        )

    return _factory


@pytest.fixture
def make_payload() -> Callable[..., dict[str, Any]]:
    """Factory fixture: an ingestion payload with sensible defaults."""

    def _factory(
        revision: str = "new-rev",
        timestamp: int = 1700010000,
        artifacts: list[dict[str, Any]] | None = None,
        **meta: Any,
    ) -> dict[str, Any]:
        return {
            "meta": {"revision": revision, "timestamp": timestamp, **meta},
            "artifacts": artifacts
            if artifacts is not None
            else [{"name": "main", "hash": "h-new", "sizes": {"stat": 5000, "gzip": 130}}],
        }

    return _factory


@pytest.fixture
def base_build(make_build: Callable[..., Build]) -> Build:
    """The newer build of the standard pair."""
    return make_build(
        "base",
        1700003600,
        main=("h1", {"gzip": 120, "stat": 480}),
        vendor=("v1", {"gzip": 50, "stat": 300}),
    )


@pytest.fixture
def prev_build(make_build: Callable[..., Build]) -> Build:
    """The older build of the standard pair."""
    return make_build(
        "prev",
        1700000000,
        main=("h1", {"gzip": 100, "stat": 400}),
        legacy=("l1", {"gzip": 30, "stat": 90}),
    )
