"""Comparison engine: size arithmetic, builds, build deltas, comparator."""

from build_tracker.core.artifact_math import delta, percent_delta
from build_tracker.core.build import Build
from build_tracker.core.build_delta import BuildDelta
from build_tracker.core.comparator import BuildNotFoundError, Comparator
from build_tracker.core.filters import compile_filters, is_excluded

__all__ = [
    "Build",
    "BuildDelta",
    "BuildNotFoundError",
    "Comparator",
    "compile_filters",
    "delta",
    "is_excluded",
    "percent_delta",
]
