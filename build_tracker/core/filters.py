"""Artifact name filters.

A filter list is an ordered sequence of compiled patterns.  An artifact is
excluded when at least one pattern matches anywhere in its name.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

ArtifactFilter = re.Pattern[str]


class FilterError(ValueError):
    """Raised when an artifact filter is not a valid regular expression."""


def compile_filters(
    patterns: Iterable[str | ArtifactFilter] | None,
) -> tuple[ArtifactFilter, ...]:
    """Compile a mix of strings and patterns into a filter tuple.

    Already-compiled patterns are kept as-is.  ``None`` yields an empty
    tuple, which excludes nothing.

    Raises
    ------
    FilterError
        If a string pattern does not compile.
    """
    if not patterns:
        return ()
    compiled: list[ArtifactFilter] = []
    for p in patterns:
        if isinstance(p, re.Pattern):
            compiled.append(p)
            continue
        try:
            compiled.append(re.compile(p))
        except re.error as exc:
            raise FilterError(f"Invalid artifact filter {p!r}: {exc}") from exc
    return tuple(compiled)


def is_excluded(name: str, filters: Iterable[ArtifactFilter]) -> bool:
    """Return True if any filter matches *name*."""
    return any(f.search(name) for f in filters)


def filter_key(filters: Iterable[ArtifactFilter]) -> tuple[tuple[str, int], ...]:
    """Hashable identity of a filter list, used for cache keys."""
    return tuple((f.pattern, f.flags) for f in filters)
