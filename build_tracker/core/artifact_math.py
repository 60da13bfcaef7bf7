"""Size arithmetic between two artifact size mappings.

Every function here is total: an absent mapping (``None``) stands for an
artifact that does not exist on that side, and a metric missing from a
present mapping reads as zero.
"""

from __future__ import annotations

from collections.abc import Mapping

_BYTE_UNITS = ("B", "KiB", "MiB", "GiB", "TiB")


def _size(sizes: Mapping[str, float], metric: str) -> float:
    return sizes.get(metric, 0)


def delta(
    metric: str,
    base_sizes: Mapping[str, float] | None,
    prev_sizes: Mapping[str, float] | None,
) -> float:
    """Absolute change of *metric* from *prev_sizes* to *base_sizes*.

    A removed artifact (no base) yields the negated previous size; an
    added artifact (no previous) yields its full base size.
    """
    if base_sizes is None:
        return -_size(prev_sizes, metric) if prev_sizes is not None else 0
    if prev_sizes is None:
        return _size(base_sizes, metric)
    return _size(base_sizes, metric) - _size(prev_sizes, metric)


def percent_delta(
    metric: str,
    base_sizes: Mapping[str, float] | None,
    prev_sizes: Mapping[str, float] | None,
) -> float:
    """Percentage change of *metric* relative to the previous size.

    Returns ``0`` when there is no previous baseline or it is zero.
    """
    if prev_sizes is None:
        return 0
    previous = _size(prev_sizes, metric)
    if previous == 0:
        return 0
    return delta(metric, base_sizes, prev_sizes) * 100 / previous


def format_bytes(size: float, *, signed: bool = False) -> str:
    """Human-readable byte count, e.g. ``1.5 KiB``.

    With ``signed=True`` a leading ``+`` is added to non-negative values.
    """
    value = abs(size)
    unit = _BYTE_UNITS[0]
    for unit in _BYTE_UNITS:
        if value < 1024 or unit == _BYTE_UNITS[-1]:
            break
        value /= 1024

    text = f"{value:.0f} {unit}" if unit == "B" else f"{value:.2f} {unit}"
    if size < 0:
        return f"-{text}"
    return f"+{text}" if signed else text


def format_percent(percent: float) -> str:
    """Signed percentage with one decimal, e.g. ``+20.0%``."""
    return f"{percent:+.1f}%"
