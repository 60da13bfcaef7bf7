"""Text reports over a Comparator: Markdown, CSV, JSON and a short summary.

These only format values the Comparator and BuildDelta already computed.
"""

from __future__ import annotations

import csv
import io
import json
from typing import Any

from build_tracker.core.artifact_math import format_bytes, format_percent
from build_tracker.core.build_delta import BuildDelta
from build_tracker.core.comparator import Comparator, ComparisonRow


def _size_cell(size: float | None) -> str:
    return format_bytes(size) if size is not None else ""


def _delta_cell(size: float | None, percent: float | None) -> str:
    if size is None:
        return ""
    return f"{format_bytes(size, signed=True)} ({format_percent(percent or 0)})"


def _row_cells(row: ComparisonRow) -> list[str]:
    return [
        row.name,
        *(_size_cell(s) for s in row.sizes),
        *(_delta_cell(d, p) for d, p in zip(row.deltas, row.percents)),
    ]


def to_markdown(comparator: Comparator, size_key: str) -> str:
    """Markdown table of *size_key* for every artifact, total row first."""
    table = comparator.to_table(size_key)
    header = table.header
    lines = [
        "| " + " | ".join(header) + " |",
        "| " + " | ".join(["---"] + ["---:"] * (len(header) - 1)) + " |",
    ]
    for row in [table.total, *table.rows]:
        lines.append("| " + " | ".join(_row_cells(row)) + " |")
    return "\n".join(lines) + "\n"


def to_csv(comparator: Comparator, size_key: str) -> str:
    """CSV of raw *size_key* values and deltas (no unit formatting)."""
    table = comparator.to_table(size_key)
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(table.header)
    for row in [table.total, *table.rows]:
        writer.writerow(
            [
                row.name,
                *("" if s is None else s for s in row.sizes),
                *("" if d is None else d for d in row.deltas),
            ]
        )
    return buf.getvalue()


def to_json(comparator: Comparator) -> dict[str, Any]:
    """JSON-serializable dict: builds plus every chain comparison."""
    return {
        "builds": [build.to_record() for build in comparator],
        "artifact_names": list(comparator.artifact_names),
        "deltas": [delta_to_json(d) for d in comparator.chain_deltas()],
    }


def delta_to_json(build_delta: BuildDelta) -> dict[str, Any]:
    return {
        "revision": build_delta.base_build.revision,
        "against_revision": build_delta.total_delta.against_revision,
        "total": build_delta.total_delta.model_dump(),
        "artifacts": [d.model_dump() for d in build_delta.artifact_deltas],
    }


def to_json_text(comparator: Comparator) -> str:
    return json.dumps(to_json(comparator), indent=2, default=str) + "\n"


def to_summary(build_delta: BuildDelta, size_key: str) -> list[str]:
    """One line per changed artifact plus a closing total line.

    Example::

        main: 120 B (+20 B, +20.0%)
        Total: 170 B (+70 B, +70.0%) against abc123
    """
    lines: list[str] = []
    for artifact_delta in build_delta.changed_artifact_deltas:
        base_artifact = build_delta.base_build.get_artifact(artifact_delta.name)
        current = base_artifact.sizes.get(size_key, 0) if base_artifact else 0
        change = artifact_delta.sizes.get(size_key, 0)
        percent = artifact_delta.percents.get(size_key, 0)
        label = "" if base_artifact else " (removed)"
        lines.append(
            f"{artifact_delta.name}{label}: {format_bytes(current)} "
            f"({format_bytes(change, signed=True)}, {format_percent(percent)})"
        )

    total = build_delta.total_delta
    base_total = build_delta.base_build.get_totals(build_delta.artifact_filters)
    lines.append(
        f"Total: {format_bytes(base_total.get(size_key, 0))} "
        f"({format_bytes(total.sizes.get(size_key, 0), signed=True)}, "
        f"{format_percent(total.percents.get(size_key, 0))}) "
        f"against {total.against_revision}"
    )
    return lines
