"""Render the store's README.md index from the current set of records.

The index is a derived file: it is rebuilt from scratch on every call and
holds no state of its own. Output depends only on the records passed in,
so rendering the same store twice gives byte-identical text.
"""

from __future__ import annotations

from collections.abc import Iterable

from adrstore.records.models import RecordSummary

INDEX_FILENAME = "README.md"

INDEX_HEADER = """\
# Architecture Decision Records

This directory contains Architecture Decision Records (ADRs) documenting significant architectural decisions for this project.

## What is an ADR?

An Architecture Decision Record (ADR) captures important architectural decisions made along with their context and consequences.

## Format

Each ADR follows this structure:
- **Status**: Proposed, Accepted, Deprecated, or Superseded
- **Context**: What is the issue motivating this decision?
- **Decision**: What we will do (in active voice)
- **Consequences**: What becomes easier or more difficult
"""


def _cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", " ")


def _link(record: RecordSummary) -> str:
    return f"[{record.number:04d}]({record.filename})"


def _table(headers: list[str], rows: list[list[str]]) -> list[str]:
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join("-" * (len(h) + 2) for h in headers) + "|",
    ]
    for row in rows:
        lines.append("| " + " | ".join(row) + " |")
    return lines


def partition(
    records: Iterable[RecordSummary],
) -> tuple[list[RecordSummary], list[RecordSummary], list[RecordSummary]]:
    """Split records into (active, deprecated/superseded, everything else)."""
    active: list[RecordSummary] = []
    inactive: list[RecordSummary] = []
    other: list[RecordSummary] = []
    for record in records:
        if record.status.is_active:
            active.append(record)
        elif record.status.is_inactive:
            inactive.append(record)
        else:
            other.append(record)
    return active, inactive, other


def render_index(records: Iterable[RecordSummary]) -> str:
    active, inactive, other = partition(records)
    by_number = {r.number: r for r in [*active, *inactive, *other]}

    lines = [INDEX_HEADER, "## Active Decisions", ""]
    lines += _table(
        ["ADR", "Title", "Date", "Status"],
        [[_link(r), _cell(r.title), _cell(r.date), _cell(r.status.text)] for r in active],
    )

    lines += ["", "## Deprecated Decisions", ""]
    rows = []
    for r in inactive:
        status, successor = _cell(r.status.text), ""
        if r.status.superseded_by is not None:
            # The first line of a superseded record is the struck-out old status
            status = r.status.kind.value
            target = by_number.get(r.status.superseded_by)
            successor = (
                _link(target) if target is not None else f"{r.status.superseded_by:04d}"
            )
        rows.append([_link(r), _cell(r.title), _cell(r.date), status, successor])
    lines += _table(["ADR", "Title", "Date", "Status", "Superseded By"], rows)

    lines += ["", "## Other Decisions", ""]
    lines += _table(
        ["ADR", "Title", "Date", "Status"],
        [[_link(r), _cell(r.title), _cell(r.date), _cell(r.status.text)] for r in other],
    )

    return "\n".join(lines) + "\n"
