"""Core data models for adrstore."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path

UNKNOWN = "unknown"

# Rendered by AdrStore.update_status when a record is superseded
SUPERSEDED_BY_PATTERN = re.compile(
    r"^\*\*Superseded\*\*\s+by\s+\[ADR-(\d+)\]", re.IGNORECASE | re.MULTILINE
)


class Status(str, Enum):
    PROPOSED = "Proposed"
    ACCEPTED = "Accepted"
    DEPRECATED = "Deprecated"
    SUPERSEDED = "Superseded"

    @classmethod
    def lookup(cls, value: str) -> Status | None:
        """Case-insensitive match against the known statuses."""
        wanted = value.strip().lower()
        for status in cls:
            if status.value.lower() == wanted:
                return status
        return None


ACTIVE_STATUSES = frozenset({Status.PROPOSED, Status.ACCEPTED})
INACTIVE_STATUSES = frozenset({Status.DEPRECATED, Status.SUPERSEDED})


@dataclass(frozen=True)
class RecordStatus:
    text: str  # First line as rendered in the Status section
    kind: Status | None = None  # None for custom or unreadable statuses
    superseded_by: int | None = None

    @classmethod
    def parse(cls, value: str) -> RecordStatus:
        """Interpret a status given on the command line.

        Known statuses are canonicalised ("accepted" -> "Accepted"), anything
        else is kept verbatim as a custom status.
        """
        text = value.strip()
        kind = Status.lookup(text)
        if kind is not None:
            return cls(text=kind.value, kind=kind)
        return cls(text=text)

    @classmethod
    def from_section(cls, body: str) -> RecordStatus:
        """Read the status back out of a record's Status section body."""
        lines = [line.strip() for line in body.splitlines() if line.strip()]
        if not lines:
            return cls(text=UNKNOWN)

        match = SUPERSEDED_BY_PATTERN.search(body)
        if match:
            return cls(
                text=lines[0],
                kind=Status.SUPERSEDED,
                superseded_by=int(match.group(1), 10),
            )

        first = lines[0]
        kind = Status.lookup(first)
        if kind is None:
            # Statuses like "Superseded by ADR-0007" written by hand
            kind = Status.lookup(first.split()[0].strip("~*"))
            if kind not in INACTIVE_STATUSES:
                kind = None
        return cls(text=first, kind=kind)

    @property
    def is_custom(self) -> bool:
        return self.kind is None

    @property
    def is_active(self) -> bool:
        return self.kind in ACTIVE_STATUSES

    @property
    def is_inactive(self) -> bool:
        return self.kind in INACTIVE_STATUSES

    def display(self) -> str:
        if self.superseded_by is not None:
            return f"Superseded by {self.superseded_by:04d}"
        return self.text


@dataclass
class DecisionRecord:
    """A record as written by AdrStore.create."""

    number: int
    title: str
    slug: str
    date: date
    status: RecordStatus
    path: Path

    @property
    def filename(self) -> str:
        return self.path.name


@dataclass
class RecordSummary:
    """A record as read back by AdrStore.list_records.

    Fields that could not be parsed are set to UNKNOWN rather than failing
    the whole listing.
    """

    number: int
    title: str
    status: RecordStatus
    date: str  # ISO date string as written in the file, or UNKNOWN
    path: Path

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def is_complete(self) -> bool:
        return UNKNOWN not in (self.title, self.status.text, self.date)
