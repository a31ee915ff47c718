"""Structured view of a decision record file.

A record is split into a preamble (the H1 title and the Date line) followed
by an ordered list of level-2 sections. Each section keeps its heading line
and raw body text exactly as read, so re-emitting an untouched document
reproduces the file byte for byte. Level-3 headings (the Positive/Negative/
Neutral consequences) stay inside their parent section.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from adrstore.records.models import UNKNOWN, RecordStatus

logger = logging.getLogger(__name__)

TITLE_PATTERN = re.compile(r"^#\s+(.+?)\s*$")
NUMBERED_TITLE_PATTERN = re.compile(r"^\d+\.\s*")
DATE_PATTERN = re.compile(r"^Date:\s*(.+?)\s*$", re.IGNORECASE)
SECTION_PATTERN = re.compile(r"^##\s+(.+?)\s*#*\s*$")
FENCE_PATTERN = re.compile(r"^\s*(```|~~~)")

STATUS_SECTION = "Status"


@dataclass
class Section:
    heading: str  # The "## Name" line, without its line ending
    body: str  # Everything after the heading line up to the next section

    @property
    def name(self) -> str:
        match = SECTION_PATTERN.match(self.heading)
        return match.group(1) if match else self.heading.lstrip("#").strip()

    @property
    def content(self) -> str:
        return self.body.strip()

    def __str__(self) -> str:
        return self.heading + self.body


@dataclass
class RecordDocument:
    preamble: str = ""
    sections: list[Section] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> RecordDocument:
        doc = cls()
        current: Section | None = None
        buffer: list[str] = []
        in_fence = False

        for line in text.splitlines(keepends=True):
            bare = line.rstrip("\r\n")
            if FENCE_PATTERN.match(bare):
                in_fence = not in_fence
            elif not in_fence and SECTION_PATTERN.match(bare):
                doc._flush(current, buffer)
                current = Section(heading=bare, body=line[len(bare):])
                buffer = []
                continue
            buffer.append(line)

        doc._flush(current, buffer)
        return doc

    def _flush(self, current: Section | None, buffer: list[str]) -> None:
        if current is None:
            self.preamble = "".join(buffer)
        else:
            current.body += "".join(buffer)
            self.sections.append(current)

    def __str__(self) -> str:
        return self.preamble + "".join(str(s) for s in self.sections)

    def section(self, name: str) -> Section | None:
        """First section with the given name (case-insensitive)."""
        wanted = name.lower()
        for section in self.sections:
            if section.name.lower() == wanted:
                return section
        return None

    def set_section_content(self, name: str, content: str) -> None:
        """Replace one section's content, keeping the blank lines around it."""
        section = self.section(name)
        if section is None:
            logger.warning(f"Record has no '## {name}' section, inserting one")
            self.sections.insert(0, Section(heading=f"## {name}", body=f"\n\n{content}\n\n"))
            if self.preamble and not self.preamble.endswith("\n\n"):
                self.preamble = self.preamble.rstrip("\n") + "\n\n"
            return

        body = section.body
        stripped = body.strip()
        if stripped:
            start = body.index(stripped)
            leading, trailing = body[:start], body[start + len(stripped):]
        else:
            leading = "\n\n"
            trailing = "\n\n" if section is not self.sections[-1] else "\n"
        if "\n" not in leading:
            leading = "\n\n"
        section.body = f"{leading}{content}{trailing}"

    @property
    def title(self) -> str:
        for line in self.preamble.splitlines():
            match = TITLE_PATTERN.match(line)
            if match:
                return NUMBERED_TITLE_PATTERN.sub("", match.group(1)) or UNKNOWN
        return UNKNOWN

    @property
    def date(self) -> str:
        for line in self.preamble.splitlines():
            match = DATE_PATTERN.match(line.strip())
            if match:
                return match.group(1)
        return UNKNOWN

    @property
    def status(self) -> RecordStatus:
        section = self.section(STATUS_SECTION)
        if section is None:
            return RecordStatus(text=UNKNOWN)
        return RecordStatus.from_section(section.body)
