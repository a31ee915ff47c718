"""Record templates and filename helpers."""

from __future__ import annotations

import re
from datetime import date

WHITESPACE_RUN = re.compile(r"\s+")
NON_SLUG_CHARS = re.compile(r"[^a-z0-9-]")
FALLBACK_SLUG = "untitled"

SEED_TITLE = "Use Architecture Decision Records"
SEED_STORE_DIR = "docs/decisions"

RECORD_TEMPLATE = """\
# {number}. {title}

Date: {date}

## Status

{status}

## Context

{context}

## Decision

{decision}

## Consequences

### Positive
{positive}

### Negative
{negative}

### Neutral
{neutral}
"""

SEED_CONTEXT = """\
We need to record the architectural decisions made on this project to:
- Help current and future team members understand why decisions were made
- Provide context for architectural evolution
- Enable better decision-making by learning from past choices
- Document trade-offs explicitly"""

SEED_DECISION = """\
We will use Architecture Decision Records (ADRs), as described by Michael Nygard, to document significant architectural decisions.

An ADR consists of:
- A title and number
- Status (Proposed, Accepted, Deprecated, Superseded)
- Context (what is the issue we're seeing that motivates this decision)
- Decision (what we will do in response to the issue)
- Consequences (what becomes easier or more difficult as a result)

ADRs will be:
- Stored in `{store_dir}/`
- Numbered sequentially (0001, 0002, etc.)
- Written in Markdown
- Committed to version control with code"""

SEED_POSITIVE = """\
- Architectural knowledge is captured and preserved
- New team members can understand decision rationale
- Decisions are made explicit and visible
- Historical context is available when revisiting decisions"""

SEED_NEGATIVE = """\
- Requires discipline to document decisions
- Takes time to write ADRs
- Team must agree on what constitutes a "significant" decision"""

SEED_NEUTRAL = """\
- ADRs become part of our development workflow
- Will need tooling to help create and manage ADRs"""


def slugify(title: str) -> str:
    """Filename-safe slug: lowercase, whitespace runs to hyphens, [a-z0-9-] only."""
    slug = WHITESPACE_RUN.sub("-", title.strip().lower())
    slug = NON_SLUG_CHARS.sub("", slug)
    return slug or FALLBACK_SLUG


def record_filename(number: int, slug: str) -> str:
    return f"{number:04d}-{slug}.md"


def render_new_record(number: int, title: str, status: str, on: date) -> str:
    """Skeleton for a freshly created record, with placeholder prompts."""
    return RECORD_TEMPLATE.format(
        number=number,
        title=title,
        date=on.isoformat(),
        status=status,
        context="[Describe the issue motivating this decision or change]",
        decision='[Describe the decision in active voice: "We will..."]',
        positive="- [What becomes easier or possible]\n- [Benefit 2]",
        negative="- [What becomes harder or impossible]\n- [Trade-off 2]",
        neutral="- [Neither positive nor negative, but noteworthy]",
    )


def render_seed_record(on: date, store_dir: str = SEED_STORE_DIR) -> str:
    """The first record of every store, explaining the practice itself."""
    return RECORD_TEMPLATE.format(
        number=1,
        title=SEED_TITLE,
        date=on.isoformat(),
        status="Accepted",
        context=SEED_CONTEXT,
        decision=SEED_DECISION.format(store_dir=store_dir),
        positive=SEED_POSITIVE,
        negative=SEED_NEGATIVE,
        neutral=SEED_NEUTRAL,
    )
