"""Shared test fixtures for adrstore."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from adrstore.storage.store import AdrStore

TODAY = date(2024, 6, 15)


@pytest.fixture
def store_dir(tmp_path: Path) -> Path:
    return tmp_path / "docs" / "decisions"


@pytest.fixture
def store(store_dir: Path) -> AdrStore:
    return AdrStore(store_dir, today=lambda: TODAY)


@pytest.fixture
def initialized_store(store: AdrStore) -> AdrStore:
    store.initialize()
    return store


@pytest.fixture
def populated_store(initialized_store: AdrStore) -> AdrStore:
    """Store with the seed record plus two more (#2 Proposed, #3 Accepted)."""
    initialized_store.create("Use Kafka for events")
    initialized_store.create("Adopt gRPC", "Accepted")
    return initialized_store


SAMPLE_RECORD = """\
# 7. Use PostgreSQL for primary datastore

Date: 2024-03-01

## Status

Accepted

## Context

We need a relational database with strong consistency.

```markdown
## Not a heading
```

## Decision

We will use PostgreSQL.

## Consequences

### Positive
- Mature tooling

### Negative
- Schema migrations to manage

### Neutral
- Developers need it installed locally
"""


@pytest.fixture
def sample_record_text() -> str:
    return SAMPLE_RECORD
