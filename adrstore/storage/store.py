"""The ADR store: a directory of numbered record files plus a generated index.

All state lives in the directory itself. The next record number is derived
from the filenames on every call (max + 1, gaps are never refilled), and the
index is rebuilt from the records on demand.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import date
from pathlib import Path

from adrstore.errors import (
    ConcurrentModificationError,
    InvalidInputError,
    NotFoundError,
    StoreIOError,
    StoreNotFoundError,
)
from adrstore.index import INDEX_FILENAME, render_index
from adrstore.records.document import (
    FENCE_PATTERN,
    SECTION_PATTERN,
    STATUS_SECTION,
    RecordDocument,
)
from adrstore.records.models import (
    UNKNOWN,
    DecisionRecord,
    RecordStatus,
    RecordSummary,
    Status,
)
from adrstore.records.templates import (
    SEED_STORE_DIR,
    SEED_TITLE,
    record_filename,
    render_new_record,
    render_seed_record,
    slugify,
)
from adrstore.storage.files import atomic_write_text, create_exclusive

logger = logging.getLogger(__name__)

RECORD_FILENAME_PATTERN = re.compile(r"^(\d{4,})-.*\.md$")
MAX_CREATE_ATTEMPTS = 5


@contextmanager
def _io(action: str, path: Path) -> Iterator[None]:
    """Translate OSError into StoreIOError naming the file involved."""
    try:
        yield
    except OSError as e:
        raise StoreIOError(action, path, e) from e


def _single_line(value: str, what: str) -> str:
    value = value.strip()
    if not value:
        raise InvalidInputError(f"{what} is required")
    if "\n" in value or "\r" in value:
        raise InvalidInputError(f"{what} must be a single line")
    return value


def _status_line(value: str) -> str:
    """Status text is written as a bare line and must not read back as a heading or fence."""
    value = _single_line(value, "Status")
    if value.startswith("#") or SECTION_PATTERN.match(value) or FENCE_PATTERN.match(value):
        raise InvalidInputError(f"Status cannot start with a heading or code fence: '{value}'")
    return value


class AdrStore:
    """Numbered Architecture Decision Records kept in one directory.

    Usage:
        store = AdrStore(Path("docs/decisions"))
        record = store.create("Use Kafka for events")
        store.update_status(record.number, "Accepted")
        store.regenerate_index()
    """

    def __init__(self, root: Path, today: Callable[[], date] = date.today) -> None:
        self.root = Path(root)
        self._today = today

    @property
    def index_path(self) -> Path:
        return self.root / INDEX_FILENAME

    def exists(self) -> bool:
        return self.root.is_dir()

    def is_initialized(self) -> bool:
        return self.exists() and bool(self._record_files())

    def _display_dir(self) -> str:
        """Store path as committed into the seed record; never machine-specific."""
        if self.root.is_absolute():
            return SEED_STORE_DIR
        return self.root.as_posix()

    def _record_files(self) -> list[tuple[int, Path]]:
        """All record files as (number, path), ascending by number then name."""
        with _io("read directory", self.root):
            entries = list(self.root.iterdir())

        found: list[tuple[int, Path]] = []
        for entry in entries:
            match = RECORD_FILENAME_PATTERN.match(entry.name)
            if match and entry.is_file():
                found.append((int(match.group(1), 10), entry))
        found.sort(key=lambda item: (item[0], item[1].name))
        return found

    def next_number(self) -> int:
        if not self.exists():
            return 1
        numbers = [number for number, _ in self._record_files()]
        return max(numbers, default=0) + 1

    def find(self, number: int) -> Path:
        """Path of the record with this number, or NotFoundError."""
        if self.exists():
            for found, path in self._record_files():
                if found == number:
                    return path
        raise NotFoundError(f"ADR not found: {number:04d}", number=number)

    def initialize(self) -> bool:
        """Create the directory, seed record and empty index if no records exist yet.

        Returns True if the store was seeded, False if it already held records.
        """
        with _io("create directory", self.root):
            self.root.mkdir(parents=True, exist_ok=True)

        if self._record_files():
            return False

        seed_path = self.root / record_filename(1, slugify(SEED_TITLE))
        content = render_seed_record(self._today(), store_dir=self._display_dir())
        try:
            create_exclusive(seed_path, content)
        except FileExistsError:
            # Another process seeded the store between the scan and the write
            return False
        except OSError as e:
            raise StoreIOError("create", seed_path, e) from e
        logger.info(f"Seed record created: {seed_path}")

        with _io("write", self.index_path):
            atomic_write_text(self.index_path, render_index([]))
        logger.info(f"Index created: {self.index_path}")
        return True

    def create(self, title: str, status: str = Status.PROPOSED.value) -> DecisionRecord:
        """Write a new record with the next free number.

        Two processes can compute the same number at once. Each attempt creates
        its file exclusively and then checks for a rival file with the same
        number; on any conflict the attempt is undone and retried with a higher
        number, up to MAX_CREATE_ATTEMPTS.
        """
        title = _single_line(title, "Title")
        record_status = RecordStatus.parse(_status_line(status))

        self.initialize()
        slug = slugify(title)
        today = self._today()
        number = self.next_number()

        for attempt in range(1, MAX_CREATE_ATTEMPTS + 1):
            path = self.root / record_filename(number, slug)
            content = render_new_record(number, title, record_status.text, today)
            try:
                create_exclusive(path, content)
            except FileExistsError:
                logger.debug(f"Attempt {attempt}: {path.name} already exists, retrying")
                number = max(number + 1, self.next_number())
                continue
            except OSError as e:
                raise StoreIOError("create", path, e) from e

            rivals = [p for n, p in self._record_files() if n == number and p != path]
            if rivals:
                logger.debug(
                    f"Attempt {attempt}: number {number:04d} also taken by "
                    f"{rivals[0].name}, retrying"
                )
                with _io("remove", path):
                    path.unlink()
                number = max(number + 1, self.next_number())
                continue

            logger.info(f"ADR created: {path}")
            return DecisionRecord(
                number=number,
                title=title,
                slug=slug,
                date=today,
                status=record_status,
                path=path,
            )

        raise ConcurrentModificationError(MAX_CREATE_ATTEMPTS)

    def update_status(
        self,
        number: int,
        new_status: str,
        superseded_by: int | None = None,
    ) -> RecordStatus:
        """Rewrite the Status section of one record, leaving every other section untouched."""
        path = self.find(number)
        status = RecordStatus.parse(_status_line(new_status))

        successor: Path | None = None
        if status.kind is Status.SUPERSEDED:
            if superseded_by is None:
                raise InvalidInputError(
                    "Superseded requires the number of the superseding ADR"
                )
            if superseded_by == number:
                raise InvalidInputError(f"ADR {number:04d} cannot supersede itself")
            try:
                successor = self.find(superseded_by)
            except NotFoundError:
                raise InvalidInputError(
                    f"Superseding ADR not found: {superseded_by:04d}"
                ) from None
        elif superseded_by is not None:
            logger.warning(
                f"Ignoring superseding ADR {superseded_by:04d}: status is {status.text}"
            )

        with _io("read", path):
            text = path.read_text(encoding="utf-8")
        doc = RecordDocument.parse(text)

        if successor is not None:
            old = doc.status.text.strip("~").strip()
            content = (
                f"~~{old}~~\n"
                f"**Superseded** by [ADR-{superseded_by:04d}]({successor.name})"
            )
        else:
            content = status.text
        doc.set_section_content(STATUS_SECTION, content)

        with _io("write", path):
            atomic_write_text(path, str(doc))
        logger.info(f"Updated status of {path} to: {status.text}")
        return doc.status

    def list_records(self) -> Iterator[RecordSummary]:
        """Lazily parse every record, ascending by number.

        The directory is scanned afresh on each call. A record that cannot be
        parsed is still yielded, with the missing fields set to "unknown".
        """
        if not self.exists():
            raise StoreNotFoundError(self.root)
        files = self._record_files()
        return (self._read_summary(number, path) for number, path in files)

    def _read_summary(self, number: int, path: Path) -> RecordSummary:
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.warning(f"Could not decode {path.name}, listing it as unknown")
            text = ""
        except OSError as e:
            raise StoreIOError("read", path, e) from e

        doc = RecordDocument.parse(text)
        summary = RecordSummary(
            number=number,
            title=doc.title,
            status=doc.status,
            date=doc.date,
            path=path,
        )
        if not summary.is_complete:
            missing = [
                name
                for name, value in (
                    ("title", summary.title),
                    ("status", summary.status.text),
                    ("date", summary.date),
                )
                if value == UNKNOWN
            ]
            logger.warning(f"{path.name}: could not parse {', '.join(missing)}")
        return summary

    def regenerate_index(self) -> Path:
        """Rebuild README.md from the records and replace it atomically."""
        content = render_index(self.list_records())
        with _io("write", self.index_path):
            atomic_write_text(self.index_path, content)
        logger.info(f"ADR index updated: {self.index_path}")
        return self.index_path
