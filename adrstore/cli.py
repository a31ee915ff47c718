"""CLI entry point for adrstore."""

from __future__ import annotations

import logging
import re
import shlex
import subprocess
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from typer.core import TyperGroup

from adrstore.config import Config
from adrstore.errors import AdrError, InvalidInputError
from adrstore.records.models import RecordStatus, Status
from adrstore.storage.store import AdrStore

logger = logging.getLogger(__name__)

console = Console(soft_wrap=True, highlight=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False)

RECORD_NUMBER_PATTERN = re.compile(r"^(?:ADR-?)?0*(\d+)$", re.IGNORECASE)


class AdrGroup(TyperGroup):
    """Exit with 1, not click's default 2, when the command is unknown."""

    def resolve_command(self, ctx: click.Context, args: list[str]):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


app = typer.Typer(
    cls=AdrGroup,
    help="Create and manage Architecture Decision Records.",
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    add_completion=False,
)


def _info(message: str) -> None:
    console.print(f"[green]\\[INFO][/green] {escape(message)}")


def _warning(message: str) -> None:
    err_console.print(f"[yellow]\\[WARNING][/yellow] {escape(message)}")


def _error(message: str) -> None:
    err_console.print(f"[red]\\[ERROR][/red] {escape(message)}")


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Report store errors as a single [ERROR] line and exit 1."""
    try:
        yield
    except AdrError as e:
        _error(str(e))
        raise typer.Exit(1)


def _configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _parse_number(value: str, what: str = "ADR number") -> int:
    """Accept 5, 0005 or ADR-0005."""
    match = RECORD_NUMBER_PATTERN.match(value.strip())
    if not match:
        raise InvalidInputError(f"Invalid {what}: '{value}'")
    return int(match.group(1), 10)


def _open_in_editor(editor: str, path: Path) -> None:
    """Open a record in the user's editor. Failures are reported, never raised."""
    try:
        command = [*shlex.split(editor), str(path)]
        _info(f"Opening in {editor}...")
        result = subprocess.run(command, check=False)
    except (OSError, ValueError) as e:
        logger.debug(f"Editor command {editor!r} failed", exc_info=True)
        _warning(f"Could not launch editor '{editor}': {e}")
        return
    if result.returncode != 0:
        _warning(f"Editor exited with status {result.returncode}")


def _store(ctx: typer.Context) -> tuple[Config, AdrStore]:
    config: Config = ctx.obj
    return config, AdrStore(config.store_dir)


@app.callback()
def main(
    ctx: typer.Context,
    store_dir: str = typer.Option(
        None, "--dir", "-d", help="ADR directory (default: $ADR_STORE_DIR or docs/decisions)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Create and manage Architecture Decision Records."""
    config = Config.load()
    if store_dir:
        config.store_dir = Path(store_dir)

    issues = config.validate()
    if issues:
        for issue in issues:
            _error(issue)
        raise typer.Exit(1)

    _configure_logging(logging.DEBUG if verbose else config.log_level_value)
    ctx.obj = config

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


@app.command()
def init(ctx: typer.Context) -> None:
    """Initialize the ADR directory with its first record and index."""
    config, store = _store(ctx)

    with _handle_errors():
        if store.is_initialized():
            _info(f"ADR system already initialized in {config.store_dir}")
            return
        existed = store.exists()
        seeded = store.initialize()

    if seeded:
        if not existed:
            _info(f"Created ADR directory: {config.store_dir}")
        _info(f"✓ First ADR created: {store.find(1).name}")
        _info(f"✓ ADR index created: {store.index_path}")
        _info("✓ ADR system initialized")
    else:
        _info(f"ADR system already initialized in {config.store_dir}")


@app.command()
def new(
    ctx: typer.Context,
    title: str = typer.Argument("", help="Title of the decision"),
    status: str = typer.Argument(
        Status.PROPOSED.value,
        help="Initial status: Proposed (default), Accepted, Deprecated, Superseded",
    ),
    edit: bool = typer.Option(True, "--edit/--no-edit", help="Open the new ADR in $EDITOR"),
) -> None:
    """Create a new ADR with the next free number."""
    config, store = _store(ctx)

    if status.strip() and RecordStatus.parse(status).is_custom:
        _warning(
            f"'{status.strip()}' is not a standard status "
            f"({', '.join(s.value for s in Status)}); recording it as given"
        )

    with _handle_errors():
        record = store.create(title, status)

    _info(f"✓ ADR created: {record.path}")
    console.print("\n[blue]Next steps:[/blue]")
    console.print(f"  1. Edit the ADR: {escape(str(record.path))}")
    console.print("  2. Fill in the Context, Decision, and Consequences sections")
    console.print("  3. Commit to version control")
    console.print("  4. Update index: adr index")

    if edit and config.editor:
        _open_in_editor(config.editor, record.path)


@app.command("list")
def list_records(ctx: typer.Context) -> None:
    """List all ADRs with their status."""
    config, store = _store(ctx)

    if not store.exists():
        _warning("No ADR directory found. Run: adr init")
        raise typer.Exit(1)

    console.print("[blue]Architecture Decision Records[/blue]\n")
    count = 0
    with _handle_errors():
        for record in store.list_records():
            count += 1
            console.print(f"[bold]\\[{record.number:04d}][/bold] {escape(record.title)}")
            console.print(
                f"      Status: {escape(record.status.display())} | Date: {escape(record.date)}"
            )
            console.print(f"      File: {escape(str(record.path))}\n")

    if count == 0:
        _warning("No ADRs found")
    else:
        _info(f"Total ADRs: {count}")


@app.command("status")
def update_status(
    ctx: typer.Context,
    number: str = typer.Argument("", help="ADR number, e.g. 5 or 0005"),
    new_status: str = typer.Argument("", help="Proposed, Accepted, Deprecated or Superseded"),
    superseded_by: str = typer.Argument(None, help="Number of the superseding ADR"),
) -> None:
    """Update the status of an ADR."""
    _, store = _store(ctx)

    with _handle_errors():
        if not number.strip() or not new_status.strip():
            raise InvalidInputError("ADR number and status are required")
        record_number = _parse_number(number)
        successor = (
            _parse_number(superseded_by, "superseding ADR number") if superseded_by else None
        )

        if RecordStatus.parse(new_status).is_custom:
            _warning(f"'{new_status.strip()}' is not a standard status; recording it as given")
        result = store.update_status(record_number, new_status, successor)
        path = store.find(record_number)

    _info(f"✓ Updated status of {path} to: {result.display()}")


@app.command()
def index(ctx: typer.Context) -> None:
    """Regenerate the ADR index (README.md)."""
    _, store = _store(ctx)

    _info("Updating ADR index...")
    with _handle_errors():
        path = store.regenerate_index()
    _info(f"✓ ADR index updated: {path}")


@app.command("help")
def show_help(ctx: typer.Context) -> None:
    """Show this help message."""
    typer.echo(ctx.parent.get_help())


if __name__ == "__main__":
    app()
