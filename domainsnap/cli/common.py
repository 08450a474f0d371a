"""Helpers shared by the CLI commands."""

from pathlib import Path
import sys
from typing import NoReturn

from rich.console import Console
from rich.markup import escape
import rich_click as click

from ..config import DomainSnapSettings
from ..core.exceptions import DomainSnapshotError
from ..diff import DiffEngine, DomainDiff
from ..snapshot import SnapshotStore

# Command output goes to stdout, diagnostics to stderr
console = Console()
error_console = Console(stderr=True)

EXIT_FAILURE = 1
EXIT_BREAKING_CHANGES = 3
EXIT_INTERRUPTED = 130


def should_use_rich_formatting() -> bool:
    """Determine if we should use rich formatting based on environment."""
    return console.is_terminal


def fail(action: str, error: BaseException) -> NoReturn:
    """Report a failed command on stderr and exit with status 1."""
    error_console.print(
        f"❌ [bold red]{action} failed:[/bold red] {escape(str(error))}",
        soft_wrap=True,
    )
    sys.exit(EXIT_FAILURE)


def interrupted() -> NoReturn:
    error_console.print("\n⚠️  [yellow]Cancelled by user[/yellow]")
    sys.exit(EXIT_INTERRUPTED)


def compare_files(
    settings: DomainSnapSettings, before: str, after: str, verify: bool = False
) -> DomainDiff:
    """Load two snapshot files and diff them.

    Raises:
        DomainSnapshotError: If a file is missing, malformed or, with
            ``verify``, its hash does not match its manifest
    """
    store = SnapshotStore(settings.store_options())
    before_snapshot = store.load(before)
    after_snapshot = store.load(after)

    if verify:
        for path, snapshot in ((before, before_snapshot), (after, after_snapshot)):
            if not store.codec.verify(snapshot):
                raise DomainSnapshotError(
                    f"Snapshot hash does not match its manifest: {path}"
                )

    return DiffEngine().compare(before_snapshot, after_snapshot)


def write_output(text: str, output: str | None) -> None:
    """Write command output to a file, or to stdout if no file is given."""
    if output is None:
        click.echo(text, nl=not text.endswith("\n"))
        return

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    error_console.print(f"📄 Written to [cyan]{escape(str(output_path))}[/cyan]", soft_wrap=True)
