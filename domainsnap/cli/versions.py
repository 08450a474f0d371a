"""CLI versions command implementation."""

from pathlib import Path

from rich.table import Table
import rich_click as click

from ..config import DomainSnapSettings
from ..core.exceptions import DomainSnapshotError
from ..snapshot import SnapshotStore
from .common import console, fail, interrupted, should_use_rich_formatting


@click.command(name="versions")
@click.argument("name")
@click.option(
    "--dir",
    "snapshot_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Snapshot directory (defaults to DOMAINSNAP_SNAPSHOT_DIR)",
)
@click.pass_obj
def versions_command(
    settings: DomainSnapSettings, name: str, snapshot_dir: str | None
) -> None:
    """📚 **List stored versions** of a domain, oldest first."""
    try:
        store = SnapshotStore(
            settings.store_options(Path(snapshot_dir) if snapshot_dir else None)
        )
        versions = store.list_versions(name)

    except KeyboardInterrupt:
        interrupted()

    except (DomainSnapshotError, ValueError, OSError) as e:
        fail("Listing versions", e)

    if not versions:
        click.echo(f"No snapshots found for '{name}'")
        return

    latest = versions[-1]
    if should_use_rich_formatting():
        table = Table(title=f"Snapshots of {name}")
        table.add_column("Version", style="yellow")
        table.add_column("Latest", justify="center")
        for version in versions:
            table.add_row(str(version), "✓" if version == latest else "")
        console.print(table)
    else:
        for version in versions:
            marker = " (latest)" if version == latest else ""
            click.echo(f"{version}{marker}")
