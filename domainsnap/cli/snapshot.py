"""CLI snapshot command implementation.

This module implements the `domainsnap snapshot` command, which captures a
manifest file as an immutable, hashed snapshot in the snapshot store.
"""

from dataclasses import replace
from pathlib import Path

from rich.table import Table
import rich_click as click

from ..config import DomainSnapSettings
from ..core.exceptions import DomainSnapshotError
from ..core.manifest import Version
from ..snapshot import SnapshotStore, load_manifest
from .common import console, fail, interrupted, should_use_rich_formatting


@click.command(name="snapshot")
@click.option(
    "--manifest",
    "-m",
    "manifest_path",
    type=click.Path(),
    required=True,
    help="Manifest file (.json, .yaml or .yml)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Snapshot directory (defaults to DOMAINSNAP_SNAPSHOT_DIR)",
)
@click.option(
    "--version",
    "-v",
    "version_override",
    default=None,
    help="Override the manifest version (e.g. 1.2.0)",
)
@click.pass_obj
def snapshot_command(
    settings: DomainSnapSettings,
    manifest_path: str,
    output: str | None,
    version_override: str | None,
) -> None:
    """📸 **Capture a snapshot** of a domain manifest.

    Serializes the manifest canonically, computes its content hash and writes
    the snapshot file into the snapshot directory.

    \b
    Examples:
        domainsnap snapshot -m manifest.yaml
        domainsnap snapshot -m manifest.json -o snapshots --version 2.0.0
    """
    try:
        manifest = load_manifest(manifest_path)
        if version_override:
            manifest = replace(manifest, version=Version.parse(version_override))

        store = SnapshotStore(
            settings.store_options(Path(output) if output else None)
        )
        snapshot = store.save(manifest)
        file_path = store.options.file_path(snapshot.name, snapshot.version)

    except KeyboardInterrupt:
        interrupted()

    except (DomainSnapshotError, ValueError, OSError) as e:
        fail("Snapshot", e)

    if should_use_rich_formatting():
        console.print("✅ [bold green]Snapshot created[/bold green]")
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_row("[bold]Domain:[/bold]", f"[magenta]{snapshot.name}[/magenta]")
        table.add_row("[bold]Version:[/bold]", f"[yellow]{snapshot.version}[/yellow]")
        table.add_row("[bold]Hash:[/bold]", f"[dim]{snapshot.hash}[/dim]")
        table.add_row("[bold]File:[/bold]", f"[cyan]{file_path}[/cyan]")
        console.print(table)
    else:
        click.echo("✅ Snapshot created")
        click.echo(f"Domain: {snapshot.name}")
        click.echo(f"Version: {snapshot.version}")
        click.echo(f"Hash: {snapshot.hash}")
        click.echo(f"File: {file_path}")
