"""CLI migrate-plan command implementation.

This module implements the `domainsnap migrate-plan` command, which turns
the diff between two snapshot files into a Markdown migration plan.
"""

import rich_click as click

from ..config import DomainSnapSettings
from ..core.exceptions import DomainSnapshotError
from ..diff import MigrationPlanGenerator
from .common import compare_files, fail, interrupted, write_output


@click.command(name="migrate-plan")
@click.argument("before", type=click.Path())
@click.argument("after", type=click.Path())
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the plan to a file instead of stdout",
)
@click.pass_obj
def migrate_plan_command(
    settings: DomainSnapSettings, before: str, after: str, output: str | None
) -> None:
    """📋 **Generate a migration plan** between two snapshots.

    \b
    Examples:
        domainsnap migrate-plan v1.0.0.json v2.0.0.json
        domainsnap migrate-plan v1.0.0.json v2.0.0.json -o MIGRATION.md
    """
    try:
        diff = compare_files(settings, before, after)
        write_output(MigrationPlanGenerator().generate(diff), output)

    except KeyboardInterrupt:
        interrupted()

    except (DomainSnapshotError, ValueError, OSError) as e:
        fail("Migration plan", e)
