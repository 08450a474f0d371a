"""CLI diff command implementation.

This module implements the `domainsnap diff` command, which compares two
snapshot files and reports every structural change in Markdown or JSON.
"""

import sys

import rich_click as click

from ..config import DomainSnapSettings
from ..core.exceptions import DomainSnapshotError
from ..diff import DiffFormatter
from .common import (
    EXIT_BREAKING_CHANGES,
    compare_files,
    error_console,
    fail,
    interrupted,
    write_output,
)


@click.command(name="diff")
@click.argument("before", type=click.Path())
@click.argument("after", type=click.Path())
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["md", "json"], case_sensitive=False),
    default="md",
    help="Output format",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the diff to a file instead of stdout",
)
@click.option(
    "--fail-on-breaking",
    is_flag=True,
    help="Exit with status 3 when breaking changes are found",
)
@click.option(
    "--verify",
    is_flag=True,
    help="Check that each snapshot's hash matches its manifest",
)
@click.pass_obj
def diff_command(
    settings: DomainSnapSettings,
    before: str,
    after: str,
    output_format: str,
    output: str | None,
    fail_on_breaking: bool,
    verify: bool,
) -> None:
    """🔍 **Compare two snapshots** and classify every change.

    \b
    Examples:
        domainsnap diff snapshots/Sales/v1.0.0.json snapshots/Sales/v1.1.0.json
        domainsnap diff before.json after.json -f json --fail-on-breaking
    """
    try:
        diff = compare_files(settings, before, after, verify=verify)

        formatter = DiffFormatter()
        if output_format.lower() == "json":
            text = formatter.format_as_json(diff, indented=settings.indented_json)
        else:
            text = formatter.format_as_markdown(diff)

        write_output(text, output)

    except KeyboardInterrupt:
        interrupted()

    except (DomainSnapshotError, ValueError, OSError) as e:
        fail("Diff", e)

    if fail_on_breaking and diff.has_breaking_changes:
        error_console.print(
            f"⚠️  [bold yellow]{len(diff.breaking_changes())} breaking change(s) "
            "found[/bold yellow]"
        )
        sys.exit(EXIT_BREAKING_CHANGES)
