"""Command-line interface for domainsnap."""

import rich_click as click

from .. import __version__
from ..config import DomainSnapSettings
from ..core.logging import bind_context, clear_context, configure_logging
from .diff import diff_command
from .migrate_plan import migrate_plan_command
from .snapshot import snapshot_command
from .versions import versions_command

# Configure rich-click styling
click.rich_click.TEXT_MARKUP = "rich"
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.STYLE_OPTION = "bold cyan"
click.rich_click.STYLE_ARGUMENT = "bold yellow"
click.rich_click.STYLE_COMMAND = "bold green"
click.rich_click.STYLE_SWITCH = "bold blue"


@click.group(name="domainsnap")
@click.version_option(version=__version__, prog_name="domainsnap")
@click.pass_context
def main(ctx: click.Context) -> None:
    """📦 **domainsnap** - Versioned domain snapshots and breaking-change diffs.

    Capture domain manifests as hashed snapshots, compare snapshots, and plan
    migrations between versions. Settings are read from DOMAINSNAP_*
    environment variables.
    """
    settings = DomainSnapSettings()
    configure_logging(settings.log_level, settings.json_logs)
    clear_context()
    bind_context(command=ctx.invoked_subcommand)
    ctx.obj = settings


# Add commands to the group
main.add_command(snapshot_command)
main.add_command(diff_command)
main.add_command(migrate_plan_command)
main.add_command(versions_command)


if __name__ == "__main__":
    main()


__all__ = ["main"]
