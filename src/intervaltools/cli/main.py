"""
Main CLI entry point for intervaltools.

Defines the root command group and registers all subcommands.
Uses Click framework for argument parsing and help generation.
"""

import click
from typing import Optional

from intervaltools import __version__


# Custom Click context settings for consistent behavior
CONTEXT_SETTINGS = dict(
    help_option_names=["-h", "--help"],
    max_content_width=120,
)


class AliasedGroup(click.Group):
    """
    Click group accepting unambiguous command prefixes, with underscores
    and hyphens treated alike (bed_to_interval_list == bed-to-interval-list).
    """

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        normalized_name = cmd_name.replace("_", "-")

        rv = click.Group.get_command(self, ctx, normalized_name)
        if rv is not None:
            return rv

        matches = [x for x in self.list_commands(ctx) if x.startswith(normalized_name)]
        if not matches:
            return None
        elif len(matches) == 1:
            return click.Group.get_command(self, ctx, matches[0])
        else:
            ctx.fail(f"Ambiguous command '{cmd_name}': could be {', '.join(sorted(matches))}")
            return None

    def resolve_command(self, ctx: click.Context, args):
        # Report the full command name in usage/errors, not the typed prefix
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name if cmd else None, cmd, args


@click.group(cls=AliasedGroup, context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "-V", "--version", prog_name="intervaltools")
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output with detailed logging.",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    help="Suppress all output except errors.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """
    intervaltools: interval list utilities for targeted sequencing.

    \b
    Utility tools:
      util bed-to-interval-list  - Convert BED to a sorted, merged interval list
      util compare-metrics       - Check two metrics files for equality
      util targets               - Load and summarize bait/target interval lists

    \b
    Quick start:
      intervaltools util bed-to-interval-list -i targets.bed -d ref.dict -o targets.interval_list

    For detailed help on any command, use: intervaltools <command> --help
    """
    # Ensure context object exists
    ctx.ensure_object(dict)

    # Store global options
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    # Configure logging based on verbosity
    if verbose and not quiet:
        import logging
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    elif quiet:
        import logging
        logging.basicConfig(level=logging.ERROR)


# Import and register subcommand groups
from intervaltools.cli.util import util

cli.add_command(util)


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """
    Display version and environment information.

    Shows intervaltools version, Python version, and installed dependencies.
    """
    import sys
    import platform

    click.echo(f"intervaltools version: {__version__}")
    click.echo(f"Python version: {sys.version}")
    click.echo(f"Platform: {platform.platform()}")

    click.echo("\nInstalled dependencies:")

    # Map distribution names to import names
    dependencies = {
        "biopython": "Bio",
        "pandas": "pandas",
        "pysam": "pysam",
        "click": "click",
    }

    for name, import_name in dependencies.items():
        try:
            module = __import__(import_name)
            version = getattr(module, "__version__", "unknown")
            click.echo(f"  {name}: {version}")
        except ImportError:
            click.echo(f"  {name}: not installed")


if __name__ == "__main__":
    cli()
