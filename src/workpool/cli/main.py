"""Command-line interface for workpool.

This module provides the main CLI entry point. Commands are organized
into separate modules under workpool.cli.commands.
"""

from pathlib import Path

import click

from workpool.__version__ import __version__
from workpool.infrastructure.logging.setup import LOG_LEVELS, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="workpool")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (defaults to the configured log level)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the log to this file instead of the default log directory",
)
@click.option(
    "--console-log",
    is_flag=True,
    help="Also log to the console",
)
@click.pass_context
def cli(ctx, log_level, log_file, console_log):
    """workpool - Fixed-size thread pool with leak-free shutdown."""
    from workpool.infrastructure.config import get_config

    ctx.ensure_object(dict)
    log_level = log_level or get_config().logging.log_level
    ctx.obj["LOG_FILE"] = setup_logging(log_level, console_logging=console_log, log_file=log_file)


# Import and register commands from submodules
# These imports must come after cli is defined, hence noqa: E402
from workpool.cli.commands.config import config  # noqa: E402
from workpool.cli.commands.demo import demo  # noqa: E402

cli.add_command(config)
cli.add_command(demo)


if __name__ == "__main__":
    cli()
