"""``workpool config``: inspect and create configuration files."""

import click

from workpool.infrastructure.config import (
    ENV_NESTED_DELIMITER,
    ENV_PREFIX,
    active_config_files,
    config_file_candidates,
    resolve_settings,
    write_config_file,
)


@click.group()
def config():
    """Inspect and create workpool configuration files."""


@config.command(name="init")
@click.option(
    "--location",
    "scope",
    type=click.Choice(["user", "project"], case_sensitive=False),
    default="user",
    show_default=True,
    help="Which configuration file to create.",
)
@click.option("--force", is_flag=True, help="Replace an existing file.")
def config_init(scope, force):
    """Write a configuration file that lists every setting with its default."""
    try:
        path = write_config_file(scope.lower(), overwrite=force)
    except FileExistsError as e:
        raise click.ClickException(f"{e} (use --force to replace it)") from e
    except PermissionError as e:
        raise click.ClickException(f"Cannot write configuration file: {e}") from e

    click.echo(f"Wrote {path}")


@config.command(name="show")
def config_show():
    """Print every setting, its value and where the value comes from."""
    settings = resolve_settings()
    key_width = max(len(setting.key) for setting in settings)
    value_width = max(len(str(setting.value)) for setting in settings)

    for setting in settings:
        click.echo(
            f"{setting.key:<{key_width}}  {str(setting.value):<{value_width}}  {setting.source}"
        )


@config.command(name="locate")
def config_locate():
    """List the configuration files workpool reads, highest priority first."""
    active = active_config_files()

    for candidate in config_file_candidates():
        if candidate in active:
            status = "in use"
        elif candidate.exists:
            status = "hidden"
        else:
            status = "missing"
        click.echo(f"{candidate.scope:<8}  {status:<7}  {candidate.path}")

    click.echo(
        f"Environment variables {ENV_PREFIX}<SECTION>{ENV_NESTED_DELIMITER}<SETTING> "
        f"override every file."
    )
