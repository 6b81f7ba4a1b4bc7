#!/usr/bin/env python3
"""
Main CLI Entry Point for the YNAB to Splitwise sync
"""

import logging
import os

import click

from ..core.config import get_config


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    Sync shared YNAB transactions into a Splitwise group.

    Intended to run from cron: each run picks up where the last successful
    run left off.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["SPLITSYNC_ENV"] = config_env

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"

    try:
        config = get_config()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("splitsync").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config"] = config

    if verbose:
        click.echo(f"Environment: {config.environment.value}")
        click.echo(f"Data directory: {config.data_dir}")


@main.command()
def version() -> None:
    """Show version information."""
    from splitsync import __version__

    click.echo(f"splitsync v{__version__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration (secrets redacted)."""
    config_obj = ctx.obj["config"]
    settings = config_obj.to_dict()

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {settings['environment']}")
    click.echo(f"  Data Directory: {settings['data_dir']}")
    click.echo(f"  YNAB Budget: {settings['ynab']['budget_id']}")
    click.echo(f"  YNAB Token: {settings['ynab']['api_token']}")
    click.echo(f"  Splitwise Group: {settings['splitwise']['group_id']}")
    click.echo(f"  Splitwise Key: {settings['splitwise']['api_key']}")
    click.echo(f"  Category Group: {settings['sync']['category_group']}")
    click.echo(f"  Memo Marker: {settings['sync']['memo_marker']}")
    click.echo(f"  Commit Policy: {settings['sync']['commit_policy']}")
    click.echo(f"  Watermark File: {settings['sync']['watermark_file']}")
    click.echo(f"  Cache Directory: {settings['sync']['cache_dir']}")
    click.echo(f"  Log Level: {settings['log_level']}")


from .sync import sync  # noqa: E402

main.add_command(sync)


if __name__ == "__main__":
    main()
