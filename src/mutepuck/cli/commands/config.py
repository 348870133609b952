"""Config commands - inspect and create the configuration file."""

import click

from mutepuck.models import PuckConfig
from mutepuck.utils import PydanticPersistence


@click.group()
def config():
    """Inspect or create the mutepuck configuration file."""


@config.command()
@click.pass_context
def show(ctx):
    """Print the effective configuration as JSON."""
    config_obj: PuckConfig = ctx.obj['config']
    click.echo(f"# {ctx.obj['config_path']}")
    click.echo(config_obj.model_dump_json(indent=2))


@config.command()
@click.option('--force', is_flag=True, help='Overwrite an existing file (a .bak copy is kept)')
@click.pass_context
def init(ctx, force: bool):
    """Write a configuration file with the default settings."""
    path = ctx.obj['config_path']
    if path.exists() and not force:
        raise click.ClickException(f"{path} already exists (use --force to overwrite)")

    PydanticPersistence.save_json(PuckConfig(), path)
    click.echo(f"[OK] Wrote {path}")
