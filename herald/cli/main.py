"""Main CLI entry point for Herald."""

import logging
import sys

import click

from .. import __version__
from ..config import create_sample_config
from ..errors import ProjectError
from ..project import parse_project
from .announce import announce
from .resources import resources


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--config-file', '-c', help='Path to JSON configuration file')
@click.version_option(version=__version__, prog_name="herald")
@click.pass_context
def cli(ctx, debug, config_file):
    """Herald - release announcement and resources tool."""

    # Setup logging
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config_file
    ctx.obj['logger'] = logging.getLogger('herald')


def load_project(pom):
    """Parse the project file or exit with an error."""
    try:
        return parse_project(pom)
    except ProjectError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option('--path', '-p', default='herald.json', help='Path for the config file')
def init_config(path):
    """Create a sample configuration file."""
    try:
        create_sample_config(path)
    except OSError as e:
        click.echo(f"Error creating config file: {e}", err=True)
        sys.exit(1)


@cli.command()
def version():
    """Show version information."""
    click.echo(f"Herald version {__version__}")


# Add subcommands
cli.add_command(announce)
cli.add_command(resources)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == '__main__':
    main()
