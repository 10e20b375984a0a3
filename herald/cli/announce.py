"""Announce command implementation."""

import sys

import click
from pydantic import ValidationError

from ..announcement import AnnouncementGenerator
from ..config import get_config
from ..errors import HeraldError


def _parse_parameters(values):
    parameters = {}
    for value in values:
        if '=' not in value:
            raise click.BadParameter(f"'{value}' is not in KEY=VALUE form", param_hint='--param')
        key, val = value.split('=', 1)
        parameters[key.strip()] = val
    return parameters


@click.command()
@click.option('--pom', default='pom.xml', show_default=True, help='Project file')
@click.option('--xml-path', help='Path of the changes.xml file')
@click.option('--output-dir', '-o', 'output_directory', help='Directory the announcement is written to')
@click.option('--template', '-t', help='Template file name')
@click.option('--template-dir', 'template_directory', help='Directory containing the template')
@click.option('--encoding', 'template_encoding', help='Template encoding')
@click.option('--version', 'version', help='Version to announce (defaults to the project version)')
@click.option('--final-name', help='Name of the released artifact')
@click.option('--url-download', help='URL where the release can be downloaded')
@click.option('--team', 'development_team', help='Name of the development team')
@click.option('--introduction', help='Short introduction of the release')
@click.option('--param', 'params', multiple=True, help='Custom template parameter as KEY=VALUE')
@click.option('--jira', 'generate_jira_announcement', is_flag=True, default=None,
              help='Generate the announcement from JIRA')
@click.option('--jira-merge', is_flag=True, default=None, help='Merge JIRA releases into the changes.xml releases')
@click.option('--status-ids', help='Comma separated JIRA statuses to include')
@click.option('--resolution-ids', help='Comma separated JIRA resolutions to include')
@click.option('--max-entries', type=int, help='Maximum number of JIRA issues to fetch')
@click.option('--jira-user', help='JIRA user for private installations')
@click.option('--jira-password', help='JIRA password for private installations')
@click.pass_context
def announce(ctx, pom, params, **options):
    """Generate the release announcement."""

    # Import here to avoid circular dependency
    from .main import load_project

    logger = ctx.obj['logger']
    parameters = _parse_parameters(params)

    # Unset flags must not override the config file
    for flag in ('generate_jira_announcement', 'jira_merge'):
        if not options.get(flag):
            options[flag] = None

    try:
        config = get_config(ctx.obj['config_file'], **options)
    except (ValueError, ValidationError) as e:
        click.echo(f"Error: invalid configuration: {e}", err=True)
        sys.exit(1)

    if parameters:
        config.announce_parameters = {**config.announce_parameters, **parameters}

    project = load_project(pom)
    logger.info(f"Generating announcement for {project.group_id}:{project.artifact_id}:{project.version}")

    try:
        output = AnnouncementGenerator(config, project, logger).execute()
    except HeraldError as e:
        logger.debug("Announcement failed", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output is not None:
        click.echo(f"Announcement written to: {output}")
