"""Resources command implementation."""

import sys

import click

from ..errors import HeraldError
from ..resources import ResourcesCopier


@click.command()
@click.option('--pom', default='pom.xml', show_default=True, help='Project file')
@click.option('--output-dir', '-o', default='target/classes', show_default=True,
              help='Directory resources are copied to, relative to the project')
@click.option('--encoding', help='Encoding of filtered resources')
@click.option('--filter', '-f', 'extra_filters', multiple=True, help='Extra .properties filter file')
@click.option('--escape-string', help='Prefix that stops a token from being replaced')
@click.option('--overwrite', is_flag=True, help='Overwrite files even if the destination is newer')
@click.option('--include-empty-dirs', is_flag=True, help='Copy empty directories')
@click.option('--non-filtered-ext', 'non_filtered_extensions', multiple=True,
              help='Extra file extension that is never filtered')
@click.pass_context
def resources(ctx, pom, output_dir, encoding, extra_filters, escape_string, overwrite,
              include_empty_dirs, non_filtered_extensions):
    """Copy project resources to the output directory."""

    # Import here to avoid circular dependency
    from .main import load_project

    logger = ctx.obj['logger']
    project = load_project(pom)

    copier = ResourcesCopier(
        project,
        project.basedir / output_dir,
        encoding=encoding,
        extra_filters=list(extra_filters),
        escape_string=escape_string,
        overwrite=overwrite,
        include_empty_dirs=include_empty_dirs,
        non_filtered_extensions=list(non_filtered_extensions),
        logger=logger,
    )

    try:
        copied = copier.copy()
    except HeraldError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Copied {len(copied)} file(s) to {copier.output_directory}")
