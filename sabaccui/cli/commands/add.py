"""Add command: install a blok into the current project"""

import sys

import click

from ..decorators import handle_errors, project_option, resolve_project_dir
from ..utils.output import format_component_result
from ...utils.async_utils import run_async


@click.command()
@click.argument('blok')
@project_option
@click.option('--space', '-s', help='The id of the Storyblok space to use')
@click.pass_obj
@handle_errors
def add(obj, blok, path, space):
    """Add a new BLOK to the project

    Files that were changed locally are kept; the incoming version is saved
    next to them with a ``.default`` marker.

    Examples:
        sabaccui add hero
        sabaccui add hero --space 123456 -p ./my-site
    """
    project_dir = resolve_project_dir(path)

    result = run_async(obj.blok_service().install(project_dir, blok, space=space))
    format_component_result(result)
    if not result.success:
        sys.exit(1)
