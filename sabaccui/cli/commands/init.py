"""Initialize command for creating new SabaccUI projects"""

from pathlib import Path

import click

from ..decorators import handle_errors
from ..utils.interactive import SetupWizard
from ..utils.output import console, format_template_result
from ...constants import EMOJI_WARNING, PROJECT_CONFIG_FILE
from ...models.project import SetupAnswers
from ...utils.async_utils import run_async


@click.command()
@click.argument('name')
@click.argument('template', required=False, default='empty')
@click.option('--path', '-p', 'path', type=click.Path(file_okay=False), default='.',
              help='Directory in which the project directory is created')
@click.option('--space', '-s', help='The id of the Storyblok space to use')
@click.option('--token', help='Storyblok access token written to .env')
@click.option('--domain', help='Target domain of the project')
@click.option('--yes', '-y', 'assume_defaults', is_flag=True,
              help='Do not prompt, use the given options only')
@click.pass_obj
@handle_errors
def init(obj, name, template, path, space, token, domain, assume_defaults):
    """Initialize a new SabaccUI based project with the given NAME

    Examples:
        sabaccui init my-site
        sabaccui init my-site starter --space 123456
        sabaccui init my-site starter -p ~/projects -s 123456 --token xyz -y
    """
    destination = Path(path).resolve()
    project_dir = destination / name

    if (project_dir / PROJECT_CONFIG_FILE).exists():
        console.print(f"{EMOJI_WARNING} Project already initialized in {project_dir}")

    answers = SetupWizard(console).run(
        SetupAnswers(name=name, space=space, domain=domain, storyblok_token=token),
        assume_defaults=assume_defaults
    )

    result = run_async(obj.template_service().init(name, template, destination, answers))
    format_template_result(result)
