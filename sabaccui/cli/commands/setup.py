"""Setup command for existing project directories"""

import click

from ..decorators import handle_errors, project_option, resolve_project_dir
from ..utils.interactive import SetupWizard
from ..utils.output import console
from ...core.project_config import ProjectConfig
from ...models.project import SetupAnswers


@click.command()
@project_option
@click.option('--name', '-n', help='Project name (defaults to the directory name)')
@click.option('--space', '-s', help='The id of the Storyblok space to use')
@click.option('--token', help='Storyblok access token written to .env')
@click.option('--domain', help='Target domain of the project')
@click.option('--yes', '-y', 'assume_defaults', is_flag=True,
              help='Do not prompt, use the given options only')
@click.pass_obj
@handle_errors
def setup(obj, path, name, space, token, domain, assume_defaults):
    """Setup a SabaccUI based project in the given directory"""
    project_dir = resolve_project_dir(path)
    existing = ProjectConfig(project_dir)

    defaults = SetupAnswers(
        name=name or existing.get('name') or project_dir.name,
        space=space or existing.space,
        domain=domain if domain is not None else existing.get('domain'),
        storyblok_token=token
    )
    answers = SetupWizard(console).run(defaults, assume_defaults=assume_defaults)

    obj.template_service().setup(project_dir, answers)
