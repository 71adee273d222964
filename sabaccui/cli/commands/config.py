"""Configuration management command"""

import json

import click

from ..decorators import handle_errors
from ..utils.output import console, format_json, print_warning
from ...constants import EMOJI_SUCCESS


@click.command()
@click.argument('key', required=False)
@click.argument('value', required=False)
@click.pass_obj
@handle_errors
def config(obj, key, value):
    """Get or set SabaccUI configuration options

    KEY uses dot notation for nested keys.

    Examples:
        sabaccui config
        sabaccui config apiUrl
        sabaccui config certificateSources.cert ~/certs/localhost.crt
    """
    user_config = obj.user_config

    if not key:
        format_json(user_config.get_all(), title=str(user_config.config_path))
        return

    if value is None:
        current = user_config.get(key)
        if current is None:
            print_warning(f"Configuration '{key}' is not set")
        elif isinstance(current, (dict, list)):
            console.print(json.dumps(current, indent=2))
        else:
            console.print(str(current))
        return

    user_config.set(key, value)
    console.print(f"[green]{EMOJI_SUCCESS}[/green] Configuration '{key}' set to '{value}'")
