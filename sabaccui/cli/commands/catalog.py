"""Catalog listing commands"""

import click

from ..decorators import handle_errors
from ..utils.output import console, format_catalog_list
from ..utils.progress import ProgressManager
from ...utils.async_utils import run_async


@click.command()
@click.pass_obj
@handle_errors
def templates(obj):
    """List all available templates"""
    with ProgressManager(console).basic_progress("Fetching templates..."):
        items = run_async(obj.template_service().list())
    format_catalog_list(items, "Templates")


@click.command()
@click.option('--components', is_flag=True, help='List catalog components instead of bloks')
@click.pass_obj
@handle_errors
def bloks(obj, components):
    """List all available bloks"""
    title = "Components" if components else "Bloks"
    with ProgressManager(console).basic_progress(f"Fetching {title.lower()}..."):
        items = run_async(obj.blok_service().list(components=components))
    format_catalog_list(items, title)
