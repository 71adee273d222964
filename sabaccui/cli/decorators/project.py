"""Project directory helpers for CLI commands"""

from pathlib import Path
from typing import Callable, Optional

import click

from ...constants import PROJECT_CONFIG_FILE


def project_option(func: Callable) -> Callable:
    """Add the ``-p/--path`` option selecting the project directory"""
    return click.option(
        '--path', '-p', 'path',
        type=click.Path(file_okay=False),
        default=None,
        help='Path of the project (defaults to the current directory)'
    )(func)


def find_project_root(start_path: Optional[Path] = None) -> Optional[Path]:
    """Find the closest directory holding a project configuration

    Args:
        start_path: Starting directory (defaults to current directory)

    Returns:
        Project root path or None if not found
    """
    current = Path(start_path).resolve() if start_path else Path.cwd()

    while True:
        if (current / PROJECT_CONFIG_FILE).exists():
            return current
        if current == current.parent:
            return None
        current = current.parent


def resolve_project_dir(path: Optional[str]) -> Path:
    """Explicit ``--path``, else the enclosing project, else the current directory"""
    if path:
        return Path(path).resolve()
    return find_project_root() or Path.cwd()
