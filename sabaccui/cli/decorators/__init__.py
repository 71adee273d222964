# sabaccui/cli/decorators/__init__.py
"""CLI decorators"""

from .errors import handle_errors
from .project import project_option, resolve_project_dir

__all__ = [
    'handle_errors',
    'project_option',
    'resolve_project_dir',
]
