"""CLI utility functions"""

from .progress import ProgressManager
from .interactive import SetupWizard, ask_email, ask_required

__all__ = [

    # Progress utilities
    'ProgressManager',

    # Interactive utilities
    'SetupWizard',
    'ask_email',
    'ask_required',
]
