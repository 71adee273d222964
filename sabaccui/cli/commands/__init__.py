"""CLI commands"""

from . import account
from . import add
from . import catalog
from . import config
from . import init
from . import setup

__all__ = [
    "account",
    "add",
    "catalog",
    "config",
    "init",
    "setup",
]
