# sabaccui/services/__init__.py
"""Business logic services for sabaccui-cli"""

from .account_service import AccountService
from .blok_service import BlokService
from .template_service import TemplateService

__all__ = [
    "AccountService",
    "BlokService",
    "TemplateService",
]
