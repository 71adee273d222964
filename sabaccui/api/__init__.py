# sabaccui/api/__init__.py
"""API layer for sabaccui-cli"""

from .exceptions import (
    SabaccUIError,
    AuthRequiredError,
    AccessDeniedError,
    NotFoundError,
    ValidationFailedError,
    ApiError,
    ManifestError,
    ManifestMissingError,
    ManifestInvalidError,
    MissingSpaceError,
    SourceCloneError,
    PushError,
    DependencyInstallError,
    MigrationError,
    ConfigError,
    ValidationError,
    TemplateStepError,
)
from .catalog import CatalogClient, raise_for_response
from .storyblok import StoryblokClient

__all__ = [
    # Clients
    "CatalogClient",
    "StoryblokClient",
    "raise_for_response",

    # Exceptions
    "SabaccUIError",
    "AuthRequiredError",
    "AccessDeniedError",
    "NotFoundError",
    "ValidationFailedError",
    "ApiError",
    "ManifestError",
    "ManifestMissingError",
    "ManifestInvalidError",
    "MissingSpaceError",
    "SourceCloneError",
    "PushError",
    "DependencyInstallError",
    "MigrationError",
    "ConfigError",
    "ValidationError",
    "TemplateStepError",
]
