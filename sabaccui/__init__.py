"""SabaccUI CLI - Scaffold Storyblok projects from catalog templates and bloks.

Templates create new projects, bloks add components to existing ones. Files
changed locally are never overwritten, only the missing packages are
installed, and component definitions are pushed to Storyblok with their
internal tags translated to the target space.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Clients
from .api.catalog import CatalogClient
from .api.storyblok import StoryblokClient

# Services
from .services.account_service import AccountService
from .services.blok_service import BlokService
from .services.template_service import TemplateService

# Core building blocks
from .core.artifact_stager import ArtifactStager
from .core.dependency_resolver import DependencyResolver
from .core.file_merger import FileMerger
from .core.process_runner import AsyncProcessRunner, ProcessRunner, ProcessResult
from .core.project_config import ProjectConfig
from .core.tag_synchronizer import TagCatalog, TagSynchronizer

# Data models
from .models.manifest import ArtifactManifest, PackageSet
from .models.project import SetupAnswers
from .models.result import (
    ComponentInstallResult,
    DependencyReport,
    MergeOutcome,
    MergeReport,
    TemplateInstallResult,
)

# Exceptions
from .api.exceptions import (
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

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Clients
    "CatalogClient",
    "StoryblokClient",

    # Services
    "AccountService",
    "BlokService",
    "TemplateService",

    # Core building blocks
    "ArtifactStager",
    "DependencyResolver",
    "FileMerger",
    "AsyncProcessRunner",
    "ProcessRunner",
    "ProcessResult",
    "ProjectConfig",
    "TagCatalog",
    "TagSynchronizer",

    # Data models
    "ArtifactManifest",
    "PackageSet",
    "SetupAnswers",
    "ComponentInstallResult",
    "DependencyReport",
    "MergeOutcome",
    "MergeReport",
    "TemplateInstallResult",

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
