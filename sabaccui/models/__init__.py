"""Data models for sabaccui-cli"""

from .manifest import ArtifactManifest, ManifestType, PackageSet
from .project import SetupAnswers
from .result import (
    MergeOutcome,
    MergeReport,
    DependencyReport,
    ComponentInstallResult,
    TemplateInstallResult,
)

__all__ = [
    # Manifest models
    "ArtifactManifest",
    "ManifestType",
    "PackageSet",

    # Project models
    "SetupAnswers",

    # Result models
    "MergeOutcome",
    "MergeReport",
    "DependencyReport",
    "ComponentInstallResult",
    "TemplateInstallResult",
]
