"""Core functionality for sabaccui-cli"""

from .credentials import Credentials, CredentialStore
from .project_config import ProjectConfig
from .user_config import UserConfig
from .process_runner import ProcessRunner, ProcessResult, AsyncProcessRunner
from .artifact_stager import ArtifactStager, StagedArtifact
from .file_merger import FileMerger
from .dependency_resolver import DependencyResolver, detect_package_manager, compute_delta
from .tag_synchronizer import TagCatalog, TagSynchronizer, rewrite_tags

__all__ = [
    "Credentials",
    "CredentialStore",
    "ProjectConfig",
    "UserConfig",
    "ProcessRunner",
    "ProcessResult",
    "AsyncProcessRunner",
    "ArtifactStager",
    "StagedArtifact",
    "FileMerger",
    "DependencyResolver",
    "detect_package_manager",
    "compute_delta",
    "TagCatalog",
    "TagSynchronizer",
    "rewrite_tags",
]
