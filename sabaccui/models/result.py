"""Operation result models"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Any

from .manifest import PackageSet


class MergeOutcome(Enum):
    """Outcome of merging a single file"""
    COPIED = "copied"
    UNCHANGED = "unchanged"
    CONFLICTED = "conflicted"
    MISSING = "missing"


@dataclass
class MergeReport:
    """Per-file outcomes of one or more merge calls"""
    outcomes: Dict[str, MergeOutcome] = field(default_factory=dict)

    def record(self, relative_path: str, outcome: MergeOutcome) -> None:
        self.outcomes[relative_path] = outcome

    def extend(self, other: 'MergeReport') -> None:
        self.outcomes.update(other.outcomes)

    def paths(self, outcome: MergeOutcome) -> List[str]:
        """Paths with the given outcome, in merge order"""
        return [path for path, value in self.outcomes.items() if value == outcome]

    @property
    def copied(self) -> List[str]:
        return self.paths(MergeOutcome.COPIED)

    @property
    def unchanged(self) -> List[str]:
        return self.paths(MergeOutcome.UNCHANGED)

    @property
    def conflicted(self) -> List[str]:
        return self.paths(MergeOutcome.CONFLICTED)

    @property
    def missing(self) -> List[str]:
        return self.paths(MergeOutcome.MISSING)

    @property
    def write_count(self) -> int:
        return len(self.copied) + len(self.conflicted)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {path: outcome.value for path, outcome in self.outcomes.items()}


@dataclass
class DependencyReport:
    """Result of a dependency reconciliation"""
    package_manager: str
    installed: List[str] = field(default_factory=list)
    installed_dev: List[str] = field(default_factory=list)

    @property
    def nothing_to_do(self) -> bool:
        return not self.installed and not self.installed_dev

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'package_manager': self.package_manager,
            'installed': self.installed,
            'installed_dev': self.installed_dev,
        }


@dataclass
class ComponentInstallResult:
    """Result of installing one blok/component"""
    key: str
    success: bool
    merge: MergeReport = field(default_factory=MergeReport)
    packages: Optional[PackageSet] = None
    dependencies: Optional[DependencyReport] = None
    pushed: List[str] = field(default_factory=list)
    error: Optional[str] = None
    error_code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            'key': self.key,
            'success': self.success,
            'files': self.merge.to_dict(),
            'pushed': self.pushed,
        }
        if self.dependencies:
            data['dependencies'] = self.dependencies.to_dict()
        if self.error:
            data['error'] = self.error
            data['error_code'] = self.error_code
        return data


@dataclass
class TemplateInstallResult:
    """Result of installing a template into a new project"""
    key: str
    project_dir: Path
    success: bool = False
    merge: MergeReport = field(default_factory=MergeReport)
    components: List[ComponentInstallResult] = field(default_factory=list)
    dependencies: Optional[DependencyReport] = None
    migrations: List[str] = field(default_factory=list)
    git_initialized: bool = False
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def installed_components(self) -> List[str]:
        return [c.key for c in self.components if c.success]

    @property
    def failed_components(self) -> List[ComponentInstallResult]:
        return [c for c in self.components if not c.success]

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            'key': self.key,
            'project_dir': str(self.project_dir),
            'success': self.success,
            'files': self.merge.to_dict(),
            'components': [c.to_dict() for c in self.components],
            'migrations': self.migrations,
            'git_initialized': self.git_initialized,
            'warnings': self.warnings,
        }
        if self.dependencies:
            data['dependencies'] = self.dependencies.to_dict()
        if self.error:
            data['error'] = self.error
        return data
