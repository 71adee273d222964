"""Artifact manifest models"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Any

# Keys owned by ArtifactManifest; anything else lands in ``extra``
_KNOWN_KEYS = {
    'type', 'source', 'baseDir', 'templateFiles', 'componentFiles',
    'storyblokFiles', 'storyblokDefinitions', 'files', 'usedComponents',
    'packages', 'migrations',
}


class ManifestType(Enum):
    """How the file set of an artifact is delivered"""
    SOURCE = "source"
    SELF_CONTAINED = "self-contained"


@dataclass
class PackageSet:
    """Declared package dependencies"""
    dependencies: Dict[str, str] = field(default_factory=dict)
    dev_dependencies: Dict[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.dependencies and not self.dev_dependencies

    def merged_with(self, other: 'PackageSet') -> 'PackageSet':
        """Combine two package sets, first declaration of a name wins"""
        dependencies = dict(other.dependencies)
        dependencies.update(self.dependencies)
        dev_dependencies = dict(other.dev_dependencies)
        dev_dependencies.update(self.dev_dependencies)
        return PackageSet(dependencies=dependencies, dev_dependencies=dev_dependencies)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {}
        if self.dependencies:
            data['dependencies'] = dict(self.dependencies)
        if self.dev_dependencies:
            data['devDependencies'] = dict(self.dev_dependencies)
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'PackageSet':
        """Create from dictionary"""
        data = data or {}
        return cls(
            dependencies=dict(data.get('dependencies') or {}),
            dev_dependencies=dict(data.get('devDependencies') or {})
        )


@dataclass
class ArtifactManifest:
    """Manifest shipped at the root of every template or blok archive"""
    type: ManifestType = ManifestType.SELF_CONTAINED
    source: Optional[str] = None
    base_dir: Optional[str] = None
    template_files: List[str] = field(default_factory=list)
    component_files: List[str] = field(default_factory=list)
    storyblok_files: List[str] = field(default_factory=list)
    storyblok_definitions: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)
    used_components: List[str] = field(default_factory=list)
    packages: Optional[PackageSet] = None
    migrations: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_source(self) -> bool:
        return self.type == ManifestType.SOURCE

    def component_file_lists(self) -> List[List[str]]:
        """File lists merged by the blok installer, in declaration order"""
        return [
            self.files,
            self.component_files,
            self.storyblok_files,
            self.storyblok_definitions,
        ]

    def template_file_lists(self) -> List[List[str]]:
        """File lists merged by the template installer, in declaration order"""
        return [self.template_files, self.files]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data: Dict[str, Any] = {'type': self.type.value}

        if self.source:
            data['source'] = self.source
        if self.base_dir:
            data['baseDir'] = self.base_dir

        for key, value in (
                ('templateFiles', self.template_files),
                ('componentFiles', self.component_files),
                ('storyblokFiles', self.storyblok_files),
                ('storyblokDefinitions', self.storyblok_definitions),
                ('files', self.files),
                ('usedComponents', self.used_components),
                ('migrations', self.migrations),
        ):
            if value:
                data[key] = list(value)

        if self.packages is not None:
            data['packages'] = self.packages.to_dict()

        data.update(self.extra)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ArtifactManifest':
        """Create from dictionary

        Raises:
            ValueError: If a field has the wrong shape
        """
        if not isinstance(data, dict):
            raise ValueError("manifest must be a JSON object")

        raw_type = data.get('type')
        if raw_type is None:
            manifest_type = ManifestType.SOURCE if data.get('source') else ManifestType.SELF_CONTAINED
        else:
            try:
                manifest_type = ManifestType(raw_type)
            except ValueError:
                raise ValueError(f"unknown manifest type '{raw_type}'")

        packages = data.get('packages')
        if packages is not None and not isinstance(packages, dict):
            raise ValueError("'packages' must be an object")

        return cls(
            type=manifest_type,
            source=data.get('source'),
            base_dir=data.get('baseDir'),
            template_files=_path_list(data, 'templateFiles'),
            component_files=_path_list(data, 'componentFiles'),
            storyblok_files=_path_list(data, 'storyblokFiles'),
            storyblok_definitions=_path_list(data, 'storyblokDefinitions'),
            files=_path_list(data, 'files'),
            used_components=_path_list(data, 'usedComponents'),
            packages=PackageSet.from_dict(packages) if packages is not None else None,
            migrations=_path_list(data, 'migrations'),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS}
        )


def _path_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"'{key}' must be a list of strings")
    return list(value)
