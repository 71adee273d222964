"""Internal tag synchronization and component push"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..api.exceptions import ConfigError, PushError
from ..api.storyblok import StoryblokClient
from ..constants import (
    DEFAULT_TAG_CATALOG,
    ENV_TAG_CATALOG,
    TAG_ID_LIST_KEYS,
    TAG_OBJECT_LIST_KEYS,
)
from .project_config import ProjectConfig

logger = logging.getLogger(__name__)

# Component definitions are plain JSON trees
Definition = Union[Dict[str, Any], List[Any], str, int, float, bool, None]


class TagCatalog:
    """Canonical tag names keyed by their legacy source id

    Only names are portable between spaces; ids are looked up per space.
    """

    def __init__(self, tags: Dict[str, str]):
        self.tags = {str(source_id): name for source_id, name in tags.items()}

    @classmethod
    def default(cls) -> 'TagCatalog':
        return cls(DEFAULT_TAG_CATALOG)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'TagCatalog':
        """
        Load a catalog file of the form::

            tags:
              "47874": Atom
              "47877": Molecule
        """
        path = Path(path).expanduser()
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot load tag catalog {path}: {e}")

        tags = data.get('tags', data) if isinstance(data, dict) else None
        if not isinstance(tags, dict) or not tags:
            raise ConfigError(f"Tag catalog {path} does not define any tags")
        return cls(tags)

    @classmethod
    def resolve(cls, configured_path: Optional[str] = None) -> 'TagCatalog':
        """Catalog from the environment, the given path, or the packaged default"""
        path = os.environ.get(ENV_TAG_CATALOG) or configured_path
        if path:
            return cls.from_yaml(path)
        return cls.default()

    def items(self):
        return self.tags.items()


def rewrite_tags(definition: Definition, mapping: Dict[str, str]) -> Definition:
    """
    Replace source tag ids with target ids throughout a definition tree

    ``component_tag_whitelist`` and ``internal_tag_ids`` hold lists of ids,
    ``internal_tags_list`` holds objects with an ``id`` field. Ids missing
    from the mapping are kept as they are.
    """
    if isinstance(definition, list):
        return [rewrite_tags(item, mapping) for item in definition]

    if isinstance(definition, dict):
        rewritten = {}
        for key, value in definition.items():
            if key in TAG_ID_LIST_KEYS and isinstance(value, list):
                rewritten[key] = [_map_id(tag_id, mapping) for tag_id in value]
            elif key in TAG_OBJECT_LIST_KEYS and isinstance(value, list):
                rewritten[key] = [_map_tag_object(tag, mapping) for tag in value]
            else:
                rewritten[key] = rewrite_tags(value, mapping)
        return rewritten

    return definition


def _map_id(tag_id: Any, mapping: Dict[str, str]) -> Any:
    return mapping.get(str(tag_id), tag_id)


def _map_tag_object(tag: Any, mapping: Dict[str, str]) -> Any:
    if isinstance(tag, dict) and 'id' in tag:
        return {**tag, 'id': _map_id(tag['id'], mapping)}
    return tag


def extract_components(document: Any) -> List[Dict[str, Any]]:
    """Component objects contained in a definition file"""
    if isinstance(document, dict) and isinstance(document.get('components'), list):
        candidates = document['components']
    elif isinstance(document, list):
        candidates = document
    else:
        candidates = [document]

    return [item for item in candidates if isinstance(item, dict) and item.get('name')]


class TagSynchronizer:
    """Keeps tag ids valid in the target space and pushes definitions"""

    def __init__(self,
                 client: StoryblokClient,
                 project_config: ProjectConfig,
                 catalog: Optional[TagCatalog] = None):
        """
        Initialize synchronizer

        Args:
            client: Storyblok client bound to the target space
            project_config: Project configuration caching the tag mapping
            catalog: Canonical tag catalog
        """
        self.client = client
        self.project_config = project_config
        self.catalog = catalog or TagCatalog.default()

    async def ensure_tags(self) -> Dict[str, str]:
        """
        Make sure every canonical tag exists in the space

        Existing tags are matched by name; missing ones are created one by
        one. The resulting source-to-target mapping is saved in the project
        configuration.

        Returns:
            Mapping of source tag id to target tag id
        """
        existing = {
            tag.get('name'): str(tag.get('id'))
            for tag in await self.client.list_internal_tags()
        }
        mapping: Dict[str, str] = {}

        for source_id, name in self.catalog.items():
            if name in existing:
                mapping[source_id] = existing[name]
                continue

            created = await self.client.create_internal_tag(name)
            if created.get('id') is None:
                raise PushError(f"Storyblok did not return an id for new tag '{name}'")
            mapping[source_id] = str(created['id'])
            logger.info(f"Created internal tag '{name}' in space {self.client.space}")

        self.project_config.set('tags', mapping)
        self.project_config.save()
        return mapping

    async def get_or_ensure_tags(self) -> Dict[str, str]:
        """Cached mapping from the project configuration, ensured on first use"""
        tags = self.project_config.tags
        if tags:
            return tags
        return await self.ensure_tags()

    async def push(self, definition: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create or update a component with remapped tags

        Args:
            definition: Component definition with a ``name``

        Returns:
            Component returned by the API
        """
        name = definition.get('name')
        if not name:
            raise PushError("Component definition has no name")

        tags = await self.get_or_ensure_tags()
        payload = rewrite_tags(definition, tags)

        existing = next(
            (c for c in await self.client.search_components(name) if c.get('name') == name),
            None
        )

        if existing is not None:
            logger.debug(f"Updating component {name} ({existing.get('id')})")
            return await self.client.update_component(existing['id'], payload)

        logger.debug(f"Creating component {name}")
        return await self.client.create_component(payload)

    async def push_file(self, definition_file: Path) -> List[str]:
        """
        Push every component defined in a JSON file

        Returns:
            Names of the pushed components

        Raises:
            PushError: If the file is unreadable or defines no components
        """
        try:
            with open(definition_file, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            raise PushError(f"Cannot read component definition {definition_file.name}: {e}")

        components = extract_components(document)
        if not components:
            raise PushError(f"No component definitions found in {definition_file.name}")

        pushed = []
        for component in components:
            await self.push(component)
            pushed.append(component['name'])
        return pushed
