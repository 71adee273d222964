"""Blok installation service"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console

from ..api.catalog import CatalogClient
from ..api.exceptions import MissingSpaceError
from ..constants import (
    ArtifactKind,
    COMPONENT_STAGING_PREFIX,
    EMOJI_FOLDER,
    EMOJI_PACKAGE,
    EMOJI_ROCKET,
    EMOJI_SUCCESS,
)
from ..core.artifact_stager import ArtifactStager
from ..core.dependency_resolver import DependencyResolver
from ..core.file_merger import FileMerger
from ..core.process_runner import ProcessRunner
from ..core.project_config import ProjectConfig
from ..core.tag_synchronizer import TagCatalog, TagSynchronizer
from ..models.result import ComponentInstallResult
from .base_service import BaseService, StoryblokFactory

logger = logging.getLogger(__name__)


class BlokService(BaseService):
    """Installs bloks (components) into an existing project"""

    def __init__(self,
                 catalog: CatalogClient,
                 runner: Optional[ProcessRunner] = None,
                 storyblok_factory: Optional[StoryblokFactory] = None,
                 tag_catalog: Optional[TagCatalog] = None,
                 console: Optional[Console] = None):
        super().__init__(catalog, runner, storyblok_factory, console)
        self.tag_catalog = tag_catalog
        self.stager = ArtifactStager(prefix=COMPONENT_STAGING_PREFIX)
        self.merger = FileMerger()
        self.resolver = DependencyResolver(self.runner)

    async def list(self, components: bool = False) -> List[Dict[str, Any]]:
        """Bloks available in the catalog, or the raw components when ``components`` is set"""
        if components:
            return await self.catalog.list_components()
        return await self.catalog.list_bloks()

    async def install(self,
                      project_dir: Path,
                      key: str,
                      space: Optional[str] = None,
                      silent: bool = False,
                      project_config: Optional[ProjectConfig] = None) -> ComponentInstallResult:
        """
        Download a blok and merge it into a project

        Args:
            project_dir: Project root
            key: Blok key in the catalog
            space: Target space, defaults to the project configuration
            silent: Skip dependency installation and progress output; the
                caller is expected to install ``result.packages`` itself
            project_config: Configuration of ``project_dir`` if already loaded

        Returns:
            ComponentInstallResult

        Raises:
            MissingSpaceError: If no space is known, before anything is downloaded
            SabaccUIError: On download, manifest, install or push failures
        """
        project_dir = Path(project_dir)
        project_config = project_config or ProjectConfig(project_dir)
        space = space or project_config.space
        if not space:
            raise MissingSpaceError()

        result = ComponentInstallResult(key=key, success=False)

        self.output(f"{EMOJI_PACKAGE} Downloading component: {key} ...", silent)
        artifact = await self.catalog.download_artifact(ArtifactKind.COMPONENT, key)

        async with self.stager.stage(artifact) as staged:
            manifest = staged.manifest

            self.output(f"{EMOJI_FOLDER} Copying files...", silent)
            for relative_paths in manifest.component_file_lists():
                result.merge.extend(
                    await self.merger.merge(staged.temp_dir, project_dir, relative_paths)
                )

            result.packages = manifest.packages
            if manifest.packages and not manifest.packages.is_empty and not silent:
                self.output(f"{EMOJI_PACKAGE} Installing packages...", silent)
                result.dependencies = await self.resolver.reconcile(project_dir, manifest.packages)

            if manifest.storyblok_definitions:
                self.output(f"{EMOJI_ROCKET} Pushing Storyblok bloks...", silent)
                synchronizer = TagSynchronizer(
                    self.storyblok_factory(space), project_config, self.tag_catalog
                )
                for definition_file in manifest.storyblok_definitions:
                    result.pushed.extend(
                        await synchronizer.push_file(project_dir / definition_file)
                    )

        result.success = True
        self.output(f"[green]{EMOJI_SUCCESS}[/green] Component {key} installed successfully!", silent)
        logger.info(f"Installed component {key}: {result.merge.write_count} files written")
        return result
