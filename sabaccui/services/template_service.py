"""Template installation service"""

import asyncio
import logging
import os
import re
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console

from ..api.catalog import CatalogClient
from ..api.exceptions import (
    MigrationError,
    MissingSpaceError,
    SabaccUIError,
    SourceCloneError,
    TemplateStepError,
    ValidationError,
)
from ..constants import (
    ArtifactKind,
    CERT_FILE,
    CERT_PLACEHOLDER,
    DEFAULT_PROJECT_VERSION,
    EMOJI_BROOM,
    EMOJI_FOLDER,
    EMOJI_INFO,
    EMOJI_PACKAGE,
    EMOJI_PUZZLE,
    EMOJI_ROCKET,
    EMOJI_SUCCESS,
    EMOJI_TOOLS,
    EMOJI_WARNING,
    ENV_EXAMPLE_FILE,
    ENV_FILE,
    KEY_FILE,
    KEY_PLACEHOLDER,
    PACKAGE_JSON_FILE,
    SPACE_PLACEHOLDER,
    STORYBLOK_TOKEN_ENV_KEY,
    TEMPLATE_STAGING_PREFIX,
)
from ..core.artifact_stager import ArtifactStager, StagedArtifact
from ..core.dependency_resolver import DependencyResolver
from ..core.file_merger import FileMerger
from ..core.process_runner import ProcessRunner
from ..core.project_config import ProjectConfig
from ..core.tag_synchronizer import TagCatalog, TagSynchronizer
from ..core.user_config import UserConfig
from ..models.manifest import ArtifactManifest, PackageSet
from ..models.project import SetupAnswers
from ..models.result import ComponentInstallResult, TemplateInstallResult
from ..utils.file_utils import safe_remove
from ..utils.git_utils import clone_command, init_commands, parse_source_reference
from .base_service import BaseService, StoryblokFactory
from .blok_service import BlokService

logger = logging.getLogger(__name__)

SOURCE_CHECKOUT_DIR = "__source__"


class TemplateService(BaseService):
    """Creates new projects from catalog templates"""

    def __init__(self,
                 catalog: CatalogClient,
                 runner: Optional[ProcessRunner] = None,
                 storyblok_factory: Optional[StoryblokFactory] = None,
                 tag_catalog: Optional[TagCatalog] = None,
                 user_config: Optional[UserConfig] = None,
                 blok_service: Optional[BlokService] = None,
                 console: Optional[Console] = None):
        """
        Initialize template service

        Args:
            catalog: Catalog API client
            runner: Process runner for clone, package managers, migrations and git
            storyblok_factory: Builds a Storyblok client for a space id
            tag_catalog: Canonical tag catalog
            user_config: User configuration (certificate sources)
            blok_service: Installer used for the template's components
            console: Console used for progress output
        """
        super().__init__(catalog, runner, storyblok_factory, console)
        self.tag_catalog = tag_catalog
        self.user_config = user_config
        self.stager = ArtifactStager(prefix=TEMPLATE_STAGING_PREFIX)
        self.merger = FileMerger()
        self.resolver = DependencyResolver(self.runner)
        self.blok_service = blok_service or BlokService(
            catalog,
            runner=self.runner,
            storyblok_factory=self.storyblok_factory,
            tag_catalog=tag_catalog,
            console=self.console
        )

    async def list(self) -> List[Dict[str, Any]]:
        """Templates available in the catalog"""
        return await self.catalog.list_templates()

    async def init(self,
                   name: str,
                   key: str,
                   destination: Path,
                   answers: Optional[SetupAnswers] = None) -> TemplateInstallResult:
        """
        Create a project from a template

        The project is created in ``destination / name``. Sequential steps
        abort the installation; failures of individual components are
        recorded in the result and do not affect their siblings.

        Args:
            name: Project name
            key: Template key in the catalog
            destination: Parent directory of the new project
            answers: Setup answers; only the name is required

        Returns:
            TemplateInstallResult

        Raises:
            MissingSpaceError: If components must be installed without a space
            TemplateStepError: If a sequential step fails
        """
        answers = answers or SetupAnswers(name=name)
        project_dir = Path(destination) / name
        result = TemplateInstallResult(key=key, project_dir=project_dir)

        artifact = await self._step(
            'download', self.catalog.download_artifact(ArtifactKind.TEMPLATE, key),
            f"{EMOJI_PACKAGE} Downloading template {key}..."
        )

        try:
            async with self.stager.stage(artifact) as staged:
                await self._install(staged, project_dir, answers, result)
        except (TemplateStepError, MissingSpaceError):
            raise
        except SabaccUIError as e:
            raise TemplateStepError('stage', e)

        result.success = True
        self.output(f"{EMOJI_ROCKET} Template installed successfully.")
        return result

    async def _install(self,
                       staged: StagedArtifact,
                       project_dir: Path,
                       answers: SetupAnswers,
                       result: TemplateInstallResult) -> None:
        manifest = staged.manifest
        project_dir.mkdir(parents=True, exist_ok=True)

        if manifest.is_source:
            await self._step(
                'clone', self._clone_source(manifest.source, staged.temp_dir, project_dir, result),
                f"{EMOJI_FOLDER} Cloning source repository..."
            )
        elif manifest.base_dir:
            report = await self._step(
                'copy', self.merger.merge_tree(staged.resolve(manifest.base_dir), project_dir),
                f"{EMOJI_FOLDER} Copying template..."
            )
            result.merge.extend(report)

        for relative_paths in manifest.template_file_lists():
            report = await self._step(
                'copy', self.merger.merge(staged.temp_dir, project_dir, relative_paths)
            )
            result.merge.extend(report)

        copy_env_example(project_dir)

        project_config = await self._step(
            'setup', self._run_setup(project_dir, answers),
            f"{EMOJI_TOOLS} Setting up project..."
        )

        if manifest.used_components:
            space = project_config.space
            if not space:
                raise MissingSpaceError()

            # Children only read the tag mapping, so it is prepared up front
            await self._step(
                'tags', self._synchronizer(space, project_config).get_or_ensure_tags()
            )
            result.components = await self.install_components(
                project_dir, manifest.used_components, space, project_config
            )
            self._report_components(result)

        result.dependencies = await self._step(
            'dependencies', self._install_packages(project_dir, manifest, result.components),
            f"{EMOJI_PACKAGE} Installing packages..."
        )

        if manifest.migrations:
            await self._step(
                'migrations', self.run_migrations(project_dir, manifest.migrations, result),
                f"{EMOJI_TOOLS} Running migrations..."
            )

        result.git_initialized = await self.init_git(project_dir, result)
        self.output(f"{EMOJI_BROOM} Cleaning up...")

    async def _step(self, step: str, awaitable, message: Optional[str] = None):
        """Await one sequential step, tagging failures with the step name"""
        if message:
            self.output(message)
        try:
            return await awaitable
        except (TemplateStepError, MissingSpaceError):
            raise
        except (SabaccUIError, OSError) as e:
            raise TemplateStepError(step, e)

    async def install_components(self,
                                 project_dir: Path,
                                 keys: List[str],
                                 space: str,
                                 project_config: ProjectConfig) -> List[ComponentInstallResult]:
        """
        Install components concurrently in silent mode

        Returns:
            One result per key, in declaration order

        Raises:
            MissingSpaceError: Propagated from any child
        """
        self.output(f"{EMOJI_PUZZLE} Installing {len(keys)} components...")

        async def install_one(key: str) -> ComponentInstallResult:
            try:
                return await self.blok_service.install(
                    project_dir, key, space=space, silent=True, project_config=project_config
                )
            except MissingSpaceError:
                raise
            except SabaccUIError as e:
                logger.warning(f"Component {key} failed: {e}")
                return ComponentInstallResult(
                    key=key, success=False, error=str(e), error_code=e.error_code
                )
            except Exception as e:
                logger.warning(f"Component {key} failed unexpectedly: {e}")
                logger.debug("Component failure details", exc_info=True)
                return ComponentInstallResult(
                    key=key, success=False, error=f"{type(e).__name__}: {e}"
                )

        return list(await asyncio.gather(*(install_one(key) for key in keys)))

    def _report_components(self, result: TemplateInstallResult) -> None:
        installed = result.installed_components
        self.output(f"[green]{EMOJI_SUCCESS}[/green] {len(installed)} components installed:")
        for key in installed:
            self.output(f"  + {key}")
        for failed in result.failed_components:
            self.output(f"  [red]- {failed.key}[/red]: {failed.error}")

    async def _install_packages(self,
                                project_dir: Path,
                                manifest: ArtifactManifest,
                                components: List[ComponentInstallResult]):
        packages = manifest.packages or PackageSet()
        for component in components:
            if component.success and component.packages:
                packages = packages.merged_with(component.packages)

        if packages.is_empty:
            return await self.resolver.install_all(project_dir)
        return await self.resolver.reconcile(project_dir, packages)

    async def run_migrations(self,
                             project_dir: Path,
                             migrations: List[str],
                             result: Optional[TemplateInstallResult] = None) -> None:
        """
        Run migration scripts with ``node``, one after another

        Raises:
            MigrationError: On the first failing script; later ones do not run
        """
        for migration in migrations:
            script = project_dir / migration
            if not script.is_file():
                raise MigrationError(migration, "script not found")

            process = await self.runner.run(['node', str(script)], cwd=project_dir)
            if not process.success:
                raise MigrationError(migration, process.error_output)

            logger.info(f"Migration {migration} completed")
            if result is not None:
                result.migrations.append(migration)

    async def init_git(self, project_dir: Path, result: TemplateInstallResult) -> bool:
        """Initialize a repository and stage all files; failures only warn"""
        self.output(f"{EMOJI_INFO} Initializing git repository...")
        for command in init_commands():
            process = await self.runner.run(command, cwd=project_dir)
            if not process.success:
                message = f"Git initialization failed ({process.command_line}): {process.error_output}"
                result.add_warning(message)
                self.output(f"[yellow]{EMOJI_WARNING}[/yellow] {message}")
                return False
        return True

    async def _clone_source(self,
                            source: str,
                            staging_dir: Path,
                            project_dir: Path,
                            result: TemplateInstallResult) -> None:
        try:
            reference = parse_source_reference(source)
        except ValueError as e:
            raise SourceCloneError(source, str(e))

        checkout = staging_dir / SOURCE_CHECKOUT_DIR
        process = await self.runner.run(clone_command(reference, checkout), cwd=staging_dir)
        if not process.success:
            raise SourceCloneError(source, process.error_output)

        # Only the files are wanted, not the upstream history
        safe_remove(checkout / '.git')
        result.merge.extend(await self.merger.merge_tree(checkout, project_dir))

    def _synchronizer(self, space: str, project_config: ProjectConfig) -> TagSynchronizer:
        return TagSynchronizer(self.storyblok_factory(space), project_config, self.tag_catalog)

    async def _run_setup(self, project_dir: Path, answers: SetupAnswers) -> ProjectConfig:
        return self.setup(project_dir, answers)

    def setup(self, destination: Path, answers: SetupAnswers) -> ProjectConfig:
        """
        Write the project configuration and fill in project placeholders

        The Storyblok token goes into ``.env`` only. ``<space>`` in
        ``package.json`` is replaced with the space id, and SSL certificates
        configured in the user configuration are linked into the project.

        Args:
            destination: Project root
            answers: Setup answers

        Returns:
            The saved ProjectConfig
        """
        destination = Path(destination)
        if not destination.is_dir():
            raise ValidationError(f"Project directory does not exist: {destination}")

        if answers.storyblok_token:
            set_env_value(destination / ENV_FILE, STORYBLOK_TOKEN_ENV_KEY, answers.storyblok_token)

        package_json = destination / PACKAGE_JSON_FILE
        if answers.space and package_json.exists():
            replace_in_file(package_json, {SPACE_PLACEHOLDER: answers.space})

        if self._link_certificates(destination) and package_json.exists():
            replace_in_file(package_json, {CERT_PLACEHOLDER: CERT_FILE, KEY_PLACEHOLDER: KEY_FILE})
            self.output(f"[green]{EMOJI_SUCCESS}[/green] SSL certificates configured.")

        project_config = ProjectConfig(destination)
        if answers.space and project_config.space != str(answers.space):
            # Tag ids belong to one space
            project_config.delete('tags')
        project_config.apply(answers.to_config())
        project_config.set('version', DEFAULT_PROJECT_VERSION)
        project_config.save()

        self.output(f"[green]{EMOJI_SUCCESS}[/green] Project setup successfully.")
        return project_config

    def _link_certificates(self, destination: Path) -> bool:
        user_config = self.user_config or UserConfig()
        cert_source = user_config.get('certificateSources.cert')
        key_source = user_config.get('certificateSources.key')
        if not cert_source or not key_source:
            return False

        for source, name in ((cert_source, CERT_FILE), (key_source, KEY_FILE)):
            link = destination / name
            if link.is_symlink() or link.exists():
                link.unlink()
            os.symlink(Path(source).expanduser(), link)
            logger.debug(f"Linked {link} -> {source}")
        return True


def copy_env_example(project_dir: Path) -> bool:
    """Create ``.env`` from ``.env.example`` when only the example exists"""
    example = project_dir / ENV_EXAMPLE_FILE
    env = project_dir / ENV_FILE
    if example.exists() and not env.exists():
        shutil.copyfile(example, env)
        return True
    return False


def set_env_value(env_path: Path, key: str, value: str) -> None:
    """Set ``key=value`` in a dotenv file, replacing an existing assignment"""
    content = env_path.read_text(encoding='utf-8') if env_path.exists() else ""
    pattern = re.compile(rf'^{re.escape(key)}=.*$', re.MULTILINE)
    line = f"{key}={value}"

    if pattern.search(content):
        content = pattern.sub(lambda _: line, content)
    else:
        if content and not content.endswith('\n'):
            content += '\n'
        content += line + '\n'

    env_path.write_text(content, encoding='utf-8')


def replace_in_file(path: Path, replacements: Dict[str, str]) -> None:
    """Replace every occurrence of each placeholder in a text file"""
    content = path.read_text(encoding='utf-8')
    for placeholder, value in replacements.items():
        content = content.replace(placeholder, value)
    path.write_text(content, encoding='utf-8')
