"""Package dependency reconciliation"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from ..api.exceptions import ConfigError, DependencyInstallError
from ..constants import (
    DEFAULT_PACKAGE_MANAGER,
    LOCKFILE_MARKERS,
    PACKAGE_JSON_FILE,
    PackageManager,
)
from ..models.manifest import PackageSet
from ..models.result import DependencyReport
from .process_runner import ProcessRunner

logger = logging.getLogger(__name__)

_ADD_COMMANDS = {
    PackageManager.NPM: (["npm", "install"], "--save-dev"),
    PackageManager.YARN: (["yarn", "add"], "--dev"),
    PackageManager.BUN: (["bun", "add"], "-d"),
}


def detect_package_manager(project_dir: Path) -> PackageManager:
    """Pick the package manager from the lockfile present in ``project_dir``"""
    for marker, manager in LOCKFILE_MARKERS:
        if (project_dir / marker).exists():
            return manager
    return DEFAULT_PACKAGE_MANAGER


def compute_delta(existing: Dict[str, str], declared: Dict[str, str]) -> List[str]:
    """
    Packages to install, as ``name@version`` specs

    A name already declared by the project is skipped whatever its version.
    """
    return [
        f"{name}@{version}"
        for name, version in declared.items()
        if name not in existing
    ]


def build_install_command(manager: PackageManager, packages: List[str], dev: bool = False) -> List[str]:
    base, dev_flag = _ADD_COMMANDS[manager]
    command = list(base)
    if dev:
        command.append(dev_flag)
    return command + list(packages)


class DependencyResolver:
    """Installs the declared packages a project does not have yet"""

    def __init__(self, runner: ProcessRunner):
        self.runner = runner

    @staticmethod
    def read_package_json(project_dir: Path) -> Dict:
        package_json = project_dir / PACKAGE_JSON_FILE
        if not package_json.exists():
            return {}
        try:
            with open(package_json, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except ValueError as e:
            raise ConfigError(f"Invalid {PACKAGE_JSON_FILE} in {project_dir}: {e}")
        return data if isinstance(data, dict) else {}

    def plan(self, project_dir: Path, packages: PackageSet) -> Dict[str, List[str]]:
        """Compute both install batches without running anything"""
        package_json = self.read_package_json(project_dir)
        return {
            'dependencies': compute_delta(
                package_json.get('dependencies') or {}, packages.dependencies
            ),
            'devDependencies': compute_delta(
                package_json.get('devDependencies') or {}, packages.dev_dependencies
            ),
        }

    async def reconcile(self,
                        project_dir: Path,
                        packages: PackageSet,
                        manager: Optional[PackageManager] = None) -> DependencyReport:
        """
        Install missing dependencies and dev dependencies

        Args:
            project_dir: Project root holding ``package.json``
            packages: Declared package set
            manager: Force a package manager instead of detecting it

        Returns:
            DependencyReport

        Raises:
            DependencyInstallError: If an install command fails
        """
        manager = manager or detect_package_manager(project_dir)
        plan = self.plan(project_dir, packages)
        report = DependencyReport(package_manager=manager.value)

        if plan['dependencies']:
            await self._install(project_dir, manager, plan['dependencies'], dev=False)
            report.installed = plan['dependencies']

        if plan['devDependencies']:
            await self._install(project_dir, manager, plan['devDependencies'], dev=True)
            report.installed_dev = plan['devDependencies']

        if report.nothing_to_do:
            logger.info("No new packages to install")

        return report

    async def install_all(self, project_dir: Path,
                          manager: Optional[PackageManager] = None) -> DependencyReport:
        """Run a plain ``install`` of everything in ``package.json``"""
        manager = manager or detect_package_manager(project_dir)
        command = [manager.value, "install"]
        result = await self.runner.run(command, cwd=project_dir)
        if not result.success:
            raise DependencyInstallError(result.command_line, result.error_output)
        return DependencyReport(package_manager=manager.value)

    async def _install(self, project_dir: Path, manager: PackageManager,
                       packages: List[str], dev: bool) -> None:
        command = build_install_command(manager, packages, dev=dev)
        logger.info(f"Installing {'dev ' if dev else ''}packages: {' '.join(packages)}")

        result = await self.runner.run(command, cwd=project_dir)
        if not result.success:
            raise DependencyInstallError(result.command_line, result.error_output)
