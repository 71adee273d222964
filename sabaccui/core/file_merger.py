"""Merging artifact files into a project tree without clobbering local edits"""

import logging
from pathlib import Path
from typing import Iterable

from ..api.exceptions import ValidationError
from ..models.result import MergeOutcome, MergeReport
from ..utils.file_utils import (
    copy_file_async,
    default_sibling_path,
    files_identical,
    is_within,
)

logger = logging.getLogger(__name__)


class FileMerger:
    """Copies declared files from a staged artifact into a project

    Per-file policy:
        - destination missing: copy verbatim
        - destination identical: nothing to do
        - destination differs: keep it and write the incoming version to a
          ``<stem>.default<suffix>`` sibling
    """

    async def merge(self,
                    source_dir: Path,
                    target_dir: Path,
                    relative_paths: Iterable[str]) -> MergeReport:
        """
        Merge a list of files

        Args:
            source_dir: Staged artifact directory
            target_dir: Project directory
            relative_paths: Paths relative to both directories

        Returns:
            MergeReport with one outcome per path
        """
        report = MergeReport()

        for relative_path in relative_paths or []:
            outcome = await self.merge_file(source_dir, target_dir, relative_path)
            report.record(relative_path, outcome)

        return report

    async def merge_tree(self, source_dir: Path, target_dir: Path) -> MergeReport:
        """
        Merge every file below ``source_dir``

        Args:
            source_dir: Directory copied wholesale
            target_dir: Project directory

        Returns:
            MergeReport with one outcome per file
        """
        if not source_dir.is_dir():
            raise ValidationError(f"Base directory not found in artifact: {source_dir.name}")

        relative_paths = sorted(
            path.relative_to(source_dir).as_posix()
            for path in source_dir.rglob('*')
            if path.is_file()
        )
        return await self.merge(source_dir, target_dir, relative_paths)

    async def merge_file(self, source_dir: Path, target_dir: Path, relative_path: str) -> MergeOutcome:
        """Merge a single file and return what happened"""
        source = source_dir / relative_path
        destination = target_dir / relative_path

        if not is_within(source, source_dir) or not is_within(destination, target_dir):
            raise ValidationError(f"File path escapes project directory: {relative_path}")

        if not source.is_file():
            logger.warning(f"Declared file missing from artifact: {relative_path}")
            return MergeOutcome.MISSING

        destination.parent.mkdir(parents=True, exist_ok=True)

        if not destination.exists():
            await copy_file_async(source, destination)
            logger.debug(f"Copied {relative_path}")
            return MergeOutcome.COPIED

        if await files_identical(source, destination):
            logger.debug(f"Unchanged {relative_path}")
            return MergeOutcome.UNCHANGED

        sibling = default_sibling_path(destination)
        if not (sibling.exists() and await files_identical(source, sibling)):
            await copy_file_async(source, sibling)
        logger.info(f"Kept customized {relative_path}, incoming version saved as {sibling.name}")
        return MergeOutcome.CONFLICTED
