"""Artifact staging: extract a downloaded archive and parse its manifest"""

import io
import json
import logging
import tarfile
import tempfile
import zipfile
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator

from ..api.exceptions import ManifestInvalidError, ManifestMissingError, ValidationError
from ..constants import MANIFEST_FILE
from ..models.manifest import ArtifactManifest
from ..utils.async_utils import sync_to_async
from ..utils.file_utils import is_within, safe_remove

logger = logging.getLogger(__name__)


@dataclass
class StagedArtifact:
    """An extracted artifact living in a temporary directory"""
    temp_dir: Path
    manifest: ArtifactManifest

    def resolve(self, relative_path: str) -> Path:
        return self.temp_dir / relative_path


class ArtifactStager:
    """Extracts artifact archives into owned temporary directories"""

    def __init__(self, prefix: str = "artifact-"):
        """
        Initialize stager

        Args:
            prefix: Prefix of the temporary directory name
        """
        self.prefix = prefix

    @asynccontextmanager
    async def stage(self, artifact: bytes) -> AsyncIterator[StagedArtifact]:
        """
        Extract an archive and parse its manifest

        The temporary directory is removed when the context exits, whether
        the body succeeded or raised.

        Args:
            artifact: Archive bytes (zip or tar)

        Yields:
            StagedArtifact
        """
        temp_dir = Path(tempfile.mkdtemp(prefix=self.prefix))
        logger.debug(f"Staging artifact in {temp_dir}")

        try:
            await self._extract(artifact, temp_dir)
            manifest = self.load_manifest(temp_dir)
            yield StagedArtifact(temp_dir=temp_dir, manifest=manifest)
        finally:
            safe_remove(temp_dir)
            logger.debug(f"Removed staging directory {temp_dir}")

    @staticmethod
    def load_manifest(directory: Path) -> ArtifactManifest:
        """
        Parse ``manifest.json`` at the root of an extracted artifact

        Raises:
            ManifestMissingError: If the manifest file is absent
            ManifestInvalidError: If it cannot be parsed
        """
        manifest_path = directory / MANIFEST_FILE
        if not manifest_path.is_file():
            raise ManifestMissingError(MANIFEST_FILE)

        try:
            with open(manifest_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ManifestInvalidError(str(e))

        try:
            return ArtifactManifest.from_dict(data)
        except ValueError as e:
            raise ManifestInvalidError(str(e))

    @sync_to_async
    def _extract(self, artifact: bytes, target: Path) -> None:
        buffer = io.BytesIO(artifact)

        if zipfile.is_zipfile(buffer):
            buffer.seek(0)
            with zipfile.ZipFile(buffer) as archive:
                for member in archive.namelist():
                    if not is_within(target / member, target):
                        raise ValidationError(f"Archive entry escapes staging directory: {member}")
                archive.extractall(target)
            return

        buffer.seek(0)
        try:
            with tarfile.open(fileobj=buffer, mode='r:*') as archive:
                if hasattr(tarfile, 'data_filter'):
                    archive.extractall(target, filter='data')
                else:
                    for member in archive.getmembers():
                        if not is_within(target / member.name, target):
                            raise ValidationError(
                                f"Archive entry escapes staging directory: {member.name}"
                            )
                    archive.extractall(target)
        except tarfile.TarError as e:
            raise ManifestInvalidError(f"artifact is not a readable archive ({e})")
