"""Per-project configuration (``sabaccui.config.json``)"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..api.exceptions import ConfigError
from ..constants import PROJECT_CONFIG_FILE, PROJECT_CONFIG_INDENT
from ..utils.file_utils import write_json
from ..utils.version_utils import is_valid_version

logger = logging.getLogger(__name__)


class ProjectConfig:
    """Configuration context bound to one project directory

    Constructing the object binds it to a directory; there is no unbound
    state. Services receive the instance explicitly instead of reaching for
    a process-wide singleton.
    """

    def __init__(self, project_root: Union[str, Path], autoload: bool = True):
        """Initialize project configuration

        Args:
            project_root: Project root directory
            autoload: Load the file immediately if it exists
        """
        self.project_root = Path(project_root)
        self.config_path = self.project_root / PROJECT_CONFIG_FILE
        self._data: Dict[str, Any] = {}

        if autoload:
            self.load()

    @property
    def exists(self) -> bool:
        return self.config_path.exists()

    def load(self) -> Dict[str, Any]:
        """Load configuration from file, a missing file yields an empty config

        Raises:
            ConfigError: If the file exists but is not valid JSON
        """
        if not self.config_path.exists():
            self._data = {}
            return self._data

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except ValueError as e:
            raise ConfigError(f"Invalid project configuration {self.config_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Project configuration must be a JSON object: {self.config_path}")

        self._data = data
        logger.debug(f"Loaded project configuration from {self.config_path}")
        return self._data

    def save(self) -> None:
        """Write configuration to disk with 2-space indentation

        Raises:
            ConfigError: If the stored version is not a valid version string
        """
        version = self._data.get('version')
        if version is not None and not is_valid_version(str(version)):
            raise ConfigError(f"Invalid project version: {version}")

        write_json(self.config_path, self._data, indent=PROJECT_CONFIG_INDENT)
        logger.debug(f"Saved project configuration to {self.config_path}")

    def get(self, key: Optional[str] = None, default: Any = None) -> Any:
        """Get a value, or a copy of the whole configuration without a key"""
        if key is None:
            return copy.deepcopy(self._data)
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def apply(self, data: Dict[str, Any]) -> None:
        """Shallow-merge ``data`` into the configuration"""
        self._data.update(data)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    @property
    def space(self) -> Optional[str]:
        space = self._data.get('space')
        return str(space) if space else None

    @property
    def tags(self) -> Optional[Dict[str, str]]:
        return self._data.get('tags') or None
