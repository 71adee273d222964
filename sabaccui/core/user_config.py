"""User level configuration (``~/.sabaccui/config.yaml``)"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..api.exceptions import ConfigError
from ..constants import ENV_CONFIG_PATH, USER_CONFIG_DIR, USER_CONFIG_FILE

logger = logging.getLogger(__name__)


def default_user_config_path() -> Path:
    """Location of the user configuration, overridable via environment"""
    override = os.environ.get(ENV_CONFIG_PATH)
    if override:
        return Path(override).expanduser()
    return Path.home() / USER_CONFIG_DIR / USER_CONFIG_FILE


class UserConfig:
    """Dot-notation access to the user configuration file

    Known keys:
        apiUrl: Catalog API base URL
        tagCatalog: Path to a YAML tag catalog
        certificateSources.cert / certificateSources.key: SSL files linked
            into new projects
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else default_user_config_path()
        self._config: Dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        if not self.config_path.exists():
            self._config = {}
            return

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid configuration file {self.config_path}: {e}")

        self._config = data if isinstance(data, dict) else {}

    def _save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self._config, f, default_flow_style=False, sort_keys=False)
        logger.debug(f"Saved user configuration to {self.config_path}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value using dot notation (``certificateSources.cert``)"""
        value: Any = self._config
        for part in key.split('.'):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a value using dot notation and persist the file"""
        parts = key.split('.')
        current = self._config
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value
        self._save()

    def get_all(self) -> Dict[str, Any]:
        return self._config
