"""
Configuration loading for fstoolkit
"""

import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional

from .models import Config, ServerConfig, LoggingConfig, PageRoute, DEFAULT_HOST, DEFAULT_PORT

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "fstoolkit.yaml"


class ConfigError(Exception):
    """Raised when a configuration file cannot be parsed"""
    pass


class ConfigManager:
    """Loads and caches a YAML configuration file"""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path).resolve()
        self.config: Optional[Config] = None

    def load_config(self) -> Config:
        """Load configuration from YAML file"""
        if not self.config_path.exists():
            logger.warning(f"Configuration file not found: {self.config_path}")
            self.config = Config()
            return self.config

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {self.config_path}")

        config = self._parse_config(data)
        self.config = config
        logger.info(f"Configuration loaded from {self.config_path}")
        return config

    def _parse_config(self, data: Dict[str, Any]) -> Config:
        """Parse configuration data into Config object"""
        try:
            # Server configuration
            server_data = data.get('server') or {}
            server = ServerConfig(
                addr=str(server_data.get('addr', DEFAULT_HOST)),
                port=int(server_data.get('port', DEFAULT_PORT))
            )

            # Pages, relative files resolve against the config file location
            pages = []
            for page_data in data.get('pages') or []:
                file_path = Path(page_data['file'])
                if not file_path.is_absolute():
                    file_path = self.config_path.parent / file_path
                pages.append(PageRoute(url=str(page_data['url']), file_path=file_path))

            content_types = {
                str(ext): str(content_type)
                for ext, content_type in (data.get('contentTypes') or {}).items()
            }

            # Logging
            logging_data = data.get('logging') or {}
            logging_config = LoggingConfig(
                json=bool(logging_data.get('json', False)),
                file=str(logging_data.get('file', '') or ''),
                level=str(logging_data.get('level', 'INFO')),
                max_size_mb=int(logging_data.get('max_size_mb', 10)),
                backup_count=int(logging_data.get('backup_count', 3))
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration {self.config_path}: {e!r}") from e

        return Config(
            server=server,
            pages=pages,
            contentTypes=content_types,
            logging=logging_config
        )

    def get_config(self) -> Config:
        """Get current configuration"""
        if self.config is None:
            self.config = self.load_config()
        return self.config


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Config:
    """Load configuration from file"""
    return ConfigManager(config_path).load_config()
