"""
Configuration management system for the Discord Ticket Bot.

Settings come from two places: environment variables (loaded from ``.env``
by the entry point) and the non-category keys of the shared configuration
document. The ``ticketCategories`` key of that document belongs to the
category registry and is never read or written here.
"""

import json
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
from pathlib import Path
import logging

from errors.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_COLORS = {
    'primary': 0x5865F2,
    'info': 0x3498DB,
    'success': 0x2ECC71,
    'error': 0xE74C3C
}

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


@dataclass
class BotSettings:
    """Process-wide settings resolved at startup."""

    data_dir: str = "data"
    config_file: str = "config.json"
    server_config_file: str = "server_configs.json"
    database_url: str = "data/tickets.db"
    log_dir: str = "logs"
    log_level: str = "INFO"
    owner_ids: List[int] = field(default_factory=list)
    server_list_limit: int = 20

    def __post_init__(self):
        """Validate settings after initialization."""
        for owner_id in self.owner_ids:
            if not isinstance(owner_id, int) or owner_id <= 0:
                raise ValueError(f"Invalid owner ID: {owner_id}")

        if not isinstance(self.server_list_limit, int) or self.server_list_limit <= 0:
            raise ValueError(f"Invalid server_list_limit: {self.server_list_limit}")

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> 'BotSettings':
        """
        Build settings from environment variables.

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        data_dir = env.get('DATA_DIR', 'data')

        try:
            owner_ids = [
                int(part) for part in env.get('BOT_OWNER_IDS', '').split(',') if part.strip()
            ]
            return cls(
                data_dir=data_dir,
                config_file=env.get('CONFIG_FILE', 'config.json'),
                server_config_file=env.get('SERVER_CONFIG_FILE', 'server_configs.json'),
                database_url=env.get('DATABASE_URL', str(Path(data_dir) / 'tickets.db')),
                log_dir=env.get('LOG_DIR', 'logs'),
                log_level=env.get('LOG_LEVEL', 'INFO').upper(),
                owner_ids=owner_ids,
                server_list_limit=int(env.get('SERVER_LIST_LIMIT', '20'))
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment configuration: {e}")


class ConfigManager:
    """Read-only view of bot settings and the shared document's global settings."""

    def __init__(self, settings: Optional[BotSettings] = None):
        """
        Initialize ConfigManager.

        Args:
            settings: Resolved settings; read from the environment when omitted
        """
        self.settings = settings or BotSettings.from_env()
        self.config_file = Path(self.settings.data_dir) / self.settings.config_file
        self.global_config: Dict[str, Any] = {}
        self._load_configuration()

    def _load_configuration(self):
        """Load global settings from the shared document."""
        try:
            if self.config_file.exists():
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    config_data = json.load(f)

                if not isinstance(config_data, dict):
                    raise ConfigurationError(f"{self.config_file} must contain a JSON object")

                self.global_config = {
                    k: v for k, v in config_data.items() if k != 'ticketCategories'
                }
                logger.info(f"Configuration loaded successfully from {self.config_file}")
            else:
                logger.info(f"Configuration file {self.config_file} not found, using defaults")
                self.global_config = {'colors': dict(DEFAULT_COLORS)}

        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in configuration file: {e}")
            raise ConfigurationError(f"Invalid JSON in configuration file: {e}")
        except ConfigurationError:
            raise
        except OSError as e:
            logger.error(f"Error loading configuration: {e}")
            raise ConfigurationError(f"Error loading configuration: {e}")

    def get_global_config(self, key: str, default: Any = None) -> Any:
        """
        Get a global configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return self.global_config.get(key, default)

    def get_color(self, name: str) -> int:
        """
        Get an embed color by name.

        Accepts integers or ``#RRGGBB`` strings in the document; unknown or
        malformed values fall back to the default palette.
        """
        colors = self.get_global_config('colors')
        if not isinstance(colors, dict):
            colors = {}
        value = colors.get(name, DEFAULT_COLORS.get(name, DEFAULT_COLORS['primary']))
        if isinstance(value, str):
            try:
                return int(value.lstrip('#'), 16)
            except ValueError:
                logger.warning(f"Invalid color {value!r} for {name}, using default")
                return DEFAULT_COLORS.get(name, DEFAULT_COLORS['primary'])
        return value

    def validate_configuration(self) -> List[str]:
        """
        Validate the current configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.settings.log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid log level: {self.settings.log_level}. Must be one of {VALID_LOG_LEVELS}"
            )

        colors = self.global_config.get('colors', {})
        if not isinstance(colors, dict):
            errors.append("colors must be a mapping of name to color")

        if self.settings.config_file == self.settings.server_config_file:
            errors.append("CONFIG_FILE and SERVER_CONFIG_FILE must be different documents")

        return errors
