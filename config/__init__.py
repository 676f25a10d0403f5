# Configuration package for bot settings and shared document settings

from .config_manager import ConfigManager, BotSettings, ConfigurationError

__all__ = ['ConfigManager', 'BotSettings', 'ConfigurationError']
