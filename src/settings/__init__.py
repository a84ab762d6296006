"""Project configuration for cronstart."""

from settings.config import (
    CONFIG_FILENAME,
    ConfigError,
    CronStartConfig,
    load_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "CronStartConfig",
    "load_config",
]
