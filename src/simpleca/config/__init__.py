"""Configuration subsystem for SimpleCA.

Public API::

    from simpleca.config import SimpleCAConfig, ensure_config_file, resolve_config_dir

    config_dir = resolve_config_dir()
    config = SimpleCAConfig(config_file=ensure_config_file(config_dir))
    names = config.settings.ca.ca_name()
"""

from simpleca.config.settings import (
    CASettings,
    KeySettings,
    LoggingSettings,
    SimpleCASettings,
    ValiditySettings,
    build_settings,
)
from simpleca.config.simpleca_config import (
    ConfigDirectoryError,
    ConfigValidationError,
    SimpleCAConfig,
    ensure_config_file,
    resolve_config_dir,
)

__all__ = [
    "CASettings",
    "ConfigDirectoryError",
    "ConfigValidationError",
    "KeySettings",
    "LoggingSettings",
    "SimpleCAConfig",
    "SimpleCASettings",
    "ValiditySettings",
    "build_settings",
    "ensure_config_file",
    "resolve_config_dir",
]
