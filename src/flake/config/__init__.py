"""Flake configuration.

Example:
    >>> from flake.config import load_config
    >>> config = load_config()
    >>> config.templates.extension
    'j2'
"""

from flake.exceptions import ConfigError, ConfigLoadError, ConfigValidationError

from ._loader import (
    ENV_PREFIX,
    PROJECT_CONFIG_NAME,
    config_from_dict,
    config_from_file,
    deep_merge,
    discover_config_files,
    get_user_config_path,
    load_config,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from ._models import (
    FlakeConfig,
    JinjaConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    TemplatesConfig,
)

__all__ = [
    "ENV_PREFIX",
    "PROJECT_CONFIG_NAME",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "FlakeConfig",
    "JinjaConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "TemplatesConfig",
    "config_from_dict",
    "config_from_file",
    "deep_merge",
    "discover_config_files",
    "get_user_config_path",
    "load_config",
    "parse_env_vars",
    "parse_string_value",
    "read_toml_file",
    "set_nested_key",
]
