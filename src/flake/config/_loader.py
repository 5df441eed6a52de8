# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""TOML configuration file loading and merging."""

from __future__ import annotations

import json
import os
import re
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from flake.exceptions import ConfigLoadError, ConfigValidationError

from ._models import FlakeConfig

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_PREFIX = "FLAKE_"
PROJECT_CONFIG_NAME = "flake.toml"

# tomllib before 3.14 only reports the position in the message text
_POSITION_PATTERN = re.compile(r"\(at line (\d+), column (\d+)\)")


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a TOML file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed TOML content as dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file cannot be parsed.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        line, column = _error_position(e)
        msg = f"Failed to parse TOML file: {e}"
        raise ConfigLoadError(msg, path=path, line=line, column=column) from e


def _error_position(error: tomllib.TOMLDecodeError) -> tuple[int | None, int | None]:
    line: int | None = getattr(error, "lineno", None)
    column: int | None = getattr(error, "colno", None)
    if line is None:
        match = _POSITION_PATTERN.search(str(error))
        if match:
            line, column = int(match.group(1)), int(match.group(2))
    return line, column


def deep_merge(
    base: Mapping[str, Any],  # pyright: ignore[reportExplicitAny]
    override: Mapping[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Deep merge two configuration dictionaries.

    Merges `override` into `base`, returning a new dictionary. Neither input
    is modified.

    Merge rules:
        - Dictionaries are recursively merged
        - Arrays are replaced entirely (no element-wise merge)
        - Scalars are replaced with override value
        - Missing keys in override preserve base values
    """
    result: dict[str, Any] = dict(base)  # pyright: ignore[reportExplicitAny]

    for key, override_val in override.items():
        base_val = result.get(key)
        if isinstance(base_val, dict) and isinstance(override_val, dict):
            result[key] = deep_merge(base_val, override_val)
        else:
            result[key] = override_val

    return result


def set_nested_key(
    data: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Set a value in a nested dictionary using a dot-separated key path.

    Intermediate dictionaries are created as needed.

    Example:
        >>> data = {}
        >>> set_nested_key(data, "templates.extension", "html")
        >>> data
        {'templates': {'extension': 'html'}}
    """
    *parents, leaf = key_path.split(".")
    current = data
    for part in parents:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[leaf] = value


def parse_string_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Parse a string value with automatic type inference.

    Precedence:
    1. Boolean: true/false (case-insensitive)
    2. Integer: parseable as int (no decimal)
    3. Float: parseable as float (with decimal)
    4. JSON array/object: starts with [ or {
    5. String: fallback

    Used for environment variables and CLI `KEY=VALUE` pairs alike.

    Examples:
        >>> parse_string_value("true")
        True
        >>> parse_string_value("42")
        42
        >>> parse_string_value("3.5")
        3.5
        >>> parse_string_value("[1, 2, 3]")
        [1, 2, 3]
    """
    lower_value = value.lower()
    if lower_value in ("true", "false"):
        return lower_value == "true"

    if "." not in value:
        try:
            return int(value)
        except ValueError:
            pass
    else:
        try:
            return float(value)
        except ValueError:
            pass

    if (value.startswith("[") and value.endswith("]")) or (
        value.startswith("{") and value.endswith("}")
    ):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


def parse_env_vars(
    prefix: str = ENV_PREFIX,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Parse environment variables into a config dictionary.

    Environment variable naming:
        - Add prefix (FLAKE_)
        - Convert to uppercase
        - Replace dots with double underscores
        - Example: templates.extension -> FLAKE_TEMPLATES__EXTENSION

    Variables without a double underscore (FLAKE_DEBUG, FLAKE_LOG_LEVEL) are
    logger switches, not config keys, and are skipped.
    """
    source = os.environ if environ is None else environ
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key, value in source.items():
        if not key.startswith(prefix):
            continue

        config_key = key[len(prefix) :]
        if "__" not in config_key:
            continue

        config_path = config_key.replace("__", ".").lower()
        set_nested_key(result, config_path, parse_string_value(value))

    return result


def get_user_config_path() -> Path:
    """Return the per-user config file location."""
    import platformdirs  # noqa: PLC0415

    return platformdirs.user_config_path("flake") / "config.toml"


def discover_config_files(project_root: Path | None = None) -> list[Path]:
    """List existing config files, lowest precedence first.

    Args:
        project_root: Directory holding flake.toml. Defaults to the
            current working directory.
    """
    root = project_root if project_root is not None else Path.cwd()
    candidates = [get_user_config_path(), root / PROJECT_CONFIG_NAME]
    return [path for path in candidates if path.is_file()]


def _first_error_key(error: ValidationError) -> tuple[str, object, str]:
    """Summarize the first pydantic error as (key, value, expected)."""
    first = error.errors()[0]
    key = ".".join(str(part) for part in first["loc"])
    return key, first.get("input"), first["msg"]


def config_from_dict(
    data: Mapping[str, Any],  # pyright: ignore[reportExplicitAny]
    *,
    source: str | None = None,
) -> FlakeConfig:
    """Validate a configuration dictionary.

    Raises:
        ConfigValidationError: If a value fails validation.
    """
    try:
        return FlakeConfig.model_validate(dict(data))
    except ValidationError as e:
        key, value, expected = _first_error_key(e)
        msg = f"Invalid configuration value for '{key}': {expected}"
        raise ConfigValidationError(
            msg, key=key, value=value, expected=expected, source=source
        ) from e


def load_config(
    *,
    config_path: Path | None = None,
    project_root: Path | None = None,
    include_env: bool = True,
    overrides: Mapping[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> FlakeConfig:
    """Load configuration from files, the environment and explicit overrides.

    Precedence, lowest first: defaults, the user config file, the project's
    flake.toml, FLAKE_* environment variables, `overrides`. An explicit
    `config_path` replaces file discovery and must exist.

    Raises:
        FileNotFoundError: If `config_path` does not exist.
        ConfigLoadError: If a file cannot be parsed.
        ConfigValidationError: If the merged configuration is invalid.
    """
    if config_path is not None:
        if not config_path.is_file():
            msg = f"Config file not found: {config_path}"
            raise FileNotFoundError(msg)
        paths = [config_path]
    else:
        paths = discover_config_files(project_root)

    merged: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]
    for path in paths:
        merged = deep_merge(merged, read_toml_file(path))
    if include_env:
        merged = deep_merge(merged, parse_env_vars())
    if overrides:
        merged = deep_merge(merged, overrides)

    return config_from_dict(merged)


def config_from_file(path: Path) -> FlakeConfig:
    """Load a single config file without discovery or environment overrides.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file cannot be parsed.
        ConfigValidationError: If a value fails validation.
    """
    return config_from_dict(read_toml_file(path), source=str(path))
