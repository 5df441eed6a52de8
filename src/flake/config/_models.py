"""Configuration models.

Every section is a frozen Pydantic model; unknown keys are ignored so a
config file written for a newer release still loads.
"""

from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from flake.templating import EnvironmentConfig


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty logs to stderr).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    file: str = ""


class TemplatesConfig(BaseModel):
    """Template lookup configuration section.

    Attributes:
        path: Directory that view names are resolved against.
        extension: Template file extension, without the leading dot.
        max_layout_depth: Longest allowed chain of nested layouts.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    path: str = ""
    extension: str = Field(default="j2", min_length=1, pattern=r"^[^./\\]")
    max_layout_depth: int = Field(default=32, ge=1)


class JinjaConfig(BaseModel):
    """Jinja2 environment configuration section."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    autoescape: bool = False
    trim_blocks: bool = False
    lstrip_blocks: bool = False
    keep_trailing_newline: bool = True

    def to_environment_config(self) -> EnvironmentConfig:
        return EnvironmentConfig(
            autoescape=self.autoescape,
            trim_blocks=self.trim_blocks,
            lstrip_blocks=self.lstrip_blocks,
            keep_trailing_newline=self.keep_trailing_newline,
        )


class FlakeConfig(BaseModel):
    """Complete Flake configuration.

    Use `flake.config.load_config()` to build one from files and the
    environment; constructing it directly gives the defaults.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    templates: TemplatesConfig = Field(default_factory=TemplatesConfig)
    jinja: JinjaConfig = Field(default_factory=JinjaConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
