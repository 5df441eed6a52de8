"""Jinja2 Environment factory."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from jinja2 import Environment


@dataclass(slots=True, frozen=True)
class EnvironmentConfig:
    """Configuration for Jinja2 Environment.

    Attributes:
        autoescape: Enable autoescaping (default: False for text templates).
        trim_blocks: Remove first newline after a block tag.
        lstrip_blocks: Strip leading whitespace before block tags.
        keep_trailing_newline: Preserve trailing newline in templates.
    """

    autoescape: bool = False
    trim_blocks: bool = False
    lstrip_blocks: bool = False
    keep_trailing_newline: bool = True


def create_environment(
    search_paths: Sequence[Path],
    *,
    config: EnvironmentConfig | None = None,
) -> Environment:
    """Create a Jinja2 Environment for Flake views.

    The environment loads templates from `search_paths` (so `{% include %}`
    and `{% import %}` resolve against the view directory) and has the
    section and layout tags of `SectionExtension` enabled.

    Note: autoescape is disabled by default. Rendered sections and nested
    views are marked safe, so turning it on only escapes data values.

    Args:
        search_paths: Template directories, highest precedence first.
        config: Optional environment configuration. If None, uses defaults.

    Returns:
        Configured Jinja2 Environment.
    """
    from jinja2 import Environment, FileSystemLoader  # noqa: PLC0415

    from ._extension import SectionExtension  # noqa: PLC0415

    if config is None:
        config = EnvironmentConfig()

    loader = FileSystemLoader([str(p) for p in search_paths])
    env: Environment = Environment(
        loader=loader,
        autoescape=config.autoescape,  # noqa: S701
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
        keep_trailing_newline=config.keep_trailing_newline,
        extensions=[SectionExtension],
    )

    return env
