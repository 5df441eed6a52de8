# pyright: reportUnusedFunction=false
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing
"""The `render` and `find` commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

from cyclopts import Parameter
from jinja2 import TemplateError

from flake._engine import Flake
from flake._store import SharedStore
from flake.config import ConfigLoadError, ConfigValidationError, load_config
from flake.exceptions import ConfigurationError, FlakeError, ViewNotFoundError

from ._shared import ExitCode, exit_with_error, parse_assignments

if TYPE_CHECKING:
    from cyclopts import App
    from rich.console import Console


def _build_engine(
    console: Console,
    *,
    path: Path | None,
    extension: str | None,
    config: Path | None,
    shared: dict[str, object] | None = None,
) -> Flake:
    overrides: dict[str, object] = {}
    if extension:
        overrides["templates"] = {"extension": extension}

    try:
        loaded = load_config(config_path=config, overrides=overrides or None)
    except FileNotFoundError as e:
        exit_with_error(str(e), ExitCode.LOAD_ERROR, console=console)
    except ConfigLoadError as e:
        exit_with_error(
            f"Failed to load config: {e}", ExitCode.LOAD_ERROR, console=console
        )
    except ConfigValidationError as e:
        exit_with_error(
            f"Config validation failed: {e}",
            ExitCode.VALIDATION_ERROR,
            console=console,
        )

    try:
        engine = Flake.from_config(loaded, path=path, store=SharedStore(shared))
    except ConfigurationError as e:
        exit_with_error(str(e), ExitCode.NOT_FOUND, console=console)
    return engine


def register_commands(app: App, console: Console) -> None:
    """Register the Flake commands on `app`, reporting errors to `console`."""

    @app.command
    def render(
        name: str,
        *,
        path: Annotated[
            Path | None, Parameter(name="--path", help="Template directory")
        ] = None,
        extension: Annotated[
            str | None, Parameter(name="--extension", help="Template file extension")
        ] = None,
        set_: Annotated[
            list[str] | None,
            Parameter(name="--set", help="View data as KEY=VALUE (repeatable)"),
        ] = None,
        share: Annotated[
            list[str] | None,
            Parameter(name="--share", help="Shared data as KEY=VALUE (repeatable)"),
        ] = None,
        output: Annotated[
            Path | None, Parameter(name="--output", help="Write output to a file")
        ] = None,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
    ) -> None:
        """Render a view and print the result.

        Args:
            name: View name relative to the template directory.
            path: Template directory. Defaults to templates.path from config.
            extension: Template file extension, without the leading dot.
            set_: View data as KEY=VALUE. Values are typed like env config.
            share: Shared data as KEY=VALUE.
            output: Write the rendered text to this file instead of stdout.
            config: Explicit config file. Replaces config discovery.
        """
        try:
            data = parse_assignments(set_)
            shared = parse_assignments(share)
        except ValueError as e:
            exit_with_error(str(e), ExitCode.VALIDATION_ERROR, console=console)

        engine = _build_engine(
            console, path=path, extension=extension, config=config, shared=shared
        )

        try:
            result = str(engine.render(name, data))
        except ViewNotFoundError as e:
            exit_with_error(str(e), ExitCode.NOT_FOUND, console=console)
        except (FlakeError, TemplateError) as e:
            exit_with_error(
                f"Failed to render {name}: {e}", ExitCode.RENDER_ERROR, console=console
            )

        if output is None:
            print(result)  # noqa: T201
            return

        try:
            _ = output.write_text(result + "\n", encoding="utf-8")
        except OSError as e:
            exit_with_error(
                f"Failed to write {output}: {e}", ExitCode.IO_ERROR, console=console
            )

    @app.command
    def find(
        name: str,
        *,
        path: Annotated[
            Path | None, Parameter(name="--path", help="Template directory")
        ] = None,
        extension: Annotated[
            str | None, Parameter(name="--extension", help="Template file extension")
        ] = None,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
    ) -> None:
        """Print the template file a view name resolves to.

        Args:
            name: View name relative to the template directory.
            path: Template directory. Defaults to templates.path from config.
            extension: Template file extension, without the leading dot.
            config: Explicit config file. Replaces config discovery.
        """
        engine = _build_engine(console, path=path, extension=extension, config=config)
        try:
            location = engine.find(name)
        except ViewNotFoundError as e:
            exit_with_error(str(e), ExitCode.NOT_FOUND, console=console)
        print(location)  # noqa: T201
