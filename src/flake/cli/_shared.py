"""Shared CLI utilities: exit codes and error output."""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Never

if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "ExitCode",
    "exit_with_error",
    "get_error_console",
    "parse_assignments",
]


class ExitCode(IntEnum):
    """Standard exit codes for the Flake CLI."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 4
    INTERNAL_ERROR = 5
    RENDER_ERROR = 6


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr.

    Returns:
        Console instance writing to stderr.
    """
    from rich.console import Console  # noqa: PLC0415

    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Args:
        message: The error message to display.
        code: The exit code to use (defaults to INTERNAL_ERROR).
        console: Optional Rich console for output. If not provided,
            a new stderr console will be created.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    from rich.markup import escape  # noqa: PLC0415

    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    raise SystemExit(code)


def parse_assignments(pairs: list[str] | None) -> dict[str, object]:
    """Parse KEY=VALUE pairs, inferring value types like environment config.

    Raises:
        ValueError: If a pair has no "=" or an empty key.
    """
    from flake.config import parse_string_value  # noqa: PLC0415

    result: dict[str, object] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            msg = f"Expected KEY=VALUE, got '{pair}'"
            raise ValueError(msg)
        result[key] = parse_string_value(value)
    return result
