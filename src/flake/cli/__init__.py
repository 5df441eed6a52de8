"""Utilities used by the Flake CLI."""

from ._app import create_app, main
from ._shared import ExitCode, exit_with_error, parse_assignments

__all__ = ["ExitCode", "create_app", "exit_with_error", "main", "parse_assignments"]
