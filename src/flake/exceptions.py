"""Flake exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path


class FlakeError(Exception):
    """Base exception for Flake errors."""


class ConfigurationError(FlakeError, ValueError):
    """Raised when a view is created with an invalid base directory.

    Attributes:
        path: The directory that was rejected.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and directory context.

        Args:
            message: Human-readable error message.
            path: The directory that was rejected.
        """
        super().__init__(message)
        self.path: Path | None = path


class ViewNotFoundError(FlakeError, LookupError):
    """Raised when a view name does not resolve to a template file.

    Attributes:
        name: The view name that was looked up.
        location: The candidate file location that does not exist.
    """

    def __init__(
        self,
        message: str,
        *,
        name: str,
        location: Path | None = None,
    ) -> None:
        """Initialize with error message and lookup context.

        Args:
            message: Human-readable error message.
            name: The view name that was looked up.
            location: The candidate file location that does not exist.
        """
        super().__init__(message)
        self.name: str = name
        self.location: Path | None = location


class LayoutCycleError(FlakeError):
    """Raised when a layout chain loops back on itself or grows too deep.

    Attributes:
        chain: View names from the innermost view to the rejected layout.
    """

    def __init__(self, message: str, *, chain: tuple[str, ...] = ()) -> None:
        """Initialize with error message and chain context."""
        super().__init__(message)
        self.chain: tuple[str, ...] = chain


# =============================================================================
# Section Exceptions
# =============================================================================


class SectionError(FlakeError):
    """Base exception for section definition errors."""


class ReservedNameError(SectionError, ValueError):
    """Raised when a template tries to define the reserved "content" section.

    Attributes:
        name: The reserved section name.
    """

    def __init__(self, message: str, *, name: str) -> None:
        """Initialize with error message and section context."""
        super().__init__(message)
        self.name: str = name


class SectionStackEmptyError(SectionError):
    """Raised when a section is closed without one being open."""


class UnclosedSectionError(SectionError):
    """Raised when a template finishes with section captures still open.

    Attributes:
        names: Names of the open sections, outermost first.
    """

    def __init__(self, message: str, *, names: tuple[str, ...]) -> None:
        """Initialize with error message and the open section names."""
        super().__init__(message)
        self.names: tuple[str, ...] = names


# =============================================================================
# Filter Exceptions
# =============================================================================


class FilterNotFoundError(FlakeError, LookupError):
    """Raised when a sanitize rule names an unregistered filter.

    Attributes:
        filter_name: The name that was not found in the registry.
    """

    def __init__(self, message: str, *, filter_name: str) -> None:
        """Initialize with error message and filter context."""
        super().__init__(message)
        self.filter_name: str = filter_name


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(FlakeError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source
