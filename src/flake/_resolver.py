"""View name to template file resolution."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from flake.exceptions import ViewNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable


class ViewResolver:
    """Maps view names to template files under one base directory.

    Lookups are memoized per resolver, so the filesystem is checked at most
    once for each name.

    Attributes:
        path: Base directory that view names are resolved against.
        extension: File extension appended to every view name.
    """

    __slots__: tuple[str, ...] = ("_cache", "_file_exists", "extension", "path")

    def __init__(
        self,
        path: Path,
        extension: str,
        *,
        file_exists: Callable[[Path], bool] = Path.is_file,
    ) -> None:
        self.path: Path = path
        self.extension: str = extension
        self._file_exists: Callable[[Path], bool] = file_exists
        self._cache: dict[str, Path] = {}

    def find(self, name: str) -> Path:
        """Return the template file for a view name.

        Args:
            name: View name relative to the base directory, without extension.
                May contain "/" to address subdirectories.

        Returns:
            The location of the template file.

        Raises:
            ViewNotFoundError: If no template file exists for the name.
        """
        cached = self._cache.get(name)
        if cached is not None:
            return cached

        location = self.path / f"{name}.{self.extension}"
        if not self._file_exists(location):
            msg = f"View [{name}] not found."
            raise ViewNotFoundError(msg, name=name, location=location)

        self._cache[name] = location
        return location

    def exists(self, name: str) -> bool:
        """Check whether a view name resolves to a template file.

        Only a missing view is reported as False; any other error raised
        while probing the filesystem propagates.
        """
        try:
            _ = self.find(name)
        except ViewNotFoundError:
            return False
        return True

    def cached(self) -> dict[str, Path]:
        return dict(self._cache)
