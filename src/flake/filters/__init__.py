"""Escaping and sanitize filters.

Basic usage:
    from flake.filters import escape, sanitize

    escape("<b>bold</b>")                 # "&lt;b&gt;bold&lt;/b&gt;"
    sanitize("  Hello World  ", "trim|substr:0,5|upper")   # "HELLO"

Custom filters are registered on a registry:
    from flake.filters import create_registry

    registry = create_registry()

    @registry.filter("slug")
    def slug(value: object) -> str:
        return str(value).lower().replace(" ", "-")

    registry.apply("Hello World", "slug")   # "hello-world"
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._builtin import BUILTIN_FILTERS
from ._escape import escape
from ._registry import (
    Filter,
    FilterRegistry,
    FilterStep,
    Pipeline,
    create_registry,
)

if TYPE_CHECKING:
    from collections.abc import Callable

default_registry = create_registry()


def sanitize(
    value: object,
    rules: str | Callable[[object], object] | None = None,
) -> object:
    """Run a value through a sanitize rule using the default registry."""
    return default_registry.apply(value, rules)


__all__ = [
    "BUILTIN_FILTERS",
    "Filter",
    "FilterRegistry",
    "FilterStep",
    "Pipeline",
    "create_registry",
    "default_registry",
    "escape",
    "sanitize",
]
