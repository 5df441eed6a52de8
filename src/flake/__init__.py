"""Flake: layered template composition.

A view renders a named template file. The template may declare a layout
and fill named sections; the layout then renders around the child's output:

    from flake import Flake

    engine = Flake("views")
    engine.share("site", "Example")
    html = engine.render("pages/home", {"title": "Home"})

Views can also be created directly:

    from flake import View

    view = View("pages/home", "views", {"title": "Home"})
    html = view.render()
"""

from flake._engine import Flake
from flake._sections import CONTENT_SECTION, EndMode, OutputBuffer, SectionStack
from flake._store import SharedStore, default_store, share
from flake._view import View
from flake.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigurationError,
    ConfigValidationError,
    FilterNotFoundError,
    FlakeError,
    LayoutCycleError,
    ReservedNameError,
    SectionError,
    SectionStackEmptyError,
    UnclosedSectionError,
    ViewNotFoundError,
)
from flake.filters import escape, sanitize

__all__ = [
    "CONTENT_SECTION",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "ConfigurationError",
    "EndMode",
    "FilterNotFoundError",
    "Flake",
    "FlakeError",
    "LayoutCycleError",
    "OutputBuffer",
    "ReservedNameError",
    "SectionError",
    "SectionStack",
    "SectionStackEmptyError",
    "SharedStore",
    "UnclosedSectionError",
    "View",
    "ViewNotFoundError",
    "default_store",
    "escape",
    "sanitize",
    "share",
]
