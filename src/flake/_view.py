"""The view: one renderable template binding.

A view pairs a template name with a base directory, local data, a section
stack and at most one layout. Rendering runs the template through the
evaluator; if the template declared a layout, the rendered text becomes the
layout's "content" section (together with every section the template
defined) and the layout is rendered in turn.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, TypeAlias, TypeVar, overload

from flake._resolver import ViewResolver
from flake._sections import EndMode, OutputBuffer, SectionStack
from flake._store import default_store
from flake.exceptions import ConfigurationError, LayoutCycleError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from structlog.typing import FilteringBoundLogger

    from flake._store import SharedStore
    from flake.filters import FilterRegistry
    from flake.templating import TemplateEvaluator

T = TypeVar("T")

DEFAULT_EXTENSION = "j2"
DEFAULT_MAX_LAYOUT_DEPTH = 32

SanitizeRules: TypeAlias = "str | Callable[[object], object] | None"


class View:
    """A named template bound to a base directory and data.

    Args:
        name: View name relative to `path`, without extension.
        path: Directory that view names are resolved against.
        data: Local data for this view. Overrides shared data.
        extension: Template file extension, without the leading dot.
        store: Shared data store. Defaults to the process-wide store.
        evaluator: Template evaluator. Defaults to the shared Jinja2
            evaluator.
        filters: Filter registry for `sanitize`. Defaults to the built-in
            registry.
        max_layout_depth: Longest allowed chain of nested layouts.
        logger: Structured logger. Defaults to the shared Flake logger.

    Raises:
        ConfigurationError: If `path` is not an existing directory.
    """

    def __init__(
        self,
        name: str,
        path: str | Path,
        data: Mapping[str, object] | None = None,
        *,
        extension: str = DEFAULT_EXTENSION,
        store: SharedStore | None = None,
        evaluator: TemplateEvaluator | None = None,
        filters: FilterRegistry | None = None,
        max_layout_depth: int = DEFAULT_MAX_LAYOUT_DEPTH,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        base = Path(path)
        if not base.is_dir():
            msg = f'The "{path}" directory does not exist.'
            raise ConfigurationError(msg, path=base)

        if evaluator is None:
            from flake.templating import get_default_evaluator  # noqa: PLC0415

            evaluator = get_default_evaluator()
        if filters is None:
            from flake.filters import default_registry  # noqa: PLC0415

            filters = default_registry
        if logger is None:
            from flake.utils import get_logger  # noqa: PLC0415

            logger = get_logger()

        self._name: str = name
        self._path: Path = base
        self._extension: str = extension
        self._data: dict[str, object] = dict(data) if data else {}
        self._store: SharedStore = store if store is not None else default_store
        self._evaluator: TemplateEvaluator = evaluator
        self._filters: FilterRegistry = filters
        self._max_layout_depth: int = max_layout_depth
        self._logger: FilteringBoundLogger = logger
        self._resolver: ViewResolver = ViewResolver(base, extension)
        self._layout: View | None = None
        # Names of the views this one is a layout for, innermost first
        self._lineage: tuple[str, ...] = ()
        self.output: OutputBuffer = OutputBuffer()
        self.sections: SectionStack = SectionStack(self.output)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def path(self) -> Path:
        return self._path

    @property
    def extension(self) -> str:
        return self._extension

    @property
    def data(self) -> dict[str, object]:
        """A copy of the local data."""
        return dict(self._data)

    @property
    def layout(self) -> View | None:
        return self._layout

    @property
    def store(self) -> SharedStore:
        return self._store

    @property
    def filters(self) -> FilterRegistry:
        return self._filters

    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------

    def derive(self, name: str, data: Mapping[str, object] | None = None) -> View:
        """Create a view in the same directory with this view's data.

        The new view shares the base path, extension and collaborators of
        this one. Its local data is this view's data updated with `data`.
        It starts with an empty resolution cache and no sections.
        """
        merged = {**self._data, **data} if data else dict(self._data)
        return View(
            name,
            self._path,
            merged,
            extension=self._extension,
            store=self._store,
            evaluator=self._evaluator,
            filters=self._filters,
            max_layout_depth=self._max_layout_depth,
            logger=self._logger,
        )

    def extend(self, name: str, data: Mapping[str, object] | None = None) -> View:
        """Declare the layout this view renders into.

        Usually called from the template while it is being evaluated. A
        second call replaces the first layout.

        Returns:
            The new layout view.

        Raises:
            LayoutCycleError: If `name` already appears in the chain of views
                that led here, or the chain would exceed the depth limit.
        """
        lineage = (*self._lineage, self._name)
        if name in lineage:
            chain = (*lineage, name)
            msg = f"Layout [{name}] would contain itself: {' -> '.join(chain)}."
            raise LayoutCycleError(msg, chain=chain)
        if len(lineage) > self._max_layout_depth:
            chain = (*lineage, name)
            msg = (
                f"Layout [{name}] exceeds the maximum layout depth of "
                f"{self._max_layout_depth}."
            )
            raise LayoutCycleError(msg, chain=chain)

        layout = self.derive(name, data)
        layout._lineage = lineage
        if self._layout is not None:
            self._logger.debug(
                "layout_replaced",
                view=self._name,
                previous=self._layout.name,
                layout=name,
            )
        self._layout = layout
        self._logger.debug("layout_declared", view=self._name, layout=name)
        return layout

    def nest(
        self, key: str, name: str, data: Mapping[str, object] | None = None
    ) -> View:
        """Store a derived view under `key` so a template can print it inline."""
        return self.set(key, self.derive(name, data))

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    @overload
    def render(self, callback: None = None) -> str: ...

    @overload
    def render(self, callback: Callable[[View, str], T | None]) -> str | T: ...

    def render(self, callback: Callable[[View, str], object] | None = None) -> object:
        """Render the view, and its layouts, to text.

        Args:
            callback: Optional post-processor called with this view and the
                rendered text. A non-None result replaces the text.

        Returns:
            The rendered text, or the callback's result.
        """
        contents = self._render_contents()
        if callback is not None:
            response = callback(self, contents)
            if response is not None:
                return response
        return contents

    def _render_contents(self) -> str:
        location = self.find(self._name)
        return self.fetch(location, self._store.merged(self._data))

    def fetch(
        self, location: str | Path, data: Mapping[str, object] | None = None
    ) -> str:
        """Evaluate an already resolved template file as this view.

        Unlike `render`, neither name resolution nor shared data is applied:
        the template sees exactly `data`. Sections and a declared layout are
        handled as in `render`.

        Args:
            location: Path of the template file to evaluate.
            data: The complete evaluation context.

        Returns:
            The trimmed output, composed with the layout if one was declared.
        """
        path = Path(location)
        context = dict(data) if data else {}

        self._logger.debug("view_render_started", view=self._name, location=str(path))
        contents = self._evaluator.evaluate(path, context, self).strip()
        self.sections.ensure_closed()

        if self._layout is not None:
            layout = self._layout
            layout.sections.adopt(self.sections.committed(), contents)
            self._logger.debug(
                "layout_composed",
                view=self._name,
                layout=layout.name,
                sections=list(self.sections.committed()),
            )
            contents = layout._render_contents()

        self._logger.debug(
            "view_render_finished", view=self._name, length=len(contents)
        )
        return contents

    def __str__(self) -> str:
        return self._render_contents()

    def __html__(self) -> str:
        return self._render_contents()

    def __repr__(self) -> str:
        return f"View(name={self._name!r}, path={str(self._path)!r})"

    # -------------------------------------------------------------------------
    # Data
    # -------------------------------------------------------------------------

    def get(
        self,
        key: str,
        default: object = None,
        filters: SanitizeRules = None,
    ) -> object:
        """Look up data: local first, then shared, then `default`.

        Keys holding None count as missing.

        Args:
            key: The data key.
            default: Returned when neither local nor shared data has the key.
            filters: Optional sanitize rules applied to the result.
        """
        value = self._data.get(key)
        if value is None:
            value = self._store.get(key)
        if value is None:
            value = default
        if filters is not None:
            value = self.sanitize(value, filters)
        return value

    def set(self, key: str | Mapping[str, object], value: object = None) -> View:
        """Add one key, or every key of a mapping, to the local data.

        Returns:
            This view, for chaining.
        """
        if isinstance(key, str):
            self._data[key] = value
        else:
            self._data.update(key)
        return self

    def share(self, key: str | Mapping[str, object], value: object = None) -> object:
        """Share data with every view using this view's store."""
        return self._store.share(key, value)

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def find(self, name: str) -> Path:
        """Return the template file for a view name.

        Raises:
            ViewNotFoundError: If no template file exists for the name.
        """
        return self._resolver.find(name)

    def exists(self, name: str) -> bool:
        return self._resolver.exists(name)

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def define(self, name: str, content: str = "") -> None:
        """Start capturing a section, or set it directly when `content` is given.

        Raises:
            ReservedNameError: If `name` is "content".
        """
        self.sections.begin_or_set(name, content)

    def end(self, mode: EndMode | str = EndMode.APPEND) -> str:
        """Close the most recently opened section.

        Raises:
            SectionStackEmptyError: If no section is open.
        """
        return self.sections.end(mode)

    def append(self) -> str:
        return self.sections.end(EndMode.APPEND)

    def override(self) -> str:
        return self.sections.end(EndMode.OVERRIDE)

    def section(self, name: str, default: str | None = None) -> str | None:
        return self.sections.get(name, default)

    def has_section(self, name: str) -> bool:
        return self.sections.has(name)

    def content(self) -> str:
        """Return the rendered body of the child view this is a layout for."""
        return self.sections.content()

    # -------------------------------------------------------------------------
    # Output helpers
    # -------------------------------------------------------------------------

    def escape(self, value: object, double_encode: bool = True) -> str:  # noqa: FBT001, FBT002
        from flake.filters import escape  # noqa: PLC0415

        return escape(value, double_encode=double_encode)

    def sanitize(self, value: object, rules: SanitizeRules = None) -> object:
        """Run a value through a sanitize rule string or callable.

        Raises:
            FilterNotFoundError: If a rule names an unregistered filter.
        """
        return self._filters.apply(value, rules)
