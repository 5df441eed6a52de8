"""Template evaluation.

A view hands its resolved template location and merged data to a
`TemplateEvaluator`, which runs the template and returns what it printed.
While it runs, the template may call back into the view to define sections
and declare a layout.
"""

from __future__ import annotations

import os
from functools import cache
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from markupsafe import Markup

from flake.exceptions import SectionError

from ._environment import EnvironmentConfig, create_environment

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from jinja2 import Environment, Template

    from flake._view import View


@runtime_checkable
class TemplateEvaluator(Protocol):
    """Runs a template file and returns its output."""

    def evaluate(
        self, location: Path, context: Mapping[str, object], view: View
    ) -> str:
        """Run the template at `location` with `context`.

        Args:
            location: Resolved path of an existing template file.
            context: Read-only merged data for the template.
            view: The view being rendered. The template may call its section
                and layout operations.

        Returns:
            The raw text the template produced.
        """
        ...


class ViewHelpers:
    """Callables exposed to templates, bound to one view.

    Statement-like helpers (`extend`, `define`, `end`, ...) return an empty
    string so calling them from `{{ ... }}` prints nothing. Rendered section
    text is returned as `Markup` so autoescaping leaves it alone.
    """

    __slots__: tuple[str, ...] = ("view",)

    def __init__(self, view: View) -> None:
        self.view: View = view

    def extend(self, name: str, data: Mapping[str, object] | None = None) -> str:
        _ = self.view.extend(name, data)
        return ""

    def _require_streamed(self, helper: str) -> None:
        if self.view.sections.in_buffered_body:
            msg = (
                f"{helper}() cannot capture output inside a {{% section %}} body. "
                "Use a nested {% section %} tag instead."
            )
            raise SectionError(msg)

    def define(self, name: str, content: str = "") -> str:
        if not content:
            self._require_streamed("define")
        self.view.define(name, content)
        return ""

    def end(self, mode: str = "append") -> str:
        self._require_streamed("end")
        _ = self.view.end(mode)
        return ""

    def append(self) -> str:
        self._require_streamed("append")
        _ = self.view.append()
        return ""

    def override(self) -> str:
        self._require_streamed("override")
        _ = self.view.override()
        return ""

    def section(self, name: str, default: str = "") -> str:
        text = self.view.section(name)
        return default if text is None else Markup(text)  # noqa: S704

    def has_section(self, name: str) -> bool:
        return self.view.has_section(name)

    def content(self) -> Markup:
        return Markup(self.view.content())  # noqa: S704

    def escape(self, value: object, double_encode: bool = True) -> Markup:  # noqa: FBT001, FBT002
        return Markup(self.view.escape(value, double_encode))  # noqa: S704

    def sanitize(
        self,
        value: object,
        rules: str | Callable[[object], object] | None = None,
    ) -> object:
        return self.view.sanitize(value, rules)

    def get(
        self,
        key: str,
        default: object = "",
        filters: str | Callable[[object], object] | None = None,
    ) -> object:
        return self.view.get(key, default, filters)

    def as_context(self) -> dict[str, object]:
        return {
            "view": self.view,
            "extend": self.extend,
            "define": self.define,
            "end": self.end,
            "append": self.append,
            "override": self.override,
            "section": self.section,
            "has_section": self.has_section,
            "content": self.content,
            "escape": self.escape,
            "sanitize": self.sanitize,
            "get": self.get,
        }


class JinjaEvaluator:
    """Evaluates Jinja2 templates for views.

    One environment is kept per view base directory. Template output is
    streamed chunk by chunk into the view's output buffer, so function-style
    captures (`{{ define("x") }} ... {{ end() }}`) collect exactly the text
    produced between the two calls.

    Attributes:
        config: Settings applied to every environment this evaluator creates.
    """

    def __init__(self, config: EnvironmentConfig | None = None) -> None:
        self.config: EnvironmentConfig = (
            config if config is not None else EnvironmentConfig()
        )
        self._environments: dict[Path, Environment] = {}

    def environment_for(self, path: Path) -> Environment:
        environment = self._environments.get(path)
        if environment is None:
            environment = create_environment((path,), config=self.config)
            self._environments[path] = environment
        return environment

    def load_template(self, base: Path, location: Path) -> Template:
        """Load the template at `location` for a view rooted at `base`.

        Files under `base` go through the environment loader so they are
        cached. Anything else, such as a view name containing "..", is
        compiled from its source; includes still resolve against `base`.
        """
        environment = self.environment_for(base)
        relative = PurePosixPath(Path(os.path.relpath(location, base)).as_posix())
        if ".." in relative.parts:
            return environment.from_string(location.read_text(encoding="utf-8"))
        return environment.get_template(relative.as_posix())

    def evaluate(
        self, location: Path, context: Mapping[str, object], view: View
    ) -> str:
        template = self.load_template(view.path, location)
        variables = {**context, **ViewHelpers(view).as_context()}

        output = view.output
        depth = output.depth
        output.push()
        try:
            for chunk in template.generate(variables):
                output.write(chunk)
            view.sections.ensure_closed()
        except Exception:
            view.sections.abandon_open()
            output.unwind(depth)
            raise
        return output.pop()


@cache
def get_default_evaluator() -> JinjaEvaluator:
    """Return the evaluator used by views created without one."""
    return JinjaEvaluator()
