"""Jinja2 tags for sections and layouts.

    {% layout "layouts/base", {"title": "Home"} %}

    {% section "sidebar" %}
      <a href="/">Home</a>
    {% endsection %}

    {% section "title", "override" %}Replaced title{% endsection %}

Both tags call back into the `View` that the evaluator places in the
template context as `view`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from jinja2 import nodes
from jinja2.exceptions import TemplateRuntimeError
from jinja2.ext import Extension

from flake._sections import EndMode

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from jinja2.parser import Parser
    from jinja2.runtime import Context

    from flake._view import View


def view_from_context(context: Context) -> View:
    """Return the view a template is being evaluated for.

    Raises:
        TemplateRuntimeError: If the template is not rendered through a view.
    """
    from flake._view import View  # noqa: PLC0415

    view = context.get("view")
    if not isinstance(view, View):
        msg = (
            "Section and layout tags can only be used in templates rendered "
            "by a Flake view."
        )
        raise TemplateRuntimeError(msg)
    return view


class SectionExtension(Extension):
    """Adds the `section` and `layout` tags."""

    tags: ClassVar[set[str]] = {"section", "layout"}  # pyright: ignore[reportIncompatibleVariableOverride]

    def parse(self, parser: Parser) -> nodes.Node:
        token = next(parser.stream)
        if token.value == "layout":
            return self._parse_layout(parser, token.lineno)
        return self._parse_section(parser, token.lineno)

    def _parse_section(self, parser: Parser, lineno: int) -> nodes.Node:
        name = parser.parse_expression()
        mode: nodes.Expr = nodes.Const(EndMode.APPEND.value)
        if parser.stream.skip_if("comma"):
            mode = parser.parse_expression()

        body = parser.parse_statements(("name:endsection",), drop_needle=True)
        call = self.call_method(
            "_capture_section", [nodes.ContextReference(), name, mode]
        )
        return nodes.CallBlock(call, [], [], body).set_lineno(lineno)

    def _parse_layout(self, parser: Parser, lineno: int) -> nodes.Node:
        args: list[nodes.Expr] = [nodes.ContextReference(), parser.parse_expression()]
        if parser.stream.skip_if("comma"):
            args.append(parser.parse_expression())

        call = self.call_method("_declare_layout", args, lineno=lineno)
        return nodes.ExprStmt(call, lineno=lineno)

    def _capture_section(
        self,
        context: Context,
        name: str,
        mode: str,
        caller: Callable[[], str],
    ) -> str:
        view = view_from_context(context)
        view.define(name)
        with view.sections.buffered_body():
            body = caller()
        view.output.write(body)
        _ = view.end(mode)
        return ""

    def _declare_layout(
        self,
        context: Context,
        name: str,
        data: Mapping[str, object] | None = None,
    ) -> None:
        _ = view_from_context(context).extend(name, data)
