r"""Flake template evaluation.

Views delegate running a template to a `TemplateEvaluator`. The shipped
evaluator runs Jinja2 templates and exposes the owning view to them:

    {% layout "layouts/base", {"title": "Home"} %}

    {% section "sidebar" %}<a href="/">Home</a>{% endsection %}

    {{ define("footer") }}(c) {{ year }}{{ end() }}

    <p>{{ escape(message) }}</p>

A layout then reads what its child produced:

    <title>{{ section("title", "Untitled") }}</title>
    <main>{{ content() }}</main>
    {% if has_section("sidebar") %}<aside>{{ section("sidebar") }}</aside>{% endif %}

Any object with a matching `evaluate(location, context, view)` method can
replace the Jinja2 evaluator.
"""

from ._environment import EnvironmentConfig, create_environment
from ._evaluator import (
    JinjaEvaluator,
    TemplateEvaluator,
    ViewHelpers,
    get_default_evaluator,
)
from ._extension import SectionExtension, view_from_context

__all__ = [
    "EnvironmentConfig",
    "JinjaEvaluator",
    "SectionExtension",
    "TemplateEvaluator",
    "ViewHelpers",
    "create_environment",
    "get_default_evaluator",
    "view_from_context",
]
