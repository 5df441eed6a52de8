"""Named filter registry and sanitize pipelines.

A sanitize rule string chains filters with `|`. Each step is a filter name,
optionally followed by `:` and comma-separated arguments parsed as CSV:

    "trim|substr:0, 10|upper"

The value is threaded through the chain as each filter's first argument.
Filter names are resolved when the rule string is parsed, so an unknown name
fails before any filter runs.
"""

from __future__ import annotations

import csv
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeAlias

from flake.exceptions import FilterNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


Filter: TypeAlias = Callable[..., object]
"""A sanitize filter: called with the value first, then the rule's string arguments."""


@dataclass(frozen=True, slots=True)
class FilterStep:
    """One resolved step of a sanitize pipeline.

    Attributes:
        name: The filter name as written in the rule.
        func: The registered filter.
        args: Arguments parsed from the rule, passed after the value.
    """

    name: str
    func: Filter
    args: tuple[str, ...] = ()

    def __call__(self, value: object) -> object:
        return self.func(value, *self.args)


@dataclass(frozen=True, slots=True)
class Pipeline:
    """A parsed sanitize rule, ready to apply to any number of values."""

    steps: tuple[FilterStep, ...]

    def __call__(self, value: object) -> object:
        for step in self.steps:
            value = step(value)
        return value

    def __iter__(self) -> Iterator[FilterStep]:
        return iter(self.steps)


def _parse_arguments(raw: str) -> tuple[str, ...]:
    """Split a rule's argument list the way a CSV line is split."""
    if not raw:
        return ()
    return tuple(next(csv.reader([raw], skipinitialspace=True)))


@dataclass(slots=True)
class FilterRegistry:
    """Registry of sanitize filters by name."""

    _filters: dict[str, Filter] = field(default_factory=dict)

    def register(self, name: str, func: Filter) -> Filter:
        """Register `func` under `name`, replacing any previous filter."""
        self._filters[name] = func
        return func

    def filter(self, name: str) -> Callable[[Filter], Filter]:
        """Decorator form of `register`."""

        def decorator(func: Filter) -> Filter:
            return self.register(name, func)

        return decorator

    def get(self, name: str) -> Filter:
        """Look up a filter by name.

        Raises:
            FilterNotFoundError: If no filter is registered under the name.
        """
        try:
            return self._filters[name]
        except KeyError:
            msg = f"Filter [{name}] not found."
            raise FilterNotFoundError(msg, filter_name=name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._filters

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._filters))

    def copy(self) -> FilterRegistry:
        return FilterRegistry(dict(self._filters))

    def parse(self, rules: str) -> Pipeline:
        """Parse a rule string into a pipeline.

        Empty steps (for example from a trailing `|`) are ignored.

        Raises:
            FilterNotFoundError: If any step names an unregistered filter.
        """
        steps: list[FilterStep] = []
        for raw_step in rules.split("|"):
            rule = raw_step.strip()
            if not rule:
                continue
            name, _, raw_args = rule.partition(":")
            name = name.strip()
            steps.append(FilterStep(name, self.get(name), _parse_arguments(raw_args)))
        return Pipeline(tuple(steps))

    def apply(
        self,
        value: object,
        rules: str | Callable[[object], object] | None = None,
    ) -> object:
        """Run a value through a sanitize rule.

        Args:
            value: The value to sanitize.
            rules: A rule string, a single callable applied to the value, or
                None to return the value unchanged.

        Returns:
            The sanitized value.
        """
        if rules is None:
            return value
        if isinstance(rules, str):
            return self.parse(rules)(value)
        return rules(value)


def create_registry(filters: Mapping[str, Filter] | None = None) -> FilterRegistry:
    """Create a registry holding the built-in filters plus `filters`."""
    from ._builtin import BUILTIN_FILTERS  # noqa: PLC0415

    registry = FilterRegistry(dict(BUILTIN_FILTERS))
    if filters:
        for name, func in filters.items():
            _ = registry.register(name, func)
    return registry
