"""Shared test fixtures for Flake tests."""

from collections.abc import Callable, Mapping
from pathlib import Path

import pytest
from rich.console import Console

from flake import SharedStore, View

Script = Callable[[View, Mapping[str, object]], None]


class ScriptedEvaluator:
    """Evaluator that runs Python callables instead of template files.

    Each view name maps to a script called with the view and its context.
    Scripts print by writing to `view.output`, and may call back into the
    view exactly like a template would.
    """

    def __init__(self, root: Path, extension: str = "j2") -> None:
        self.root: Path = root
        self.extension: str = extension
        self.scripts: dict[str, Script] = {}
        self.calls: list[tuple[str, dict[str, object]]] = []

    def add(self, name: str, script: Script) -> Path:
        location = self.root / f"{name}.{self.extension}"
        location.parent.mkdir(parents=True, exist_ok=True)
        location.touch()
        self.scripts[name] = script
        return location

    def text(self, name: str, text: str) -> Path:
        return self.add(name, lambda view, _: view.output.write(text))

    def evaluate(
        self, location: Path, context: Mapping[str, object], view: View
    ) -> str:
        name = location.relative_to(view.path).with_suffix("").as_posix()
        self.calls.append((name, dict(context)))
        view.output.push()
        self.scripts[name](view, context)
        return view.output.pop()


@pytest.fixture
def store() -> SharedStore:
    return SharedStore()


@pytest.fixture
def views_dir(tmp_path: Path) -> Path:
    path = tmp_path / "views"
    path.mkdir()
    return path


@pytest.fixture
def write_view(views_dir: Path) -> Callable[..., Path]:
    """Return a function that writes a template file under `views_dir`."""

    def _write(name: str, text: str, extension: str = "j2") -> Path:
        location = views_dir / f"{name}.{extension}"
        location.parent.mkdir(parents=True, exist_ok=True)
        _ = location.write_text(text, encoding="utf-8")
        return location

    return _write


@pytest.fixture
def scripted(views_dir: Path) -> ScriptedEvaluator:
    return ScriptedEvaluator(views_dir)


@pytest.fixture
def make_view(
    views_dir: Path, store: SharedStore, scripted: ScriptedEvaluator
) -> Callable[..., View]:
    """Return a factory for views backed by the scripted evaluator."""

    def _make(
        name: str, data: Mapping[str, object] | None = None, **kwargs: object
    ) -> View:
        options: dict[str, object] = {"store": store, "evaluator": scripted}
        options.update(kwargs)
        return View(name, views_dir, data, **options)  # pyright: ignore[reportArgumentType]

    return _make


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )
