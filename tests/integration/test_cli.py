"""Integration tests for the flake CLI."""

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from rich.console import Console

from flake.cli import ExitCode, create_app

WriteView = Callable[..., Path]


@pytest.fixture
def cli_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path]:
    """Isolate the CLI from real config files and FLAKE_* variables."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setattr(
        "flake.config._loader.get_user_config_path",
        lambda: tmp_path / "user" / "config.toml",
    )
    for key in [key for key in os.environ if key.startswith("FLAKE_")]:
        monkeypatch.delenv(key)
    yield workdir


@pytest.fixture
def flake_cli(console: Console, cli_env: Path) -> Callable[..., int]:
    """Run the CLI and return its exit code (0 if no SystemExit)."""
    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> int:
        try:
            app(args)
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run


class TestRender:
    def test_prints_rendered_view(
        self,
        flake_cli: Callable[..., int],
        write_view: WriteView,
        views_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _ = write_view("base", "<main>{{ content() }}</main>")
        _ = write_view("home", '{% layout "base" %}Hello {{ name }}, {{ site }}')

        exit_code = flake_cli(
            "render",
            "home",
            "--path",
            str(views_dir),
            "--set",
            "name=Ada",
            "--share",
            "site=Example",
        )

        assert exit_code == ExitCode.SUCCESS
        assert capsys.readouterr().out == "<main>Hello Ada, Example</main>\n"

    def test_set_values_are_typed(
        self,
        flake_cli: Callable[..., int],
        write_view: WriteView,
        views_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _ = write_view("home", "{{ count + 1 }}")

        exit_code = flake_cli(
            "render", "home", "--path", str(views_dir), "--set", "count=41"
        )

        assert exit_code == ExitCode.SUCCESS
        assert capsys.readouterr().out == "42\n"

    def test_repeated_set_options(
        self,
        flake_cli: Callable[..., int],
        write_view: WriteView,
        views_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _ = write_view("home", "{{ a }}{{ b }}")

        exit_code = flake_cli(
            "render", "home", "--path", str(views_dir), "--set", "a=x", "--set", "b=y"
        )

        assert exit_code == ExitCode.SUCCESS
        assert capsys.readouterr().out == "xy\n"

    def test_writes_output_file(
        self,
        flake_cli: Callable[..., int],
        write_view: WriteView,
        views_dir: Path,
        tmp_path: Path,
    ) -> None:
        _ = write_view("home", "Hello")
        target = tmp_path / "out.html"

        exit_code = flake_cli(
            "render", "home", "--path", str(views_dir), "--output", str(target)
        )

        assert exit_code == ExitCode.SUCCESS
        assert target.read_text() == "Hello\n"

    def test_extension_option(
        self,
        flake_cli: Callable[..., int],
        write_view: WriteView,
        views_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _ = write_view("home", "From html", extension="html")

        exit_code = flake_cli(
            "render", "home", "--path", str(views_dir), "--extension", "html"
        )

        assert exit_code == ExitCode.SUCCESS
        assert capsys.readouterr().out == "From html\n"

    def test_path_from_project_config(
        self,
        flake_cli: Callable[..., int],
        write_view: WriteView,
        views_dir: Path,
        cli_env: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _ = write_view("home", "configured")
        config = cli_env / "flake.toml"
        _ = config.write_text(f'[templates]\npath = "{views_dir}"\n')

        exit_code = flake_cli("render", "home")

        assert exit_code == ExitCode.SUCCESS
        assert capsys.readouterr().out == "configured\n"

    def test_missing_view(
        self,
        flake_cli: Callable[..., int],
        views_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        exit_code = flake_cli("render", "missing", "--path", str(views_dir))

        assert exit_code == ExitCode.NOT_FOUND
        assert "View [missing] not found." in capsys.readouterr().out

    def test_missing_directory(
        self, flake_cli: Callable[..., int], tmp_path: Path
    ) -> None:
        exit_code = flake_cli("render", "home", "--path", str(tmp_path / "nope"))

        assert exit_code == ExitCode.NOT_FOUND

    def test_no_directory_configured(
        self,
        flake_cli: Callable[..., int],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        exit_code = flake_cli("render", "home")

        assert exit_code == ExitCode.NOT_FOUND
        assert "No template directory" in capsys.readouterr().out

    def test_malformed_assignment(
        self,
        flake_cli: Callable[..., int],
        views_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        exit_code = flake_cli(
            "render", "home", "--path", str(views_dir), "--set", "novalue"
        )

        assert exit_code == ExitCode.VALIDATION_ERROR
        assert "KEY=VALUE" in capsys.readouterr().out

    def test_render_error(
        self,
        flake_cli: Callable[..., int],
        write_view: WriteView,
        views_dir: Path,
    ) -> None:
        _ = write_view("a", '{% layout "b" %}')
        _ = write_view("b", '{% layout "a" %}')

        exit_code = flake_cli("render", "a", "--path", str(views_dir))

        assert exit_code == ExitCode.RENDER_ERROR

    def test_invalid_config_file(
        self,
        flake_cli: Callable[..., int],
        views_dir: Path,
        tmp_path: Path,
    ) -> None:
        config = tmp_path / "bad.toml"
        _ = config.write_text("[templates\n")

        exit_code = flake_cli(
            "render", "home", "--path", str(views_dir), "--config", str(config)
        )

        assert exit_code == ExitCode.LOAD_ERROR

    def test_invalid_config_value(
        self,
        flake_cli: Callable[..., int],
        views_dir: Path,
        tmp_path: Path,
    ) -> None:
        config = tmp_path / "bad.toml"
        _ = config.write_text("[templates]\nmax_layout_depth = 0\n")

        exit_code = flake_cli(
            "render", "home", "--path", str(views_dir), "--config", str(config)
        )

        assert exit_code == ExitCode.VALIDATION_ERROR

    def test_missing_config_file(
        self,
        flake_cli: Callable[..., int],
        views_dir: Path,
        tmp_path: Path,
    ) -> None:
        exit_code = flake_cli(
            "render",
            "home",
            "--path",
            str(views_dir),
            "--config",
            str(tmp_path / "absent.toml"),
        )

        assert exit_code == ExitCode.LOAD_ERROR


class TestFind:
    def test_prints_location(
        self,
        flake_cli: Callable[..., int],
        write_view: WriteView,
        views_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        location = write_view("pages/home", "")

        exit_code = flake_cli("find", "pages/home", "--path", str(views_dir))

        assert exit_code == ExitCode.SUCCESS
        assert capsys.readouterr().out.strip() == str(location)

    def test_missing_view(
        self,
        flake_cli: Callable[..., int],
        views_dir: Path,
    ) -> None:
        exit_code = flake_cli("find", "missing", "--path", str(views_dir))

        assert exit_code == ExitCode.NOT_FOUND
