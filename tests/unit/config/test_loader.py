# pyright: reportAny=false, reportUnknownArgumentType=false
from __future__ import annotations

import copy
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from flake.config import (
    ConfigLoadError,
    deep_merge,
    discover_config_files,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem
    from pytest_mock import MockerFixture


class TestReadTomlFile:
    def test_parses_valid_toml(self, fs: FakeFilesystem) -> None:
        content = """
[templates]
extension = "html"
max_layout_depth = 4
"""
        path = Path("/test/config.toml")
        fs.create_file(path, contents=content)

        result = read_toml_file(path)

        assert result == {"templates": {"extension": "html", "max_layout_depth": 4}}

    def test_raises_file_not_found_for_missing_file(self, fs: FakeFilesystem) -> None:
        with pytest.raises(FileNotFoundError):
            _ = read_toml_file(Path("/test/missing.toml"))

    def test_raises_config_load_error_for_invalid_toml(
        self, fs: FakeFilesystem
    ) -> None:
        content = """
[templates
extension = "unclosed bracket"
"""
        path = Path("/test/invalid.toml")
        fs.create_file(path, contents=content)

        with pytest.raises(ConfigLoadError) as exc_info:
            _ = read_toml_file(path)

        error = exc_info.value
        assert error.path == path
        assert error.line is not None
        assert error.column is not None

    @pytest.mark.filterwarnings("ignore::DeprecationWarning")
    def test_reads_position_from_error_message(
        self, fs: FakeFilesystem, mocker: MockerFixture
    ) -> None:
        path = Path("/test/config.toml")
        fs.create_file(path, contents="")
        error = tomllib.TOMLDecodeError("Invalid value (at line 3, column 7)")
        _ = mocker.patch("flake.config._loader.tomllib.load", side_effect=error)

        with pytest.raises(ConfigLoadError) as exc_info:
            _ = read_toml_file(path)

        assert exc_info.value.line == 3
        assert exc_info.value.column == 7

    @pytest.mark.filterwarnings("ignore::DeprecationWarning")
    def test_position_is_optional(
        self, fs: FakeFilesystem, mocker: MockerFixture
    ) -> None:
        path = Path("/test/config.toml")
        fs.create_file(path, contents="")
        error = tomllib.TOMLDecodeError("Invalid value (at end of document)")
        _ = mocker.patch("flake.config._loader.tomllib.load", side_effect=error)

        with pytest.raises(ConfigLoadError) as exc_info:
            _ = read_toml_file(path)

        assert exc_info.value.line is None
        assert exc_info.value.column is None


class TestDeepMerge:
    def test_merges_nested_dicts(self) -> None:
        base = {"templates": {"extension": "j2", "path": "views"}}
        override = {"templates": {"extension": "html"}}

        result = deep_merge(base, override)

        assert result == {"templates": {"extension": "html", "path": "views"}}

    def test_replaces_lists_and_scalars(self) -> None:
        result = deep_merge({"a": [1, 2], "b": 1}, {"a": [3], "b": 2})

        assert result == {"a": [3], "b": 2}

    def test_does_not_modify_inputs(self) -> None:
        base = {"templates": {"extension": "j2"}}
        override = {"templates": {"path": "views"}}
        base_copy = copy.deepcopy(base)
        override_copy = copy.deepcopy(override)

        _ = deep_merge(base, override)

        assert base == base_copy
        assert override == override_copy


class TestSetNestedKey:
    def test_creates_intermediate_dicts(self) -> None:
        data: dict[str, object] = {}

        set_nested_key(data, "templates.extension", "html")

        assert data == {"templates": {"extension": "html"}}

    def test_replaces_non_dict_intermediate(self) -> None:
        data: dict[str, object] = {"templates": "oops"}

        set_nested_key(data, "templates.extension", "html")

        assert data == {"templates": {"extension": "html"}}


class TestParseStringValue:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("true", True),
            ("FALSE", False),
            ("42", 42),
            ("3.5", 3.5),
            ("[1, 2]", [1, 2]),
            ('{"a": 1}', {"a": 1}),
            ("hello", "hello"),
            ("1.2.3", "1.2.3"),
            ("[not json", "[not json"),
        ],
    )
    def test_infers_types(self, raw: str, expected: object) -> None:
        assert parse_string_value(raw) == expected


class TestParseEnvVars:
    def test_maps_double_underscore_to_nesting(self) -> None:
        environ = {
            "FLAKE_TEMPLATES__EXTENSION": "html",
            "FLAKE_TEMPLATES__MAX_LAYOUT_DEPTH": "8",
            "FLAKE_JINJA__AUTOESCAPE": "true",
        }

        result = parse_env_vars(environ=environ)

        assert result == {
            "templates": {"extension": "html", "max_layout_depth": 8},
            "jinja": {"autoescape": True},
        }

    def test_ignores_other_prefixes_and_logger_switches(self) -> None:
        environ = {
            "HOME": "/root",
            "FLAKE_DEBUG": "1",
            "FLAKE_LOG_LEVEL": "debug",
        }

        assert parse_env_vars(environ=environ) == {}


class TestDiscoverConfigFiles:
    def test_finds_project_file(
        self, fs: FakeFilesystem, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "flake.config._loader.get_user_config_path",
            lambda: Path("/home/user/.config/flake/config.toml"),
        )
        fs.create_file("/project/flake.toml", contents="")

        assert discover_config_files(Path("/project")) == [Path("/project/flake.toml")]

    def test_user_file_comes_first(
        self, fs: FakeFilesystem, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        user_file = Path("/home/user/.config/flake/config.toml")
        monkeypatch.setattr(
            "flake.config._loader.get_user_config_path", lambda: user_file
        )
        fs.create_file(user_file, contents="")
        fs.create_file("/project/flake.toml", contents="")

        assert discover_config_files(Path("/project")) == [
            user_file,
            Path("/project/flake.toml"),
        ]

    def test_no_files(
        self, fs: FakeFilesystem, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "flake.config._loader.get_user_config_path",
            lambda: Path("/home/user/.config/flake/config.toml"),
        )
        fs.create_dir("/project")

        assert discover_config_files(Path("/project")) == []
