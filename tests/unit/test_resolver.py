from pathlib import Path

import pytest

from flake import ViewNotFoundError
from flake._resolver import ViewResolver


class CountingFileCheck:
    def __init__(self, existing: set[Path]) -> None:
        self.existing: set[Path] = existing
        self.calls: list[Path] = []

    def __call__(self, location: Path) -> bool:
        self.calls.append(location)
        return location in self.existing


class TestViewResolverFind:
    def test_returns_location_with_extension(self) -> None:
        base = Path("/views")
        file_check = CountingFileCheck({base / "home.j2"})
        resolver = ViewResolver(base, "j2", file_exists=file_check)

        assert resolver.find("home") == base / "home.j2"

    def test_supports_subdirectories(self) -> None:
        base = Path("/views")
        file_check = CountingFileCheck({base / "layouts" / "base.html"})
        resolver = ViewResolver(base, "html", file_exists=file_check)

        assert resolver.find("layouts/base") == base / "layouts" / "base.html"

    def test_is_memoized(self) -> None:
        base = Path("/views")
        file_check = CountingFileCheck({base / "home.j2"})
        resolver = ViewResolver(base, "j2", file_exists=file_check)

        first = resolver.find("home")
        second = resolver.find("home")

        assert first is second
        assert file_check.calls == [base / "home.j2"]

    def test_missing_view_raises(self) -> None:
        base = Path("/views")
        resolver = ViewResolver(base, "j2", file_exists=CountingFileCheck(set()))

        with pytest.raises(ViewNotFoundError, match=r"View \[nope\] not found") as exc:
            _ = resolver.find("nope")

        assert exc.value.name == "nope"
        assert exc.value.location == base / "nope.j2"

    def test_misses_are_not_cached(self) -> None:
        base = Path("/views")
        file_check = CountingFileCheck(set())
        resolver = ViewResolver(base, "j2", file_exists=file_check)

        for _ in range(2):
            with pytest.raises(ViewNotFoundError):
                _ = resolver.find("nope")

        assert len(file_check.calls) == 2
        assert resolver.cached() == {}

    def test_uses_real_filesystem_by_default(self, tmp_path: Path) -> None:
        _ = (tmp_path / "home.j2").write_text("hi")
        resolver = ViewResolver(tmp_path, "j2")

        assert resolver.find("home") == tmp_path / "home.j2"

    def test_directory_with_template_name_is_not_a_view(self, tmp_path: Path) -> None:
        (tmp_path / "home.j2").mkdir()
        resolver = ViewResolver(tmp_path, "j2")

        with pytest.raises(ViewNotFoundError):
            _ = resolver.find("home")


class TestViewResolverExists:
    def test_present_view(self) -> None:
        base = Path("/views")
        resolver = ViewResolver(
            base, "j2", file_exists=CountingFileCheck({base / "present.j2"})
        )

        assert resolver.exists("present") is True

    def test_missing_view(self) -> None:
        resolver = ViewResolver(
            Path("/views"), "j2", file_exists=CountingFileCheck(set())
        )

        assert resolver.exists("missing") is False

    def test_other_errors_propagate(self) -> None:
        def broken(location: Path) -> bool:
            msg = f"Permission denied: {location}"
            raise PermissionError(msg)

        resolver = ViewResolver(Path("/views"), "j2", file_exists=broken)

        with pytest.raises(PermissionError):
            _ = resolver.exists("home")

    def test_populates_cache(self) -> None:
        base = Path("/views")
        file_check = CountingFileCheck({base / "home.j2"})
        resolver = ViewResolver(base, "j2", file_exists=file_check)

        assert resolver.exists("home")
        _ = resolver.find("home")

        assert len(file_check.calls) == 1
        assert resolver.cached() == {"home": base / "home.j2"}
