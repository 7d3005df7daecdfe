"""Tests for dtogen.core.source."""

from __future__ import annotations

from pathlib import Path

import pytest

from dtogen.core.errors import AnalysisError, SourceUnresolvableError
from dtogen.core.source import load_modules, module_name_for, parse_module, resolve_location


def test_module_name_for_nested_package(write_sources) -> None:
    root = write_sources({"app/models/user.py": "x = 1\n"})

    assert module_name_for(root / "app/models/user.py") == ("app.models.user", "app.models")
    assert module_name_for(root / "app/models/__init__.py") == ("app.models", "app.models")


def test_module_name_for_loose_file(write_sources) -> None:
    root = write_sources({"script.py": "x = 1\n"}, packages=False)

    assert module_name_for(root / "script.py") == ("script", "")


def test_resolve_file_and_directory(write_sources) -> None:
    root = write_sources({"pkg/b.py": "", "pkg/a.py": "", "pkg/sub/c.py": ""})

    assert resolve_location(str(root / "pkg/a.py")) == [root / "pkg/a.py"]
    # Directories are not walked recursively and come back sorted
    assert resolve_location(str(root / "pkg")) == [
        root / "pkg/__init__.py",
        root / "pkg/a.py",
        root / "pkg/b.py",
    ]


def test_resolve_recursive_pattern(write_sources) -> None:
    root = write_sources({"pkg/a.py": "", "pkg/sub/c.py": ""})
    (root / "pkg/__pycache__").mkdir()
    (root / "pkg/__pycache__/a.py").write_text("", encoding="utf-8")

    files = resolve_location(str(root / "pkg") + "/...")

    assert root / "pkg/sub/c.py" in files
    assert root / "pkg/a.py" in files
    assert not any("__pycache__" in str(p) for p in files)
    assert files == sorted(files)


def test_resolve_relative_to_cwd(write_sources) -> None:
    root = write_sources({"pkg/a.py": ""})

    assert resolve_location("pkg/a.py", cwd=root) == [root / "pkg/a.py"]


def test_resolve_glob(write_sources) -> None:
    root = write_sources({"pkg/a.py": "", "pkg/notes.txt": "", "pkg/sub/c.py": ""})

    files = resolve_location(str(root / "pkg" / "**" / "*.py"))

    assert root / "pkg/sub/c.py" in files
    assert all(p.suffix == ".py" for p in files)


def test_resolve_dotted_module_without_importing(write_sources, monkeypatch) -> None:
    root = write_sources({"app/models.py": "raise RuntimeError('never imported')\n"})
    monkeypatch.chdir(root)

    resolved = [p.resolve() for p in resolve_location("app.models")]
    assert resolved == [(root / "app/models.py").resolve()]

    package = [p.name for p in resolve_location("app")]
    assert package == ["__init__.py", "models.py"]


def test_resolve_unknown_location(tmp_path: Path) -> None:
    with pytest.raises(SourceUnresolvableError):
        resolve_location(str(tmp_path / "missing"))


def test_resolve_empty_directory(tmp_path: Path) -> None:
    (tmp_path / "empty").mkdir()

    with pytest.raises(SourceUnresolvableError):
        resolve_location(str(tmp_path / "empty"))


def test_resolve_non_python_file(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("hello", encoding="utf-8")

    with pytest.raises(SourceUnresolvableError):
        resolve_location(str(path))


def test_parse_module_syntax_error(write_sources) -> None:
    root = write_sources({"pkg/broken.py": "class User(:\n    pass\n"})

    with pytest.raises(AnalysisError) as excinfo:
        parse_module(root / "pkg/broken.py")

    assert "broken.py:1" in str(excinfo.value)
    assert excinfo.value.location == str(root / "pkg/broken.py")


def test_load_modules_fails_fast(write_sources) -> None:
    root = write_sources({"pkg/a.py": "class A:\n    x: int\n", "pkg/b.py": "def (\n"})

    with pytest.raises(AnalysisError):
        load_modules(str(root / "pkg"))


def test_segment_returns_verbatim_text(write_sources) -> None:
    root = write_sources({"pkg/a.py": "class A:\n    x: dict[str,  int] = field(default='v')\n"})
    module = parse_module(root / "pkg/a.py")
    stmt = module.tree.body[0].body[0]

    assert module.segment(stmt.annotation) == "dict[str,  int]"
    assert module.segment(stmt.value) == "field(default='v')"
