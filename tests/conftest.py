from __future__ import annotations

import importlib
import sys
import textwrap
from pathlib import Path
from typing import Callable, Dict, Optional

import pytest

USER_MODULE = '''
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Optional

from pydantic import SecretStr

from .base import Timestamps


@dataclass(kw_only=True)
class User(Timestamps):
    """A registered account."""

    table: ClassVar[str] = "users"

    id: int
    username: str = field(metadata={"json": "username"})
    email: Optional[str] = None
    password: SecretStr
    last_login: datetime | None = None

    def display(self) -> str:
        return self.username
'''

BASE_MODULE = '''
from dataclasses import dataclass


@dataclass(kw_only=True)
class Timestamps:
    created_at: str = ""
'''


@pytest.fixture
def write_sources(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """Write a tree of source files under tmp_path and return the root.

    Every directory on the way to a file gets an ``__init__.py`` unless
    the mapping says otherwise, so the files form importable packages.
    """

    def _write(files: Dict[str, str], packages: bool = True) -> Path:
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
            if packages:
                directory = path.parent
                while directory != tmp_path:
                    init = directory / "__init__.py"
                    if not init.exists():
                        init.write_text("", encoding="utf-8")
                    directory = directory.parent
        return tmp_path

    return _write


@pytest.fixture
def user_models(write_sources) -> Path:
    """A ``models`` package with a User dataclass; returns the package dir."""
    root = write_sources(
        {"models/user.py": USER_MODULE, "models/base.py": BASE_MODULE}
    )
    return root / "models"


@pytest.fixture
def import_module(tmp_path: Path, monkeypatch):
    """Import modules from tmp_path as real modules.

    ``code``, when given, is written to ``<name>.py`` first. Everything
    imported from tmp_path is dropped from ``sys.modules`` afterwards so
    package names can be reused between tests.
    """
    monkeypatch.syspath_prepend(str(tmp_path))

    def _import(name: str, code: Optional[str] = None):
        if code is not None:
            path = tmp_path.joinpath(*name.split(".")).with_suffix(".py")
            path.write_text(code, encoding="utf-8")
        importlib.invalidate_caches()
        return importlib.import_module(name)

    yield _import

    root = str(tmp_path)
    for name, module in list(sys.modules.items()):
        if str(getattr(module, "__file__", None) or "").startswith(root):
            del sys.modules[name]
