"""
Source location resolution and parsing.

Turns a user-supplied location (file, directory, ``dir/...``, glob or
dotted module name) into parsed modules. Nothing is imported or executed;
modules are read from disk and parsed with ``ast``.
"""

import ast
import glob
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from ..logging_config import get_logger
from .errors import AnalysisError, SourceUnresolvableError

logger = get_logger(__name__)

RECURSIVE_SUFFIX = "/..."
_DOTTED_NAME = re.compile(r"^[A-Za-z_]\w*(\.[A-Za-z_]\w*)*$")
_GLOB_CHARS = set("*?[")
_SKIP_DIRS = {"__pycache__", "node_modules"}


@dataclass(frozen=True)
class SourceModule:
    """A parsed Python module and where it lives."""

    path: Path
    module_name: str
    package_name: str
    source: str
    tree: ast.Module

    def segment(self, node: ast.AST) -> str:
        """Verbatim source text of node, falling back to unparsing."""
        text = ast.get_source_segment(self.source, node)
        if text is None:
            text = ast.unparse(node)
        return text


def module_name_for(path: Path) -> Tuple[str, str]:
    """
    Work out the dotted module and package names for a file.

    Walks up through directories that contain ``__init__.py``. A file
    outside any package is a top-level module with an empty package.

    Returns:
        Tuple of (module name, package name)
    """
    path = Path(path).absolute()
    parts: List[str] = []
    directory = path.parent
    while (directory / "__init__.py").is_file():
        parts.insert(0, directory.name)
        if directory.parent == directory:
            break
        directory = directory.parent

    package = ".".join(parts)
    if path.stem == "__init__":
        return package, package
    module = f"{package}.{path.stem}" if package else path.stem
    return module, package


def resolve_location(location: str, cwd: Optional[Path] = None) -> List[Path]:
    """
    Resolve a source location to a sorted list of Python files.

    Raises:
        SourceUnresolvableError: If the location matches nothing
    """
    cwd = Path(cwd) if cwd else Path.cwd()
    location = location.strip() or "."
    files: List[Path] = []

    if location.endswith(RECURSIVE_SUFFIX):
        base = _absolute(location[: -len(RECURSIVE_SUFFIX)] or ".", cwd)
        if not base.is_dir():
            raise SourceUnresolvableError(
                f"Not a directory: {base}", location=location
            )
        files = [
            p
            for p in sorted(base.rglob("*.py"))
            if not any(
                part in _SKIP_DIRS or part.startswith(".")
                for part in p.relative_to(base).parts[:-1]
            )
        ]
    elif _absolute(location, cwd).is_file():
        path = _absolute(location, cwd)
        if path.suffix != ".py":
            raise SourceUnresolvableError(
                f"Not a Python source file: {path}", location=location
            )
        files = [path]
    elif _absolute(location, cwd).is_dir():
        files = sorted(_absolute(location, cwd).glob("*.py"))
    elif _GLOB_CHARS & set(location):
        pattern = str(_absolute(location, cwd))
        files = sorted(
            Path(p) for p in glob.glob(pattern, recursive=True) if p.endswith(".py")
        )
    elif _DOTTED_NAME.match(location):
        files = _resolve_dotted(location, cwd)

    if not files:
        raise SourceUnresolvableError(
            f"No Python sources found for {location!r}", location=location
        )

    logger.debug("Resolved %s to %d file(s)", location, len(files))
    return files


def _absolute(location: str, cwd: Path) -> Path:
    path = Path(location).expanduser()
    return path if path.is_absolute() else cwd / path


def _resolve_dotted(name: str, cwd: Path) -> List[Path]:
    """Find a module or package by dotted name without importing it."""
    parts = name.split(".")
    roots = [cwd] + [Path(p) for p in sys.path if p]
    for root in roots:
        candidate = root.joinpath(*parts)
        module_file = candidate.with_suffix(".py")
        if module_file.is_file():
            return [module_file]
        if candidate.is_dir():
            return sorted(candidate.glob("*.py"))
    return []


def parse_module(path: Path) -> SourceModule:
    """
    Read and parse one file.

    Raises:
        AnalysisError: If the file cannot be read, decoded or parsed
    """
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise AnalysisError(f"Cannot read {path}: {e}", location=str(path)) from e

    try:
        tree = ast.parse(source, filename=str(path))
    except SyntaxError as e:
        raise AnalysisError(
            f"{path}:{e.lineno}: {e.msg}", location=str(path)
        ) from e
    except ValueError as e:
        raise AnalysisError(f"{path}: {e}", location=str(path)) from e

    module_name, package_name = module_name_for(path)
    return SourceModule(
        path=path,
        module_name=module_name,
        package_name=package_name,
        source=source,
        tree=tree,
    )


def load_modules(location: str, cwd: Optional[Path] = None) -> List[SourceModule]:
    """Resolve a location and parse every file in it, failing on the first error."""
    return [parse_module(path) for path in resolve_location(location, cwd)]
