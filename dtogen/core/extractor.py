"""
Extractor: locate a class in a source tree and reduce it to a StructInfo.

Only top-level declarations are considered. Within a module the last
binding of a name wins, as it does at runtime; the same name declared in
two different modules is reported as ambiguous rather than picked by
file order.
"""

import ast
from typing import Dict, List, Optional, Tuple

from ..logging_config import get_logger
from .errors import AmbiguousTypeError, NotAStructError, TypeNotFoundError
from .schema import FieldInfo, ImportRef, StructInfo
from .source import SourceModule, load_modules
from .type_refs import ModuleScope, discover_imports, dotted_name, is_type_alias

logger = get_logger(__name__)

# Bases that mark a class as a record without contributing members
RECORD_ROOTS = frozenset(
    {
        "object",
        "Generic",
        "Protocol",
        "ABC",
        "BaseModel",
        "TypedDict",
        "NamedTuple",
        "Struct",
        "SQLModel",
    }
)

# Bases that make a class something other than a field record
NON_RECORD_BASES = frozenset(
    {
        "Enum",
        "IntEnum",
        "StrEnum",
        "Flag",
        "IntFlag",
        "Exception",
        "BaseException",
    }
)


class Extractor:
    """Resolves a source location and type name into a StructInfo."""

    def extract(self, source_location: str, type_name: str) -> StructInfo:
        """
        Find ``type_name`` under ``source_location`` and describe its fields.

        Raises:
            SourceUnresolvableError: Location matched no Python files
            AnalysisError: A file could not be read or parsed
            TypeNotFoundError: No module declares the name
            AmbiguousTypeError: More than one module declares the name
            NotAStructError: The name is not bound to a record class
        """
        modules = load_modules(source_location)

        candidates: List[Tuple[SourceModule, ast.stmt]] = []
        for module in modules:
            node = find_declaration(module.tree, type_name)
            if node is not None:
                candidates.append((module, node))

        if not candidates:
            raise TypeNotFoundError(
                f"Type {type_name} not found in {source_location}",
                type_name=type_name,
                location=source_location,
            )

        if len(candidates) > 1:
            places = ", ".join(f"{m.path}:{n.lineno}" for m, n in candidates)
            raise AmbiguousTypeError(
                f"Type {type_name} is declared in more than one module: {places}",
                type_name=type_name,
                location=source_location,
            )

        module, node = candidates[0]
        where = f"{module.path}:{node.lineno}"
        if not isinstance(node, ast.ClassDef) or not is_record_class(node):
            raise NotAStructError(
                f"{type_name} at {where} is not a record class",
                type_name=type_name,
                location=where,
            )

        info = self._build(module, node)
        logger.debug(
            "Extracted %s from %s: %d field(s), %d import(s)",
            type_name,
            module.path,
            len(info.fields),
            len(info.imports),
        )
        return info

    def _build(self, module: SourceModule, node: ast.ClassDef) -> StructInfo:
        scope = ModuleScope.from_module(
            module.tree, module.package_name, module.module_name
        )
        fields: Dict[str, FieldInfo] = {}

        for base in node.bases:
            root = base_root_name(base)
            if root is None or root in RECORD_ROOTS:
                continue
            fields[root] = FieldInfo(
                name=root,
                type=module.segment(base),
                tag="",
                embedded=True,
                imports=_sorted_refs(discover_imports(base, scope)),
            )

        for stmt in node.body:
            if not isinstance(stmt, ast.AnnAssign):
                continue
            if not isinstance(stmt.target, ast.Name):
                continue
            if is_classvar(stmt.annotation):
                continue

            refs = set(discover_imports(stmt.annotation, scope))
            refs |= discover_imports(stmt.value, scope, forward_refs=False)
            name = stmt.target.id
            # A redeclared name keeps its first position, like dataclass fields
            fields[name] = FieldInfo(
                name=name,
                type=module.segment(stmt.annotation),
                tag=module.segment(stmt.value) if stmt.value is not None else "",
                imports=_sorted_refs(refs),
            )

        all_refs = set()
        for info in fields.values():
            all_refs.update(info.imports)

        return StructInfo(
            package_name=module.package_name,
            module_name=module.module_name,
            name=node.name,
            origin_dir=module.path.parent,
            origin_file=module.path,
            fields=tuple(fields.values()),
            imports=_sorted_refs(all_refs),
        )


def find_declaration(tree: ast.Module, name: str) -> Optional[ast.stmt]:
    """Last top-level statement that binds ``name``, or None."""
    found = None
    for stmt in tree.body:
        if isinstance(stmt, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
            if stmt.name == name:
                found = stmt
        elif isinstance(stmt, ast.Assign):
            if any(isinstance(t, ast.Name) and t.id == name for t in stmt.targets):
                found = stmt
        elif isinstance(stmt, ast.AnnAssign):
            if isinstance(stmt.target, ast.Name) and stmt.target.id == name:
                found = stmt
        elif is_type_alias(stmt):
            if stmt.name.id == name:
                found = stmt
    return found


def base_root_name(base: ast.expr) -> Optional[str]:
    """Unqualified name of a base class expression: ``pkg.Base[T]`` -> ``Base``."""
    if isinstance(base, ast.Subscript):
        base = base.value
    dotted = dotted_name(base)
    if dotted is None:
        return None
    return dotted.rsplit(".", 1)[-1]


def is_record_class(node: ast.ClassDef) -> bool:
    for base in node.bases:
        root = base_root_name(base) or ""
        if root in NON_RECORD_BASES or root.endswith(("Error", "Exception", "Warning")):
            return False
    return True


def is_classvar(annotation: ast.expr) -> bool:
    target = annotation.value if isinstance(annotation, ast.Subscript) else annotation
    if isinstance(target, ast.Constant) and isinstance(target.value, str):
        return target.value.strip().split("[", 1)[0].endswith("ClassVar")
    dotted = dotted_name(target)
    return dotted is not None and dotted.rsplit(".", 1)[-1] == "ClassVar"


def _sorted_refs(refs) -> Tuple[ImportRef, ...]:
    return tuple(sorted(set(refs), key=lambda r: r.sort_key))


def extract(source_location: str, type_name: str) -> StructInfo:
    """Convenience wrapper around Extractor().extract()."""
    return Extractor().extract(source_location, type_name)
