"""
Import discovery for field types.

A small recursive visitor walks an annotation expression and maps every
name bound by a module-level import to the ImportRef that brings it into
scope. The DTO lives in its own module, so names defined in the source
module are imported from it. Builtins and unbound names contribute nothing.
"""

import ast
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from .schema import ImportRef

# Subscript bases whose arguments are values, not types
_LITERAL_BASES = {"Literal"}
_ANNOTATED_BASES = {"Annotated"}


@dataclass(frozen=True)
class ModuleScope:
    """Module-level names: what each import binds and what is defined locally."""

    bindings: Dict[str, List[ImportRef]] = field(default_factory=dict)
    local_names: FrozenSet[str] = frozenset()
    module_name: str = ""

    @classmethod
    def from_module(
        cls, tree: ast.Module, package_name: str = "", module_name: str = ""
    ) -> "ModuleScope":
        bindings: Dict[str, List[ImportRef]] = {}
        local_names: Set[str] = set()

        for node in _top_level_statements(tree.body):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    if alias.asname:
                        ref = ImportRef(alias.name, alias=alias.asname)
                        bindings.setdefault(alias.asname, []).append(ref)
                    else:
                        root = alias.name.split(".")[0]
                        bindings.setdefault(root, []).append(ImportRef(alias.name))
            elif isinstance(node, ast.ImportFrom):
                module = resolve_relative(node.module, node.level, package_name)
                for alias in node.names:
                    if alias.name == "*":
                        continue
                    ref = ImportRef(module, alias.name, alias.asname)
                    bindings.setdefault(alias.asname or alias.name, []).append(ref)
            elif isinstance(
                node, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)
            ):
                local_names.add(node.name)
            elif isinstance(node, ast.Assign):
                for target in node.targets:
                    local_names.update(_target_names(target))
            elif isinstance(node, ast.AnnAssign):
                local_names.update(_target_names(node.target))
            elif is_type_alias(node):
                local_names.add(node.name.id)

        return cls(
            bindings=bindings,
            local_names=frozenset(local_names),
            module_name=module_name,
        )

    def lookup(self, dotted: str) -> Optional[ImportRef]:
        """Find the import that provides the root of a dotted reference."""
        root = dotted.split(".")[0]
        if root in self.local_names:
            if not self.module_name:
                return None
            return ImportRef(self.module_name, root)
        refs = self.bindings.get(root)
        if not refs:
            return None
        if len(refs) == 1 or "." not in dotted:
            return refs[-1]
        # import a.b / import a.c both bind "a"; pick the longest module prefix
        best = None
        for ref in refs:
            if ref.name is None and (
                dotted == ref.module or dotted.startswith(ref.module + ".")
            ):
                if best is None or len(ref.module) > len(best.module):
                    best = ref
        return best or refs[-1]


def _top_level_statements(body: Iterable[ast.stmt]) -> Iterable[ast.stmt]:
    """Module statements, descending into top-level if/try blocks."""
    for node in body:
        if isinstance(node, ast.If):
            yield from _top_level_statements(node.body)
            yield from _top_level_statements(node.orelse)
        elif isinstance(node, ast.Try):
            yield from _top_level_statements(node.body)
            for handler in node.handlers:
                yield from _top_level_statements(handler.body)
            yield from _top_level_statements(node.orelse)
            yield from _top_level_statements(node.finalbody)
        else:
            yield node


def _target_names(target: ast.expr) -> Set[str]:
    if isinstance(target, ast.Name):
        return {target.id}
    if isinstance(target, (ast.Tuple, ast.List)):
        names: Set[str] = set()
        for elt in target.elts:
            names |= _target_names(elt)
        return names
    return set()


def is_type_alias(node: ast.AST) -> bool:
    type_alias = getattr(ast, "TypeAlias", None)
    return type_alias is not None and isinstance(node, type_alias)


def resolve_relative(module: Optional[str], level: int, package_name: str) -> str:
    """Make a ``from . import`` module absolute; unresolvable ones stay relative."""
    if level == 0:
        return module or ""
    parts = package_name.split(".") if package_name else []
    if level - 1 >= len(parts):
        return "." * level + (module or "")
    base = parts[: len(parts) - (level - 1)]
    if module:
        base.append(module)
    return ".".join(base)


def dotted_name(node: ast.expr) -> Optional[str]:
    """``a.b.c`` for a chain of Name/Attribute nodes, else None."""
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        head = dotted_name(node.value)
        if head is not None:
            return f"{head}.{node.attr}"
    return None


def discover_imports(
    node: Optional[ast.expr], scope: ModuleScope, forward_refs: bool = True
) -> FrozenSet[ImportRef]:
    """Collect the imports needed by the names in an expression."""
    found: Set[ImportRef] = set()
    if node is not None:
        _visit(node, scope, found, forward_refs)
    return frozenset(found)


def _visit(
    node: ast.AST, scope: ModuleScope, found: Set[ImportRef], forward_refs: bool
) -> None:
    if isinstance(node, (ast.Name, ast.Attribute)):
        dotted = dotted_name(node)
        if dotted is None:
            _visit(node.value, scope, found, forward_refs)
            return
        ref = scope.lookup(dotted)
        if ref is not None:
            found.add(ref)
        return

    if isinstance(node, ast.Subscript):
        _visit(node.value, scope, found, forward_refs)
        base = dotted_name(node.value)
        last = base.rsplit(".", 1)[-1] if base else None
        if last in _LITERAL_BASES:
            return
        if last in _ANNOTATED_BASES and isinstance(node.slice, ast.Tuple):
            first, *metadata = node.slice.elts
            _visit(first, scope, found, forward_refs)
            for item in metadata:
                _visit(item, scope, found, False)
            return
        _visit(node.slice, scope, found, forward_refs)
        return

    if isinstance(node, ast.Constant):
        if forward_refs and isinstance(node.value, str):
            try:
                parsed = ast.parse(node.value.strip(), mode="eval")
            except (SyntaxError, ValueError):
                return
            _visit(parsed.body, scope, found, forward_refs)
        return

    if isinstance(node, ast.Call):
        _visit(node.func, scope, found, forward_refs)
        for arg in node.args:
            _visit(arg, scope, found, False)
        for keyword in node.keywords:
            _visit(keyword.value, scope, found, False)
        return

    # BinOp unions, Tuple/List argument groups and anything else: walk children
    for child in ast.iter_child_nodes(node):
        _visit(child, scope, found, forward_refs)
