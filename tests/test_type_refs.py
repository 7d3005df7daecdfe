"""Tests for dtogen.core.type_refs."""

from __future__ import annotations

import ast
import textwrap

import pytest

from dtogen.core.schema import ImportRef
from dtogen.core.type_refs import ModuleScope, discover_imports, resolve_relative

MODULE = """
import uuid
import os.path
import collections.abc as cabc
from datetime import datetime
from decimal import Decimal as D
from typing import TYPE_CHECKING, Annotated, Callable, Literal, Optional

from pydantic import Field

from .address import Address
from .. import shared

if TYPE_CHECKING:
    from app.requests import Request, Response

try:
    from ujson import dumps
except ImportError:
    from json import dumps


class Key:
    pass


Alias = dict[str, int]
"""


@pytest.fixture
def scope() -> ModuleScope:
    tree = ast.parse(textwrap.dedent(MODULE))
    return ModuleScope.from_module(tree, package_name="app.models")


def refs(annotation: str, scope: ModuleScope) -> set[ImportRef]:
    return set(discover_imports(ast.parse(annotation, mode="eval").body, scope))


def test_plain_and_from_imports(scope: ModuleScope) -> None:
    assert refs("uuid.UUID", scope) == {ImportRef("uuid")}
    assert refs("datetime", scope) == {ImportRef("datetime", "datetime")}
    assert refs("D", scope) == {ImportRef("decimal", "Decimal", "D")}
    assert refs("cabc.Mapping[str, int]", scope) == {
        ImportRef("collections.abc", alias="cabc")
    }


def test_builtins_and_local_names_contribute_nothing(scope: ModuleScope) -> None:
    assert refs("int", scope) == set()
    assert refs("list[dict[str, bytes]]", scope) == set()
    assert refs("Key", scope) == set()
    assert refs("Alias", scope) == set()
    assert refs("Unknown", scope) == set()


def test_local_names_come_from_source_module() -> None:
    tree = ast.parse(textwrap.dedent(MODULE))
    scope = ModuleScope.from_module(tree, "app.models", module_name="app.models.user")

    assert refs("Key", scope) == {ImportRef("app.models.user", "Key")}
    assert refs("list[Alias]", scope) == {ImportRef("app.models.user", "Alias")}
    assert refs("Unknown", scope) == set()
    assert refs("int", scope) == set()


def test_unwraps_containers_and_generics(scope: ModuleScope) -> None:
    assert refs("Optional[list[uuid.UUID]]", scope) == {
        ImportRef("typing", "Optional"),
        ImportRef("uuid"),
    }
    # Mapping key and value sides
    assert refs("dict[Key, datetime]", scope) == {ImportRef("datetime", "datetime")}
    assert refs("tuple[D, ...]", scope) == {ImportRef("decimal", "Decimal", "D")}


def test_unions_and_callables(scope: ModuleScope) -> None:
    assert refs("Callable[[Request], Response] | None", scope) == {
        ImportRef("typing", "Callable"),
        ImportRef("app.requests", "Request"),
        ImportRef("app.requests", "Response"),
    }


def test_relative_imports_are_made_absolute(scope: ModuleScope) -> None:
    assert refs("Address", scope) == {ImportRef("app.models.address", "Address")}
    assert refs("shared.Money", scope) == {ImportRef("app", "shared")}


def test_forward_references(scope: ModuleScope) -> None:
    assert refs('"Address"', scope) == {ImportRef("app.models.address", "Address")}
    assert refs('list["datetime"]', scope) == {ImportRef("datetime", "datetime")}
    assert refs('"not a type ("', scope) == set()
    # A null byte inside the string cannot be parsed as source
    assert refs('"date\\x00time"', scope) == set()


def test_literal_arguments_are_values(scope: ModuleScope) -> None:
    assert refs('Literal["datetime", "uuid"]', scope) == {ImportRef("typing", "Literal")}


def test_annotated_metadata(scope: ModuleScope) -> None:
    assert refs('Annotated[datetime, Field(description="uuid")]', scope) == {
        ImportRef("typing", "Annotated"),
        ImportRef("datetime", "datetime"),
        ImportRef("pydantic", "Field"),
    }


def test_dotted_import_prefers_longest_module() -> None:
    tree = ast.parse("import a.b\nimport a.c\n")
    local = ModuleScope.from_module(tree)

    assert refs("a.c.Thing", local) == {ImportRef("a.c")}
    assert refs("a.b.Thing", local) == {ImportRef("a.b")}


def test_value_expressions_do_not_follow_strings(scope: ModuleScope) -> None:
    node = ast.parse('Field(default="datetime")', mode="eval").body

    assert set(discover_imports(node, scope, forward_refs=False)) == {
        ImportRef("pydantic", "Field")
    }


def test_missing_node() -> None:
    assert discover_imports(None, ModuleScope()) == frozenset()


@pytest.mark.parametrize(
    "module, level, package, expected",
    [
        ("x", 0, "pkg", "x"),
        ("base", 1, "pkg.models", "pkg.models.base"),
        (None, 1, "pkg.models", "pkg.models"),
        ("util", 2, "pkg.models", "pkg.util"),
        ("util", 3, "pkg.models", "...util"),
        ("base", 1, "", ".base"),
    ],
)
def test_resolve_relative(module, level, package, expected) -> None:
    assert resolve_relative(module, level, package) == expected
