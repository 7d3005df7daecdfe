"""
Core data model for DTO generation.

StructInfo is what the extractor produces, TransformConfig is what a
DTO declaration asks for, and TemplateContext is what the template sees.
All of them are frozen; each pipeline stage builds a new value.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, FrozenSet


@dataclass(frozen=True)
class FieldInfo:
    """A single member of the source class."""

    name: str
    type: str
    tag: str = ""
    # A base class; the source instance itself stands in for it
    embedded: bool = False
    imports: Tuple["ImportRef", ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class ImportRef:
    """
    An import that a field type depends on.

    ``module`` is the absolute dotted module path. ``name`` is the
    imported symbol for ``from`` imports and None for plain ``import``.
    """

    module: str
    name: Optional[str] = None
    alias: Optional[str] = None

    @property
    def statement(self) -> str:
        if self.name is None:
            if self.alias:
                return f"import {self.module} as {self.alias}"
            return f"import {self.module}"
        target = f"{self.name} as {self.alias}" if self.alias else self.name
        return f"from {self.module} import {target}"

    @property
    def sort_key(self) -> Tuple[str, str, str]:
        return (self.module, self.name or "", self.alias or "")

    def matches(self, pattern: str) -> bool:
        """True when pattern names this import's module or its full statement."""
        pattern = pattern.strip()
        return pattern == self.module or pattern == self.statement


@dataclass(frozen=True)
class StructInfo:
    """Normalized view of one source class."""

    package_name: str
    module_name: str
    name: str
    origin_dir: Path
    origin_file: Path
    fields: Tuple[FieldInfo, ...] = ()
    imports: Tuple[ImportRef, ...] = ()

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]


@dataclass(frozen=True)
class Filter:
    """A condition/action pair spliced verbatim into the template."""

    when: str
    do: str


@dataclass(frozen=True)
class TransformConfig:
    """Selection, renaming and augmentation rules for one DTO."""

    output_name: str
    includes: FrozenSet[str] = frozenset()
    excludes: FrozenSet[str] = frozenset()
    renames: Mapping[str, str] = field(default_factory=dict)
    add_fields: Tuple[str, ...] = ()
    filters: Tuple[Filter, ...] = ()
    imports: Tuple[str, ...] = ()
    exclude_imports: FrozenSet[str] = frozenset()
    template: Optional[Path] = None


@dataclass(frozen=True)
class FieldData:
    """A field as the template sees it."""

    output_name: str
    source_name: str
    type: str
    tag: str = ""
    embedded: bool = False


@dataclass(frozen=True)
class TemplateContext:
    """Everything a DTO template can reference."""

    package_name: str
    source_module: str
    source_name: str
    output_name: str
    imports: Tuple[str, ...] = ()
    fields: Tuple[FieldData, ...] = ()
    add_fields: Tuple[str, ...] = ()
    filters: Tuple[Filter, ...] = ()

    def as_dict(self) -> Dict[str, Any]:
        """Top-level template variables."""
        return {
            "package_name": self.package_name,
            "source_module": self.source_module,
            "source_name": self.source_name,
            "output_name": self.output_name,
            "imports": list(self.imports),
            "fields": list(self.fields),
            "add_fields": list(self.add_fields),
            "filters": list(self.filters),
        }
