"""
Transform pipeline: field selection, renaming and import merging.

Turns a StructInfo plus a TransformConfig into the TemplateContext a
template renders. There are no failure modes; names in includes,
excludes or renames that match no field are ignored.
"""

from typing import Iterable, List, Tuple

from ..logging_config import get_logger
from .schema import (
    FieldData,
    FieldInfo,
    ImportRef,
    StructInfo,
    TemplateContext,
    TransformConfig,
)

logger = get_logger(__name__)


def normalize_import(entry: str) -> str:
    """Turn a bare module path into an import statement; keep statements as-is."""
    entry = entry.strip()
    if entry.startswith(("import ", "from ")):
        return entry
    return f"import {entry}"


def select_fields(
    fields: Iterable[FieldInfo], includes: Iterable[str], excludes: Iterable[str]
) -> List[FieldInfo]:
    """
    Pick the fields to keep, always in declaration order.

    A non-empty include set wins outright and the exclude set is ignored.
    """
    includes = set(includes)
    excludes = set(excludes)
    if includes:
        return [f for f in fields if f.name in includes]
    return [f for f in fields if f.name not in excludes]


def merge_imports(
    configured: Iterable[str],
    discovered: Iterable[ImportRef],
    excluded: Iterable[str],
) -> Tuple[str, ...]:
    """
    Configured imports first, then discovered ones not excluded.

    Discovered imports are sorted so output is stable; the whole list is
    deduplicated by statement text.
    """
    excluded = [e for e in excluded if e.strip()]
    merged: List[str] = []
    seen = set()

    for entry in configured:
        if not entry.strip():
            continue
        statement = normalize_import(entry)
        if statement not in seen:
            seen.add(statement)
            merged.append(statement)

    for ref in sorted(set(discovered), key=lambda r: r.sort_key):
        if any(ref.matches(pattern) for pattern in excluded):
            continue
        if ref.statement not in seen:
            seen.add(ref.statement)
            merged.append(ref.statement)

    return tuple(merged)


class TransformPipeline:
    """Applies one DTO's TransformConfig to extracted StructInfo values."""

    def __init__(self, config: TransformConfig):
        self.config = config

    def apply(self, info: StructInfo) -> TemplateContext:
        config = self.config
        kept = select_fields(info.fields, config.includes, config.excludes)

        fields = tuple(
            FieldData(
                output_name=config.renames.get(f.name, f.name),
                source_name=f.name,
                type=f.type,
                tag=f.tag,
                embedded=f.embedded,
            )
            for f in kept
        )

        discovered = [ref for f in kept for ref in f.imports]
        imports = merge_imports(config.imports, discovered, config.exclude_imports)

        logger.debug(
            "Transformed %s -> %s: kept %d of %d field(s)",
            info.name,
            config.output_name,
            len(fields),
            len(info.fields),
        )

        return TemplateContext(
            package_name=info.package_name,
            source_module=info.module_name,
            source_name=info.name,
            output_name=config.output_name,
            imports=imports,
            fields=fields,
            add_fields=tuple(config.add_fields),
            filters=tuple(config.filters),
        )


def transform(info: StructInfo, config: TransformConfig) -> TemplateContext:
    """Convenience wrapper around TransformPipeline(config).apply(info)."""
    return TransformPipeline(config).apply(info)
