"""
dtogen

Generates DTO classes from existing Python classes by selecting,
renaming and augmenting their fields.
"""

__version__ = "0.1.0"

from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from .core import (
    DtoGenError,
    Emitter,
    Extractor,
    StructInfo,
    TemplateContext,
    TransformConfig,
    TransformPipeline,
    extract,
    transform,
)
from .core.naming import default_output_name
from .orchestrator import GenerationJob, GenerationResult, Orchestrator


def generate_dto(
    source: str,
    type_name: str,
    output_name: Optional[str] = None,
    includes: Iterable[str] = (),
    excludes: Iterable[str] = (),
    renames: Optional[Dict[str, str]] = None,
    template: Optional[Union[str, Path]] = None,
) -> str:
    """
    Quick DTO generation, returning the code instead of writing a file.

    Args:
        source: Source file, directory or dotted module name
        type_name: Class to mirror
        output_name: DTO class name (default: <type_name>DTO)
        includes: Fields to keep (overrides excludes)
        excludes: Fields to drop
        renames: Mapping of source field name to DTO field name
        template: Optional custom template path

    Returns:
        Generated code string
    """
    config = TransformConfig(
        output_name=output_name or default_output_name(type_name),
        includes=frozenset(includes),
        excludes=frozenset(excludes),
        renames=dict(renames or {}),
        template=Path(template) if template else None,
    )
    info = extract(source, type_name)
    context = transform(info, config)
    return Emitter().render(context, config.template).decode("utf-8")


__all__ = [
    "__version__",
    "generate_dto",
    "extract",
    "transform",
    "Extractor",
    "TransformPipeline",
    "Emitter",
    "Orchestrator",
    "GenerationJob",
    "GenerationResult",
    "StructInfo",
    "TransformConfig",
    "TemplateContext",
    "DtoGenError",
]
