"""
Core DTO generation components.

Extraction, transformation and rendering, plus the data model and
error types they share.
"""

from .errors import (
    AmbiguousTypeError,
    AnalysisError,
    ConfigError,
    DtoGenError,
    FormatError,
    NotAStructError,
    OutputError,
    ResolutionError,
    SourceUnresolvableError,
    TemplateError,
    TemplateExecutionError,
    TemplateNotFoundError,
    TemplateParseError,
    TypeNotFoundError,
)
from .schema import (
    FieldData,
    FieldInfo,
    Filter,
    ImportRef,
    StructInfo,
    TemplateContext,
    TransformConfig,
)
from .extractor import Extractor, extract
from .transform import TransformPipeline, transform
from .generator import DEFAULT_TEMPLATE, Emitter
from .templates import TemplateEngine
from .config import BatchConfig, DTOConfig, GlobalConfig, generate_sample, load_config

__all__ = [
    # Data model
    "FieldInfo",
    "ImportRef",
    "StructInfo",
    "Filter",
    "TransformConfig",
    "FieldData",
    "TemplateContext",
    # Pipeline stages
    "Extractor",
    "extract",
    "TransformPipeline",
    "transform",
    "Emitter",
    "DEFAULT_TEMPLATE",
    "TemplateEngine",
    # Batch configuration
    "BatchConfig",
    "DTOConfig",
    "GlobalConfig",
    "load_config",
    "generate_sample",
    # Errors
    "DtoGenError",
    "ResolutionError",
    "SourceUnresolvableError",
    "TypeNotFoundError",
    "NotAStructError",
    "AmbiguousTypeError",
    "AnalysisError",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateParseError",
    "TemplateExecutionError",
    "FormatError",
    "OutputError",
    "ConfigError",
]
