"""
Exception hierarchy for DTO generation.

Every failure raised by the extractor, transform pipeline, emitter or
batch loader derives from DtoGenError so callers can catch one type.
"""

from typing import Optional


class DtoGenError(Exception):
    """Base exception for all dtogen errors."""

    def __init__(
        self,
        message: str,
        type_name: Optional[str] = None,
        location: Optional[str] = None,
    ):
        super().__init__(message)
        self.type_name = type_name
        self.location = location


class ResolutionError(DtoGenError):
    """The source location or the requested type could not be resolved."""

    pass


class SourceUnresolvableError(ResolutionError):
    """The source location matched no Python files."""

    pass


class TypeNotFoundError(ResolutionError):
    """No top-level declaration carries the requested name."""

    pass


class NotAStructError(ResolutionError):
    """The requested name is bound to something other than a record class."""

    pass


class AmbiguousTypeError(ResolutionError):
    """More than one module declares the requested name."""

    pass


class AnalysisError(DtoGenError):
    """A source file could not be read or parsed."""

    pass


class TemplateError(DtoGenError):
    """Exception raised for template-related errors."""

    pass


class TemplateNotFoundError(TemplateError):
    pass


class TemplateParseError(TemplateError):
    pass


class TemplateExecutionError(TemplateError):
    pass


class FormatError(DtoGenError):
    """Rendered output is not valid Python; ``raw`` keeps the unformatted bytes."""

    def __init__(self, message: str, raw: bytes, **kwargs):
        super().__init__(message, **kwargs)
        self.raw = raw


class OutputError(DtoGenError):
    """Generated code could not be written to its destination."""

    pass


class ConfigError(DtoGenError):
    """Exception raised for configuration-related errors."""

    pass
