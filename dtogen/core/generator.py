"""
Emitter: render a TemplateContext and format the result as Python source.
"""

from pathlib import Path
from typing import Optional, Union

import black

from ..logging_config import get_logger
from .errors import FormatError
from .schema import TemplateContext
from .templates import TemplateEngine

logger = get_logger(__name__)

DEFAULT_TEMPLATE = Path(__file__).resolve().parent.parent / "templates" / "dto.py.j2"


class Emitter:
    """
    Renders DTO source code.

    The default template is handed in at construction; a per-call
    template path overrides it. Each render call is independent.
    """

    def __init__(
        self,
        default_template: Union[str, Path] = DEFAULT_TEMPLATE,
        line_length: int = black.DEFAULT_LINE_LENGTH,
    ):
        self.default_template = Path(default_template)
        self.mode = black.Mode(line_length=line_length)
        self._engine = TemplateEngine()

    def render(
        self,
        context: TemplateContext,
        template: Optional[Union[str, Path]] = None,
    ) -> bytes:
        """
        Render a context through a template and format it.

        Args:
            context: Template context built by the transform pipeline
            template: Optional custom template path

        Returns:
            Formatted source as UTF-8 bytes

        Raises:
            TemplateError: If the template cannot be read, parsed or rendered
            FormatError: If the rendered text is not valid Python; the
                unformatted bytes are available as ``error.raw``
        """
        path = Path(template) if template else self.default_template
        compiled = self._engine.load(path)
        code = self._engine.render(compiled, context.as_dict())
        logger.debug("Rendered %s with %s", context.output_name, path.name)
        return self.format_code(code, type_name=context.source_name)

    def format_code(self, code: str, type_name: Optional[str] = None) -> bytes:
        """Apply black formatting, keeping the raw text on failure."""
        try:
            formatted = black.format_str(code, mode=self.mode)
        except ValueError as e:
            raise FormatError(
                f"Failed to format generated code: {e}",
                raw=code.encode("utf-8"),
                type_name=type_name,
            ) from e
        return formatted.encode("utf-8")
