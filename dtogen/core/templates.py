"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template loading and rendering
with the filters DTO templates use.
"""

from pathlib import Path
from typing import Any, Dict

from jinja2 import (
    Environment,
    StrictUndefined,
    Template,
    TemplateSyntaxError,
)

from .errors import TemplateExecutionError, TemplateNotFoundError, TemplateParseError
from .naming import to_camel_case, to_pascal_case, to_snake_case


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self):
        self._env = Environment(
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

        # Add custom filters for code generation
        self._env.filters["snake_case"] = to_snake_case
        self._env.filters["camel_case"] = to_camel_case
        self._env.filters["pascal_case"] = to_pascal_case
        self._env.filters["indent"] = self._indent_filter
        self._env.filters["comment"] = self._comment_filter

    def load(self, path: Path) -> Template:
        """
        Read and compile a template file.

        Args:
            path: Template file path

        Returns:
            Compiled template

        Raises:
            TemplateNotFoundError: If the file cannot be read
            TemplateParseError: If the template has a syntax error
        """
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateNotFoundError(
                f"Failed to read template file {path}: {e}", location=str(path)
            ) from e
        return self.compile(content, name=str(path))

    def compile(self, content: str, name: str = "<string>") -> Template:
        """Compile template source text."""
        try:
            return self._env.from_string(content)
        except TemplateSyntaxError as e:
            raise TemplateParseError(
                f"Failed to parse template {name}:{e.lineno}: {e.message}",
                location=name,
            ) from e

    def render(self, template: Template, context: Dict[str, Any]) -> str:
        """
        Render a compiled template with the given context.

        Any error raised while rendering, including references to
        variables the context does not define, becomes a
        TemplateExecutionError.
        """
        try:
            return template.render(**context)
        except Exception as e:
            raise TemplateExecutionError(f"Failed to render template: {e}") from e

    # Template filters for code generation

    def _indent_filter(self, value: str, spaces: int = 4) -> str:
        """Indent all lines in a string."""
        indent = " " * spaces
        lines = str(value).split("\n")
        return "\n".join(indent + line if line.strip() else line for line in lines)

    def _comment_filter(self, value: str, style: str = "#") -> str:
        """Add comment markers to each line."""
        lines = str(value).split("\n")
        return "\n".join(f"{style} {line}" if line.strip() else line for line in lines)
