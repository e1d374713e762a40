"""
Engine facade: holds template text and produces rendered output.

Example:
    tpl = Templet("Hello, {$ first_name } {$ last_name }!")
    tpl.render({"first_name": "John", "last_name": "Doe"})  # "Hello, John Doe!"

Every render parses the template text again; the AST is immutable and
is never shared between calls.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from .config import DEFAULT_OPTIONS, EngineOptions
from .data import MapValue, make_context
from .errors import TemplateFileError
from .fileio import PathLike, read_template, write_output
from .template.nodes import TemplateAST, render_ast
from .template.parser import parse_template

logger = logging.getLogger(__name__)

TemplateText = Union[str, bytes]
Context = Union[MapValue, Mapping[str, Any]]


def _as_text(text: TemplateText) -> str:
    if isinstance(text, bytes):
        try:
            return text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TemplateFileError(f"Template is not valid UTF-8: byte {e.start}: {e.reason}")
    return text


def tokenize(text: TemplateText, options: Optional[EngineOptions] = None) -> TemplateAST:
    """
    Parses template text into an AST without rendering it.

    Raises:
        InvalidTagError: On a malformed tag
        ExpressionSyntaxError: On a malformed for clause
        TemplateFileError: On bytes input that is not valid UTF-8
    """
    options = options or DEFAULT_OPTIONS
    ast = parse_template(_as_text(text), strict_terminators=options.strict_terminators)
    logger.debug("Parsed template into %d root nodes", len(ast))
    return ast


def render(text: TemplateText, values: Context, options: Optional[EngineOptions] = None) -> str:
    """
    Parses and renders a template against a context.

    Args:
        text: Template text
        values: Root context, a MapValue or a plain mapping
        options: Engine options, defaults if omitted

    Returns:
        Rendered text

    Raises:
        TempletError: On any hard error; nothing is rendered in that case
    """
    ast = tokenize(text, options)
    return render_ast(ast, make_context(values))


def render_file(path: PathLike, values: Context, options: Optional[EngineOptions] = None) -> str:
    """Reads a template file and renders it."""
    options = options or DEFAULT_OPTIONS
    return render(read_template(path, options.encoding), values, options)


class Templet:
    """
    Template holder.

    Keeps the template text and the result of the last successful render.
    """

    def __init__(self, text: TemplateText = "", options: Optional[EngineOptions] = None):
        self.options = options or DEFAULT_OPTIONS
        self._text = _as_text(text)
        self._result = ""

    @property
    def template(self) -> str:
        return self._text

    def set_template(self, text: TemplateText) -> None:
        """Replaces the template text and clears the last result."""
        self._text = _as_text(text)
        self._result = ""

    def set_template_from_file(self, path: PathLike) -> None:
        """
        Replaces the template text with the contents of a file.

        Raises:
            TemplateFileError: If the file can't be read; the current
                template and result are kept in that case
        """
        self.set_template(read_template(path, self.options.encoding))
        logger.debug("Template set from %s", path)

    def parse(self) -> TemplateAST:
        """Parses the current template text into an AST."""
        return tokenize(self._text, self.options)

    def render(self, values: Context) -> str:
        """
        Renders the template against a context.

        Raises:
            TempletError: On any hard error; result() is empty afterwards
        """
        self._result = ""
        self._result = render_ast(self.parse(), make_context(values))
        return self._result

    def result(self) -> str:
        """Returns the output of the last successful render."""
        return self._result

    def save(self, path: PathLike) -> None:
        """
        Writes the last result to a file, overwriting it.

        Raises:
            TemplateFileError: If the file can't be opened
        """
        write_output(path, self._result, self.options.encoding)


__all__ = ["tokenize", "render", "render_file", "Templet"]
