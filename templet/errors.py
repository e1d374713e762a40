"""
Error taxonomy for the template engine.

Every structural defect in a template is reported as one of a small closed
set of error kinds. Soft misses (an absent name, an index out of range) are
not errors and never reach this module.
"""

from __future__ import annotations

from typing import Optional


class TempletError(Exception):
    """
    Base class for all user-facing errors in templet.

    Carries an optional template location so that the CLI can print
    a precise diagnostic without a stack trace.
    """

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message} at {self.line}:{self.column}"

    def at(self, line: int, column: int) -> "TempletError":
        """Return a copy of this error bound to a template location."""
        if self.line is not None:
            return self
        located = type(self)(self.message, line, column)
        located.__cause__ = self
        return located


class InvalidTagError(TempletError):
    """Malformed tag, invalid path or alias, or a value of the wrong shape."""
    pass


class MissingTagError(TempletError):
    """A referenced name is required to exist but is not in the value tree."""
    pass


class ExpressionSyntaxError(TempletError):
    """Malformed tag expression, e.g. a broken 'for ... as ...' clause."""
    pass


class DataTypeError(TempletError, TypeError):
    """A value tree accessor was used on the wrong variant."""
    pass


class TemplateFileError(TempletError):
    """A template, data or output file could not be read, decoded or written."""
    pass


class ConfigError(ValueError):
    """Invalid engine configuration, with the offending key in the message."""
    pass


__all__ = [
    "TempletError",
    "InvalidTagError",
    "MissingTagError",
    "ExpressionSyntaxError",
    "DataTypeError",
    "TemplateFileError",
    "ConfigError",
]
