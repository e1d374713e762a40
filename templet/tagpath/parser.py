"""
Recursive descent parser for tag path expressions.

Grammar:
path    → segment ("." segment)* EOF
segment → NAME index*
index   → "[" INTEGER "]"

INTEGER is a NAME token made of decimal digits only; leading zeros are
allowed, a sign is not.
"""

from __future__ import annotations

import re
from typing import List

from .lexer import PathToken, TagPathLexer
from .model import PathSegment, TagPath
from ..errors import InvalidTagError

_NAME_RE = re.compile(r'[A-Za-z0-9_\-]+')
_INTEGER_RE = re.compile(r'[0-9]+')
_NEGATIVE_RE = re.compile(r'-[0-9]+')


class TagPathParser:
    """
    Parser that turns a path string into a TagPath.

    Every syntax problem is reported as InvalidTagError; whether the path
    actually resolves is decided later by the resolver.
    """

    def __init__(self):
        self.lexer = TagPathLexer()
        self._source = ""
        self._tokens: List[PathToken] = []
        self._position = 0

    def parse(self, path_str: str) -> TagPath:
        """
        Parses a path expression.

        Args:
            path_str: Path as written in the tag, surrounding whitespace ignored

        Returns:
            Validated TagPath

        Raises:
            InvalidTagError: On any syntax error
        """
        self._source = path_str.strip()
        if not self._source:
            raise InvalidTagError("Tag name must not be empty")

        self._tokens = self.lexer.tokenize(self._source)
        self._position = 0

        segments = [self._parse_segment()]
        while self._match('DOT'):
            segments.append(self._parse_segment())

        current = self._current_token()
        if current.type != 'EOF':
            raise self._error(f"Expected '.' or '[' before '{current.value}'")

        return TagPath(source=self._source, segments=tuple(segments))

    def _parse_segment(self) -> PathSegment:
        """Parses NAME followed by an optional index chain."""
        current = self._current_token()
        if current.type == 'LBRACKET':
            raise self._error("Array index must follow a name")
        if current.type != 'NAME':
            raise self._error("Empty name in dot notation")

        self._advance()
        indices = []
        while self._match('LBRACKET'):
            indices.append(self._parse_index())
        return PathSegment(name=current.value, indices=tuple(indices))

    def _parse_index(self) -> int:
        """Parses the body of [...] after the opening bracket."""
        current = self._current_token()
        if current.type == 'EOF':
            raise self._error("Invalid array syntax: index must be enclosed with []")
        if current.type != 'NAME':
            raise self._error("Invalid array index: value must be an integer")

        raw = current.value
        if _NEGATIVE_RE.fullmatch(raw):
            raise self._error("Invalid array index: value must not be negative")
        if not _INTEGER_RE.fullmatch(raw):
            raise self._error("Invalid array index: value must be an integer")
        self._advance()

        closing = self._current_token()
        if closing.type == 'EOF':
            raise self._error("Invalid array syntax: index must be enclosed with []")
        if closing.type != 'RBRACKET':
            raise self._error("Invalid array index: value must be an integer")
        self._advance()

        return int(raw)

    # Token helpers

    def _current_token(self) -> PathToken:
        return self._tokens[self._position]

    def _advance(self) -> PathToken:
        token = self._tokens[self._position]
        if token.type != 'EOF':
            self._position += 1
        return token

    def _match(self, token_type: str) -> bool:
        if self._current_token().type == token_type:
            self._advance()
            return True
        return False

    def _error(self, message: str) -> InvalidTagError:
        position = self._current_token().position
        return InvalidTagError(f"{message} in '{self._source}' (position {position})")


def parse_tag_path(path_str: str) -> TagPath:
    """Convenience wrapper around TagPathParser."""
    return TagPathParser().parse(path_str)


def parse_alias(alias_str: str) -> str:
    """
    Validates a loop alias: a plain name, no dots and no indices.

    Raises:
        InvalidTagError: If the alias is not a plain name
    """
    alias = alias_str.strip()
    if not _NAME_RE.fullmatch(alias):
        raise InvalidTagError(
            f"Invalid alias '{alias}': alias must only contain a-zA-Z0-9_-"
        )
    return alias


__all__ = ["TagPathParser", "parse_tag_path", "parse_alias"]
