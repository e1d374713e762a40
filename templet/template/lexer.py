"""
Lexical analyzer for templates.

Splits template text into literal text and tags. A tag starts with '{' and
ends at the next '}'; the character after the opener selects its kind:
- '$'  substitution   {$ path }
- '%'  block          {% keyword ... %}
- '\\'  escape         {\\...} emits the tag literally with one '\\' removed

Input may end mid-tag, in which case the rest is literal text.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List

from ..errors import InvalidTagError

TAG_OPEN = "{"
TAG_CLOSE = "}"
VALUE_MARKER = "$"
BLOCK_MARKER = "%"
ESCAPE_MARKER = "\\"


class TokenType(enum.Enum):
    """Types of template tokens."""
    TEXT = "TEXT"      # literal text, escapes already applied
    VALUE = "VALUE"    # body of {$ ... }, trimmed
    BLOCK = "BLOCK"    # body of {% ... %}, trimmed
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """
    Token with position information for error diagnostics.
    """
    type: TokenType
    value: str
    position: int        # Offset in the source text
    line: int            # 1-based
    column: int          # 1-based

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class TemplateLexer:
    """
    Template tokenizer.

    Produces a flat token list; nesting is the parser's business.
    """

    def __init__(self, text: str):
        self.text = text
        self.position = 0
        self.line = 1
        self.column = 1
        self.length = len(text)

    def tokenize(self) -> List[Token]:
        """
        Tokenizes the whole text, EOF token included.

        Raises:
            InvalidTagError: On an unrecognized tag or a block tag not closed by %}
        """
        tokens: List[Token] = []

        while self.position < self.length:
            tokens.extend(self._next_tokens())

        tokens.append(Token(TokenType.EOF, "", self.position, self.line, self.column))
        return tokens

    def _next_tokens(self) -> List[Token]:
        """Reads literal text up to the next tag, then the tag itself."""
        tokens: List[Token] = []

        open_pos = self.text.find(TAG_OPEN, self.position)
        if open_pos < 0:
            tokens.append(self._make_token(TokenType.TEXT, self.text[self.position:], self.length))
            return tokens

        if open_pos > self.position:
            tokens.append(self._make_token(TokenType.TEXT, self.text[self.position:open_pos], open_pos))

        close_pos = self.text.find(TAG_CLOSE, open_pos + 1)
        if close_pos < 0:
            # Template ends mid-tag: keep the dangling opener as text
            tokens.append(self._make_token(TokenType.TEXT, self.text[open_pos:], self.length))
            return tokens

        tokens.append(self._read_tag(open_pos, close_pos))
        return tokens

    def _read_tag(self, open_pos: int, close_pos: int) -> Token:
        """Classifies the tag text[open_pos:close_pos + 1] and consumes it."""
        raw = self.text[open_pos:close_pos + 1]
        end = close_pos + 1
        marker = raw[1]

        if marker == ESCAPE_MARKER:
            return self._make_token(TokenType.TEXT, raw[0] + raw[2:], end)

        if marker == VALUE_MARKER:
            return self._make_token(TokenType.VALUE, raw[2:-1].strip(), end)

        if marker == BLOCK_MARKER:
            body = raw[2:-1]
            if len(body) < 1 or not body.endswith(BLOCK_MARKER):
                raise InvalidTagError(
                    f"Tag must be enclosed with {{% and %}}: {raw!r}", self.line, self.column
                )
            return self._make_token(TokenType.BLOCK, body[:-1].strip(), end)

        raise InvalidTagError(f"Unrecognized tag: {raw!r}", self.line, self.column)

    def _make_token(self, token_type: TokenType, value: str, end: int) -> Token:
        """Creates a token at the current position and advances to end."""
        token = Token(token_type, value, self.position, self.line, self.column)
        self._advance(end - self.position)
        return token

    def _advance(self, count: int) -> None:
        """
        Moves the position by count characters, updating line and column.
        """
        chunk = self.text[self.position:self.position + count]
        newlines = chunk.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(chunk) - chunk.rfind("\n")
        else:
            self.column += len(chunk)
        self.position += len(chunk)


def tokenize_template(text: str) -> List[Token]:
    """
    Convenience function to tokenize a template.

    Raises:
        InvalidTagError: On an unrecognized tag
    """
    return TemplateLexer(text).tokenize()


__all__ = [
    "TAG_OPEN",
    "TAG_CLOSE",
    "TokenType",
    "Token",
    "TemplateLexer",
    "tokenize_template",
]
