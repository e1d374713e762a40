"""
Lexer for tag path expressions.

Splits a path such as ``config.servers[1].users[0]`` into tokens:
- NAME: runs of [A-Za-z0-9_-]
- DOT, LBRACKET, RBRACKET: structural symbols
- EOF: end of input

Whitespace and any other character are rejected, a path is a single word.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from ..errors import InvalidTagError


@dataclass(frozen=True)
class PathToken:
    """
    Token of a path expression.

    Attributes:
        type: NAME, DOT, LBRACKET, RBRACKET or EOF
        value: Token text
        position: Offset in the path string
    """
    type: str
    value: str
    position: int

    def __repr__(self) -> str:
        return f"PathToken({self.type}, '{self.value}', pos={self.position})"


class TagPathLexer:
    """
    Tokenizer for path expressions.

    A leading '-' is part of a NAME token here so that "[-1]" reaches the
    parser as a number-like word and is rejected there as a negative index.
    """

    # (regex, token type)
    TOKEN_SPECS = [
        (r'\.', 'DOT'),
        (r'\[', 'LBRACKET'),
        (r'\]', 'RBRACKET'),
        (r'[A-Za-z0-9_\-]+', 'NAME'),
    ]

    def __init__(self):
        self._compiled_patterns = [
            (re.compile(pattern), token_type)
            for pattern, token_type in self.TOKEN_SPECS
        ]

    def tokenize(self, text: str) -> List[PathToken]:
        """
        Splits a path expression into tokens.

        Raises:
            InvalidTagError: On a character outside the path alphabet
        """
        tokens: List[PathToken] = []
        position = 0

        while position < len(text):
            for pattern, token_type in self._compiled_patterns:
                match = pattern.match(text, position)
                if match:
                    tokens.append(PathToken(token_type, match.group(0), position))
                    position = match.end()
                    break
            else:
                raise InvalidTagError(
                    f"Tag name must only contain a-zA-Z0-9_-.[]: "
                    f"unexpected character {text[position]!r} in '{text}'"
                )

        tokens.append(PathToken('EOF', '', position))
        return tokens


__all__ = ["PathToken", "TagPathLexer"]
