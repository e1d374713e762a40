"""
Template parser.

Turns the token stream into an AST. Block nesting is carried by recursion:
every block tag ({% if %}, {% elif %}, {% else %}, {% for %}) parses its body
with a nested call to _parse_block(), which returns when it meets the
terminator closing that block, so the call-stack depth equals the current
nesting depth.

An {% elif %} or {% else %} tag ends the body of the enclosing if/elif; its
own body runs up to the terminator of the whole chain, which yields the
right-nested continuation structure of IfNode.
"""

from __future__ import annotations

import enum
from typing import List, Optional, Tuple, Type, Union

from .lexer import Token, TokenType, TemplateLexer
from .nodes import (
    TemplateAST, TextNode, ValueNode,
    IfNode, ElifNode, ElseNode, ForNode,
)
from ..errors import ExpressionSyntaxError, InvalidTagError, TempletError
from ..tagpath import TagPath, parse_alias, parse_tag_path

Continuation = Union[ElifNode, ElseNode]


class BlockKind(enum.Enum):
    """Kind of the block whose body is being parsed."""
    IF = "if"
    ELIF = "elif"
    ELSE = "else"
    FOR = "for"


# Blocks each terminator is allowed to close in strict mode
_TERMINATES = {
    "endif": (BlockKind.IF, BlockKind.ELIF, BlockKind.ELSE),
    "endfor": (BlockKind.FOR,),
}


class TemplateParser:
    """
    Recursive parser for templates.

    With strict_terminators (the default) {% endif %} must close an if chain
    and {% endfor %} a loop. Without it only terminator matching is relaxed:
    any terminator closes the innermost open block and a stray terminator at
    top level ends the template. Placement of elif/else is checked in both
    modes.
    """

    def __init__(self, tokens: List[Token], strict_terminators: bool = True):
        self.tokens = tokens
        self.position = 0
        self.strict_terminators = strict_terminators

    def parse(self) -> TemplateAST:
        """
        Parses the whole token stream.

        Returns:
            List of root nodes

        Raises:
            InvalidTagError: On a malformed tag or a misplaced block tag
            ExpressionSyntaxError: On a malformed for clause
        """
        nodes, _ = self._parse_block(None)
        return nodes

    def _parse_block(self, opener: Optional[BlockKind]) -> Tuple[TemplateAST, Optional[Continuation]]:
        """
        Parses sibling nodes until EOF, a terminator or a continuation tag.

        Args:
            opener: Kind of the block being parsed, None at top level

        Returns:
            The sibling nodes and, if the block ended with elif/else,
            the continuation node
        """
        nodes: TemplateAST = []

        while not self._is_at_end():
            token = self._advance()

            if token.type == TokenType.TEXT:
                if token.value:
                    nodes.append(TextNode(text=token.value))
                continue

            if token.type == TokenType.VALUE:
                nodes.append(ValueNode(path=self._parse_path(token.value, token)))
                continue

            words = token.value.split()
            if not words:
                raise InvalidTagError("Empty block tag", token.line, token.column)
            keyword = words[0]

            if keyword in _TERMINATES:
                self._check_terminator(keyword, words, opener, token)
                return nodes, None

            if keyword == "if":
                nodes.append(self._parse_conditional(IfNode, BlockKind.IF, token))
            elif keyword == "for":
                nodes.append(self._parse_for(words, token))
            elif keyword in ("elif", "else"):
                return nodes, self._parse_continuation(keyword, words, opener, token)
            else:
                raise InvalidTagError(f"Unrecognized tag: '{keyword}'", token.line, token.column)

        return nodes, None

    def _parse_conditional(self, node_cls: Type[IfNode], kind: BlockKind, token: Token) -> IfNode:
        """
        Parses {% if path %} or {% elif path %} and its body.
        """
        path_text = token.value[len(kind.value):]
        if not path_text.strip():
            raise InvalidTagError(f"Missing tag name in {kind.value} tag", token.line, token.column)
        path = self._parse_path(path_text, token)

        body, continuation = self._parse_block(kind)
        return node_cls(path=path, body=tuple(body), continuation=continuation)

    def _parse_continuation(
        self, keyword: str, words: List[str], opener: Optional[BlockKind], token: Token
    ) -> Continuation:
        """
        Parses {% elif %} or {% else %} ending the body of the enclosing if/elif.
        """
        if opener == BlockKind.ELSE:
            raise InvalidTagError(f"Unexpected {keyword} after else", token.line, token.column)
        if opener not in (BlockKind.IF, BlockKind.ELIF):
            raise InvalidTagError(f"{keyword} without if", token.line, token.column)

        if keyword == "elif":
            return self._parse_conditional(ElifNode, BlockKind.ELIF, token)  # type: ignore[return-value]

        if len(words) != 1:
            raise InvalidTagError("Unexpected text after else", token.line, token.column)
        body, _ = self._parse_block(BlockKind.ELSE)
        return ElseNode(body=tuple(body))

    def _parse_for(self, words: List[str], token: Token) -> ForNode:
        """
        Parses {% for source as alias %} and its body.
        """
        if len(words) != 4:
            raise ExpressionSyntaxError(
                "For expressions must contain exactly four tokens: 'for <name> as <alias>'",
                token.line, token.column,
            )
        if words[2] != "as":
            raise ExpressionSyntaxError(
                f"Unrecognized for expression syntax: '{token.value}'", token.line, token.column
            )

        source = self._parse_path(words[1], token)
        try:
            alias = parse_alias(words[3])
        except TempletError as e:
            raise e.at(token.line, token.column)

        body, _ = self._parse_block(BlockKind.FOR)
        return ForNode(source=source, alias=alias, body=tuple(body))

    def _check_terminator(
        self, keyword: str, words: List[str], opener: Optional[BlockKind], token: Token
    ) -> None:
        if len(words) != 1:
            raise InvalidTagError(f"Unexpected text after {keyword}", token.line, token.column)
        if not self.strict_terminators:
            return
        if opener is None:
            raise InvalidTagError(
                f"{keyword} without {keyword[3:]}", token.line, token.column
            )
        if opener not in _TERMINATES[keyword]:
            raise InvalidTagError(
                f"Mismatched {keyword}: open block is {opener.value}", token.line, token.column
            )

    @staticmethod
    def _parse_path(text: str, token: Token) -> TagPath:
        try:
            return parse_tag_path(text)
        except TempletError as e:
            raise e.at(token.line, token.column)

    # Token helpers

    def _current_token(self) -> Token:
        if self.position >= len(self.tokens):
            last = self.tokens[-1] if self.tokens else None
            return Token(
                TokenType.EOF, "",
                last.position if last else 0,
                last.line if last else 1,
                last.column if last else 1,
            )
        return self.tokens[self.position]

    def _advance(self) -> Token:
        token = self._current_token()
        if not self._is_at_end():
            self.position += 1
        return token

    def _is_at_end(self) -> bool:
        return self._current_token().type == TokenType.EOF


def parse_template(text: str, strict_terminators: bool = True) -> TemplateAST:
    """
    Convenience function: tokenizes and parses a template.

    Raises:
        InvalidTagError: On a malformed tag
        ExpressionSyntaxError: On a malformed for clause
    """
    tokens = TemplateLexer(text).tokenize()
    return TemplateParser(tokens, strict_terminators=strict_terminators).parse()


__all__ = ["BlockKind", "TemplateParser", "parse_template"]
