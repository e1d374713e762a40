"""
Template text processing: lexer, parser and AST nodes.
"""

from __future__ import annotations

from .lexer import Token, TokenType, TemplateLexer, tokenize_template
from .nodes import (
    TemplateNode, TemplateAST, TextNode, ValueNode,
    IfNode, ElifNode, ElseNode, ForNode,
    render_ast, collect_paths, format_ast_tree,
)
from .parser import BlockKind, TemplateParser, parse_template

__all__ = [
    "Token",
    "TokenType",
    "TemplateLexer",
    "tokenize_template",
    "TemplateNode",
    "TemplateAST",
    "TextNode",
    "ValueNode",
    "IfNode",
    "ElifNode",
    "ElseNode",
    "ForNode",
    "render_ast",
    "collect_paths",
    "format_ast_tree",
    "BlockKind",
    "TemplateParser",
    "parse_template",
]
