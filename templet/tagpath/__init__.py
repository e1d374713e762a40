"""
Tag path expressions: lexing, parsing and resolution against the value tree.
"""

from __future__ import annotations

from .lexer import PathToken, TagPathLexer
from .model import PathSegment, TagPath
from .parser import TagPathParser, parse_alias, parse_tag_path
from .resolver import TagResolver, resolve_tag

__all__ = [
    "PathToken",
    "TagPathLexer",
    "PathSegment",
    "TagPath",
    "TagPathParser",
    "parse_alias",
    "parse_tag_path",
    "TagResolver",
    "resolve_tag",
]
