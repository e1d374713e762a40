"""
AST nodes of the template engine and their rendering.

Nodes are immutable once the parser has built them, so one AST can be
rendered any number of times, from any number of threads, against
different value contexts.

Conditional chains are right-nested: an IfNode owns its body and an
optional continuation (ElifNode or ElseNode) that is rendered only when
its own condition is false.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, Union

from ..data import DataKind, MapValue
from ..tagpath import TagPath, TagResolver
from ..errors import InvalidTagError


@dataclass(frozen=True)
class TemplateNode(ABC):
    """Base class for all template AST nodes."""

    @abstractmethod
    def render(self, scope: MapValue, out: List[str]) -> None:
        """
        Renders the node against a scope, appending output chunks to out.

        Raises:
            TempletError: On a hard error; soft misses render nothing
        """
        pass


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """
    Literal text, rendered as is.
    """
    text: str

    def render(self, scope: MapValue, out: List[str]) -> None:
        out.append(self.text)


@dataclass(frozen=True)
class ValueNode(TemplateNode):
    """
    Substitution {$ path }.

    An unresolved path renders nothing. A path resolving to a list or
    a map is an error, only strings print.
    """
    path: TagPath

    def render(self, scope: MapValue, out: List[str]) -> None:
        value = TagResolver(scope).resolve(self.path)
        if value is None:
            return
        if value.kind() != DataKind.LEAF:
            raise InvalidTagError(
                f"Invalid tag name: '{self.path}' must reference a string, not a {value.kind().value}"
            )
        out.append(value.as_string())


@dataclass(frozen=True)
class ElseNode(TemplateNode):
    """
    {% else %} branch: renders its body unconditionally.
    """
    body: Tuple[TemplateNode, ...] = ()

    def render(self, scope: MapValue, out: List[str]) -> None:
        render_nodes(self.body, scope, out)

    @property
    def children(self) -> Tuple[TemplateNode, ...]:
        return self.body


@dataclass(frozen=True)
class IfNode(TemplateNode):
    """
    {% if path %} block.

    The condition is true when the path resolves, whatever the value
    (an empty string is still true). When false, rendering is delegated
    to the continuation if there is one.
    """
    path: TagPath
    body: Tuple[TemplateNode, ...] = ()
    continuation: Optional[Union[ElifNode, ElseNode]] = None

    def render(self, scope: MapValue, out: List[str]) -> None:
        if TagResolver(scope).exists(self.path):
            render_nodes(self.body, scope, out)
        elif self.continuation is not None:
            self.continuation.render(scope, out)

    @property
    def children(self) -> Tuple[TemplateNode, ...]:
        """Body followed by the continuation, as one flat tuple."""
        if self.continuation is None:
            return self.body
        return self.body + (self.continuation,)


@dataclass(frozen=True)
class ElifNode(IfNode):
    """
    {% elif path %} branch. Same evaluation as IfNode, only ever reached
    as the continuation of an if or another elif.
    """
    pass


@dataclass(frozen=True)
class ForNode(TemplateNode):
    """
    {% for source as alias %} loop.

    The source must resolve to a list. Each iteration renders the body
    against the enclosing scope extended with alias -> element; the
    alias may not shadow an existing name of that scope.
    """
    source: TagPath
    alias: str
    body: Tuple[TemplateNode, ...] = ()

    def render(self, scope: MapValue, out: List[str]) -> None:
        items = TagResolver(scope).resolve_list(self.source)
        if self.alias in scope:
            raise InvalidTagError(
                f"Invalid alias '{self.alias}' in loop over '{self.source}': "
                f"name already exists in the current scope"
            )
        for item in items:
            render_nodes(self.body, scope.with_binding(self.alias, item), out)

    @property
    def children(self) -> Tuple[TemplateNode, ...]:
        return self.body


# Alias for a list of nodes (AST)
TemplateAST = List[TemplateNode]


def render_nodes(nodes: Union[TemplateAST, Tuple[TemplateNode, ...]], scope: MapValue, out: List[str]) -> None:
    for node in nodes:
        node.render(scope, out)


def render_ast(ast: TemplateAST, scope: MapValue) -> str:
    """Renders an AST to a string against a root scope."""
    out: List[str] = []
    render_nodes(ast, scope, out)
    return "".join(out)


def iter_nodes(ast: Union[TemplateAST, Tuple[TemplateNode, ...]]) -> Iterator[TemplateNode]:
    """Walks the AST depth first, continuations included."""
    for node in ast:
        yield node
        children = getattr(node, "children", ())
        yield from iter_nodes(children)


def collect_paths(ast: TemplateAST) -> List[str]:
    """
    Returns every path referenced by the template, in order of appearance
    and without duplicates. Loop aliases are reported as used by the body,
    not as names the caller must provide.
    """
    seen: List[str] = []
    for node in iter_nodes(ast):
        path = None
        if isinstance(node, (ValueNode, IfNode)):
            path = node.path
        elif isinstance(node, ForNode):
            path = node.source
        if path is not None and path.source not in seen:
            seen.append(path.source)
    return seen


def format_ast_tree(ast: Union[TemplateAST, Tuple[TemplateNode, ...]], indent: int = 0) -> str:
    """
    Formats the AST as an indented tree for debugging and the CLI.
    """
    lines: List[str] = []
    pad = "  " * indent

    for node in ast:
        if isinstance(node, TextNode):
            lines.append(f"{pad}Text({node.text!r})")
        elif isinstance(node, ValueNode):
            lines.append(f"{pad}Value({node.path})")
        elif isinstance(node, IfNode):
            keyword = "Elif" if isinstance(node, ElifNode) else "If"
            lines.append(f"{pad}{keyword}({node.path})")
            if node.body:
                lines.append(format_ast_tree(node.body, indent + 1))
            if node.continuation is not None:
                lines.append(format_ast_tree([node.continuation], indent))
        elif isinstance(node, ElseNode):
            lines.append(f"{pad}Else")
            if node.body:
                lines.append(format_ast_tree(node.body, indent + 1))
        elif isinstance(node, ForNode):
            lines.append(f"{pad}For({node.source} as {node.alias})")
            if node.body:
                lines.append(format_ast_tree(node.body, indent + 1))

    return "\n".join(lines)


__all__ = [
    "TemplateNode",
    "TextNode",
    "ValueNode",
    "IfNode",
    "ElifNode",
    "ElseNode",
    "ForNode",
    "TemplateAST",
    "render_nodes",
    "render_ast",
    "iter_nodes",
    "collect_paths",
    "format_ast_tree",
]
