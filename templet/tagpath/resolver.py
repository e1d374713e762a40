"""
Resolver of tag paths against the value tree.

Walks a TagPath segment by segment starting from the root map. Two failure
classes are kept apart:
- soft miss: a name absent from a map or an index out of range; the walk
  stops and yields None
- hard error: an index applied to a non-list or a dot applied to a non-map;
  raised as InvalidTagError
"""

from __future__ import annotations

from typing import Optional, Union

from .model import TagPath
from .parser import parse_tag_path
from ..data import DataKind, ListValue, MapValue, Value
from ..errors import InvalidTagError, MissingTagError


class TagResolver:
    """
    Resolves paths in the context of one scope map.

    Loop bodies get a new resolver over the extended scope; the resolver
    itself holds no other state.
    """

    def __init__(self, scope: MapValue):
        """
        Args:
            scope: Map used as the starting point of every path
        """
        self.scope = scope

    def resolve(self, path: TagPath) -> Optional[Value]:
        """
        Resolves a path.

        Returns:
            The addressed value, or None on a soft miss

        Raises:
            InvalidTagError: On an index into a non-list or a dot into a non-map
        """
        current_map = self.scope
        last = len(path.segments) - 1

        for number, segment in enumerate(path.segments):
            value = current_map.get(segment.name)
            if value is None:
                return None

            for index in segment.indices:
                if value.kind() != DataKind.LIST:
                    raise InvalidTagError(
                        f"Only lists are supported by array indexes: "
                        f"'{segment.name}' in '{path}' is a {value.kind().value}"
                    )
                items = value.as_list()
                if index >= len(items):
                    return None
                value = items[index]

            if number == last:
                return value

            if value.kind() != DataKind.MAP:
                raise InvalidTagError(
                    f"Invalid dot notation: '{segment}' in '{path}' does not reference a map"
                )
            current_map = value  # type: ignore[assignment]

        return None

    def exists(self, path: TagPath) -> bool:
        """Truthiness probe: a path is true when it resolves, whatever the value."""
        return self.resolve(path) is not None

    def resolve_leaf(self, path: TagPath) -> str:
        """
        Resolves a path that must reference a string.

        Raises:
            MissingTagError: If the path does not resolve
            InvalidTagError: If the value is a list or a map
        """
        value = self._require(path)
        if value.kind() != DataKind.LEAF:
            raise InvalidTagError(
                f"Invalid tag name: '{path}' must reference a string, not a {value.kind().value}"
            )
        return value.as_string()

    def resolve_list(self, path: TagPath) -> ListValue:
        """
        Resolves a path that must reference a list.

        Raises:
            MissingTagError: If the path does not resolve
            InvalidTagError: If the value is not a list
        """
        value = self._require(path)
        if value.kind() != DataKind.LIST:
            raise InvalidTagError(
                f"Invalid tag name: '{path}' must reference a list, not a {value.kind().value}"
            )
        return value  # type: ignore[return-value]

    def _require(self, path: TagPath) -> Value:
        value = self.resolve(path)
        if value is None:
            raise MissingTagError(f"Tag name not found: '{path}'")
        return value


def resolve_tag(path: Union[str, TagPath], scope: MapValue) -> Optional[Value]:
    """
    Convenience function: parses the path if needed and resolves it.

    Raises:
        InvalidTagError: On a syntax error or a structural mismatch
    """
    if isinstance(path, str):
        path = parse_tag_path(path)
    return TagResolver(scope).resolve(path)


__all__ = ["TagResolver", "resolve_tag"]
