"""
Parsed representation of tag path expressions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class PathSegment:
    """
    One dot-separated step of a path: a map key followed by list indices.

    ``servers[1][0]`` is PathSegment(name="servers", indices=(1, 0)).
    """
    name: str
    indices: Tuple[int, ...] = ()

    def __str__(self) -> str:
        return self.name + "".join(f"[{index}]" for index in self.indices)


@dataclass(frozen=True)
class TagPath:
    """A validated path expression, as written in the template and as segments."""
    source: str
    segments: Tuple[PathSegment, ...]

    def __str__(self) -> str:
        return self.source

    @property
    def is_simple(self) -> bool:
        """True for a bare name without dots or indices."""
        return len(self.segments) == 1 and not self.segments[0].indices


__all__ = ["PathSegment", "TagPath"]
