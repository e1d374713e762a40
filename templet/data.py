"""
Value tree: the data model holding template inputs.

A value is exactly one of three immutable variants:
- Leaf: a scalar string
- ListValue: an ordered, index-addressable sequence of values
- MapValue: a mapping from unique names to values

The root context passed to rendering is always a MapValue.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Tuple, Union

from .errors import DataTypeError


class DataKind(enum.Enum):
    """Variant tag of a value."""
    LEAF = "leaf"
    LIST = "list"
    MAP = "map"


@dataclass(frozen=True)
class Value(ABC):
    """Base class for all value tree variants."""

    @abstractmethod
    def kind(self) -> DataKind:
        """Returns the variant of this value."""
        pass

    @abstractmethod
    def is_empty(self) -> bool:
        """True for an empty string, an empty list or an empty map."""
        pass

    def as_string(self) -> str:
        raise DataTypeError(f"Data item is not of type leaf (got {self.kind().value})")

    def as_list(self) -> Tuple[Value, ...]:
        raise DataTypeError(f"Data item is not of type list (got {self.kind().value})")

    def as_map(self) -> Mapping[str, Value]:
        raise DataTypeError(f"Data item is not of type map (got {self.kind().value})")


@dataclass(frozen=True)
class Leaf(Value):
    """A scalar string."""
    text: str

    def kind(self) -> DataKind:
        return DataKind.LEAF

    def is_empty(self) -> bool:
        return not self.text

    def as_string(self) -> str:
        return self.text


@dataclass(frozen=True)
class ListValue(Value):
    """An ordered sequence of values, addressed by 0-based index."""
    items: Tuple[Value, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def kind(self) -> DataKind:
        return DataKind.LIST

    def is_empty(self) -> bool:
        return not self.items

    def as_list(self) -> Tuple[Value, ...]:
        return self.items

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Value:
        return self.items[index]


@dataclass(frozen=True)
class MapValue(Value):
    """
    A mapping from names to values.

    Entries are exposed through a read-only proxy; scope extension
    goes through with_binding(), which never touches the original.
    """
    entries: Mapping[str, Value] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def kind(self) -> DataKind:
        return DataKind.MAP

    def is_empty(self) -> bool:
        return not self.entries

    def as_map(self) -> Mapping[str, Value]:
        return self.entries

    def get(self, name: str) -> Optional[Value]:
        return self.entries.get(name)

    def with_binding(self, name: str, value: Value) -> MapValue:
        """
        Returns a new map with one added or overridden binding.

        Existing entries are shared by reference, only the new binding is added.
        """
        extended = dict(self.entries)
        extended[name] = value
        return MapValue(extended)

    def __hash__(self) -> int:
        # mappingproxy is unhashable; names are unique so sorting never compares values
        return hash(tuple(sorted(self.entries.items(), key=lambda item: item[0])))

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __len__(self) -> int:
        return len(self.entries)


# Anything make_data() knows how to wrap
DataLike = Union[Value, str, int, float, bool, Sequence[Any], Mapping[Any, Any]]


def make_data(obj: DataLike) -> Value:
    """
    Wraps a host value into the value tree.

    Accepts prebuilt values, strings, sequences of strings or values,
    and mappings, nested arbitrarily. Booleans render as "true"/"false",
    numbers via str(). None and other types are rejected.
    """
    if isinstance(obj, Value):
        return obj
    if isinstance(obj, str):
        return Leaf(obj)
    # bool is an int subclass, check it first
    if isinstance(obj, bool):
        return Leaf("true" if obj else "false")
    if isinstance(obj, (int, float)):
        return Leaf(str(obj))
    if isinstance(obj, Mapping):
        return MapValue({str(key): make_data(item) for key, item in obj.items()})
    if isinstance(obj, (list, tuple)):
        return ListValue(tuple(make_data(item) for item in obj))
    if obj is None:
        raise DataTypeError("Cannot wrap None into a template value")
    raise DataTypeError(f"Cannot wrap {type(obj).__name__} into a template value")


def make_context(mapping: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> MapValue:
    """Builds the root context map from a mapping and/or keyword arguments."""
    if isinstance(mapping, MapValue) and not kwargs:
        return mapping

    entries: Dict[str, Value] = {}
    if mapping is not None:
        if isinstance(mapping, MapValue):
            entries.update(mapping.entries)
        elif isinstance(mapping, Mapping):
            for key, item in mapping.items():
                entries[str(key)] = make_data(item)
        else:
            raise DataTypeError(
                f"Template context must be a mapping, got {type(mapping).__name__}"
            )
    for key, item in kwargs.items():
        entries[key] = make_data(item)
    return MapValue(entries)


__all__ = [
    "DataKind",
    "Value",
    "Leaf",
    "ListValue",
    "MapValue",
    "DataLike",
    "make_data",
    "make_context",
]
