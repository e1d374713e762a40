"""
Loading of template values from data files and command-line assignments.

Data files are YAML (JSON being a subset of it) whose top level is a mapping;
they are converted into the value tree with make_data().
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .data import Leaf, MapValue, Value, make_context
from .errors import DataTypeError, TemplateFileError
from .fileio import PathLike, read_template

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")

_NAME_RE = re.compile(r'[A-Za-z0-9_\-]+')


def parse_data_text(text: str, source: str = "<data>") -> MapValue:
    """
    Parses YAML/JSON text into a root context map.

    Raises:
        TemplateFileError: On invalid YAML or a non-mapping top level
        DataTypeError: On values that can't be represented (e.g. null)
    """
    try:
        raw: Any = _yaml.load(text)
    except YAMLError as e:
        raise TemplateFileError(f"Invalid data file {source}: {e}")

    if raw is None:
        return MapValue()
    if not isinstance(raw, Mapping):
        raise TemplateFileError(f"Invalid data file {source}: top level must be a mapping")

    try:
        return make_context(raw)
    except DataTypeError as e:
        raise DataTypeError(f"{source}: {e.message}")


def load_data_file(path: PathLike, encoding: str = "utf-8") -> MapValue:
    """
    Reads a YAML/JSON data file into a root context map.
    """
    context = parse_data_text(read_template(path, encoding), str(path))
    logger.debug("Loaded %d top-level names from %s", len(context), path)
    return context


def parse_assignment(text: str) -> Tuple[str, Value]:
    """
    Parses a NAME=VALUE command-line override into a top-level binding.

    Raises:
        ValueError: If the text is not NAME=VALUE or the name is not a plain name
    """
    if "=" not in text:
        raise ValueError(f"Invalid assignment '{text}'. Expected 'name=value'")
    name, value = text.split("=", 1)
    name = name.strip()
    if not _NAME_RE.fullmatch(name):
        raise ValueError(f"Invalid name '{name}' in assignment: must only contain a-zA-Z0-9_-")
    return name, Leaf(value)


def merge_contexts(*contexts: MapValue) -> MapValue:
    """
    Merges root maps left to right; later maps win on top-level name clashes.
    """
    entries: Dict[str, Value] = {}
    for context in contexts:
        entries.update(context.as_map())
    return MapValue(entries)


__all__ = ["parse_data_text", "load_data_file", "parse_assignment", "merge_contexts"]
