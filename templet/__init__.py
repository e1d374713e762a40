"""
templet: a small string-template engine.

Templates mix literal text with tags:
- {$ path }                      substitution
- {% if path %} ... {% elif path %} ... {% else %} ... {% endif %}
- {% for path as alias %} ... {% endfor %}
- {\\ ... }                       escaped tag, emitted literally

Paths address a value tree of strings, lists and maps:
``config.servers[0].hostname``.
"""

from __future__ import annotations

from .config import EngineOptions, load_options
from .data import (
    DataKind, Value, Leaf, ListValue, MapValue,
    make_data, make_context,
)
from .engine import Templet, render, render_file, tokenize
from .errors import (
    TempletError, InvalidTagError, MissingTagError, ExpressionSyntaxError,
    DataTypeError, TemplateFileError, ConfigError,
)

__all__ = [
    "EngineOptions",
    "load_options",
    "DataKind",
    "Value",
    "Leaf",
    "ListValue",
    "MapValue",
    "make_data",
    "make_context",
    "Templet",
    "render",
    "render_file",
    "tokenize",
    "TempletError",
    "InvalidTagError",
    "MissingTagError",
    "ExpressionSyntaxError",
    "DataTypeError",
    "TemplateFileError",
    "ConfigError",
]
