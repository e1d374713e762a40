from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CFG_FILE = "templet.yaml"

# --------------------------------------------------------------------------- #
# YAML loader
# --------------------------------------------------------------------------- #
_yaml = YAML(typ="safe")


@dataclass(frozen=True)
class EngineOptions:
    """
    Engine settings.

    strict_terminators: {% endif %} / {% endfor %} must match the block they close
    encoding: encoding of template, data and output files
    """
    strict_terminators: bool = True
    encoding: str = "utf-8"


DEFAULT_OPTIONS = EngineOptions()


# --------------------------------------------------------------------------- #
# HELPERS
# --------------------------------------------------------------------------- #
def options_from_dict(raw: Mapping[str, Any], base: EngineOptions = DEFAULT_OPTIONS) -> EngineOptions:
    """Overlays user keys on top of the base options, checking names and types."""
    known = {f.name: f for f in fields(EngineOptions)}
    updates: Dict[str, Any] = {}

    for key, value in raw.items():
        if key not in known:
            raise ConfigError(f"Unknown option '{key}' (expected one of: {', '.join(sorted(known))})")
        expected = type(getattr(base, key))
        if not isinstance(value, expected):
            raise ConfigError(
                f"{key}: expected {expected.__name__}, got {type(value).__name__}"
            )
        updates[key] = value

    return replace(base, **updates)


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_options(path: Optional[Union[str, Path]] = None) -> EngineOptions:
    """
    Load engine options from a YAML file.

    • No path given: look for templet.yaml in the current directory.
    • No file: defaults.
    • Empty file: defaults.
    """
    if path is None:
        path = Path.cwd() / DEFAULT_CFG_FILE
        if not path.exists():
            return DEFAULT_OPTIONS
    else:
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            raw = _yaml.load(f) or {}
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")

    if not isinstance(raw, Mapping):
        raise ConfigError(f"{path}: top level must be a mapping")

    options = options_from_dict(raw)
    logger.debug("Loaded options from %s: %s", path, options)
    return options


__all__ = ["DEFAULT_CFG_FILE", "EngineOptions", "DEFAULT_OPTIONS", "options_from_dict", "load_options"]
