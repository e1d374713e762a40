"""
File I/O around the engine: reading template text and writing rendered output.

Low-level OSError never leaks from here; callers see TemplateFileError.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from .errors import TemplateFileError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_template(path: PathLike, encoding: str = "utf-8") -> str:
    """
    Read file contents as a string.

    Raises:
        TemplateFileError: If the file can't be opened or decoded
    """
    path = Path(path)
    try:
        text = path.read_text(encoding=encoding)
    except FileNotFoundError:
        raise TemplateFileError(f"File not found: {path}")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateFileError(f"File can't be read: {path}: {e}")
    logger.debug("Read %d characters from %s", len(text), path)
    return text


def write_output(path: PathLike, text: str, encoding: str = "utf-8") -> None:
    """
    Write text to a file, overwriting existing content.

    Raises:
        TemplateFileError: If the file can't be opened
    """
    path = Path(path)
    try:
        path.write_text(text, encoding=encoding)
    except (OSError, UnicodeEncodeError) as e:
        raise TemplateFileError(f"File can't be opened: {path}: {e}")
    logger.debug("Wrote %d characters to %s", len(text), path)


__all__ = ["read_template", "write_output"]
