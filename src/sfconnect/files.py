"""File helpers for interactive sessions.

None of these raise: a missing path or an I/O error is logged and the helper
returns None instead.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional, Union

from .config import TRACE_BASIC
from .exceptions import IoFailure

_logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def _resolve(path: PathLike, message: str, trace_level: int) -> Optional[Path]:
    """Absolute path, or None (logged) when the path itself is unusable, e.g. holds a NUL."""
    try:
        return Path(path).resolve()
    except (OSError, ValueError, RuntimeError) as e:
        IoFailure(f"{message}: {path!r}", str(path), e).log(trace_level)
        return None


def read_json(path: PathLike, *, trace_level: int = TRACE_BASIC) -> Any:
    """Load a JSON file, or None if it is missing or unreadable."""
    resolved = _resolve(path, "unable to read file", trace_level)
    if resolved is None:
        return None
    if not resolved.exists():
        _logger.error("File does not exist: %s", resolved)
        return None

    try:
        with resolved.open("r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        IoFailure(f"unable to read file: {resolved}", str(resolved), e).log(trace_level)
        return None


def read_file(path: PathLike, *, trace_level: int = TRACE_BASIC) -> Optional[str]:
    """Read a UTF-8 text file, or None if it is missing or unreadable."""
    resolved = _resolve(path, "unable to read file", trace_level)
    if resolved is None:
        return None
    if not resolved.exists():
        _logger.error("File does not exist: %s", resolved)
        return None

    try:
        return resolved.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        IoFailure(f"unable to read file: {resolved}", str(resolved), e).log(trace_level)
        return None


def write_file(path: PathLike, contents: Any, *, trace_level: int = TRACE_BASIC) -> Optional[Path]:
    """Write ``contents`` as indented JSON (strings end up JSON-quoted).

    Returns the resolved path written, or None on failure.
    """
    resolved = _resolve(path, "unable to write to file", trace_level)
    if resolved is None:
        return None
    try:
        text = json.dumps(contents, indent=2)
        resolved.write_text(text, encoding="utf-8")
    except (OSError, TypeError, ValueError) as e:
        IoFailure(f"unable to write to file: {resolved}", str(resolved), e).log(trace_level)
        return None
    return resolved


def list_files(path: PathLike, *, trace_level: int = TRACE_BASIC) -> Optional[List[str]]:
    """Entry names of a directory, in filesystem order."""
    resolved = _resolve(path, "unable to read directory", trace_level)
    if resolved is None:
        return None
    if not resolved.exists():
        _logger.error("Path does not exist: %s", resolved)
        return None
    if not resolved.is_dir():
        _logger.error("Path is not a directory: %s", resolved)
        return None

    try:
        return os.listdir(resolved)
    except OSError as e:
        IoFailure(f"unable to read directory: {resolved}", str(resolved), e).log(trace_level)
        return None
