#!/usr/bin/env python3

"""Find where an installed module's source file lives."""

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def _search_dirs(search_dirs: Iterable[str | Path] | None) -> list[Path]:
    if search_dirs is None:
        search_dirs = sys.path
    # an empty sys.path entry means the current directory
    return [Path(d) if str(d) else Path.cwd() for d in search_dirs]


def module_path(module_file: str, search_dirs: Iterable[str | Path] | None = None) -> Path | None:
    """Locate a module source file such as ``requests/adapters.py``.

    Each search directory is tried in order (``sys.path`` by default) and
    the first existing file is returned as an absolute path, or None if the
    module isn't installed anywhere.
    """
    for directory in _search_dirs(search_dirs):
        candidate = directory / module_file
        if candidate.is_file():
            path = candidate.absolute()
            logger.debug(f"Found {module_file} at {path}")
            return path
    return None
