"""Depth-first, children-before-parent walk of a directory tree."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, NamedTuple

from hostdoctor.core.exceptions import FileSystemError


class WalkEntry(NamedTuple):
    path: Path
    is_dir: bool


def walk_tree(root: Path | str) -> Iterator[WalkEntry]:
    """Yield every entry under ``root`` in post-order.

    Within a directory, entries are visited in name order; a subdirectory is
    yielded after everything inside it. Symlinked directories are reported
    but not descended into. Any OS error aborts the walk with FileSystemError.
    """
    root = Path(root)
    if not root.is_dir():
        raise FileSystemError(f"Not a directory: {root}")
    yield from _walk(root)


def _walk(directory: Path) -> Iterator[WalkEntry]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        raise FileSystemError(f"Cannot read directory {directory}: {e}") from e

    for entry in entries:
        path = Path(entry.path)
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as e:
            raise FileSystemError(f"Cannot stat {path}: {e}") from e
        if is_dir:
            yield from _walk(path)
            yield WalkEntry(path, True)
        else:
            yield WalkEntry(path, False)
