"""Recursive file discovery for build output directories."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List

from .models import FileRef


def _iter_files(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        # Sorting in place fixes the descent order as well as the file order.
        dirnames.sort()
        current_dir = Path(dirpath)
        for filename in sorted(filenames):
            yield current_dir / filename


def walk(directory: Path) -> List[FileRef]:
    """Return every file below ``directory``, sorted by relative path.

    A missing directory yields an empty list; public and static folders are
    optional in a Next.js build.
    """
    root = Path(directory)
    if not root.is_dir():
        return []

    refs = [
        FileRef(absolute_path=path, relative_path=path.relative_to(root).as_posix())
        for path in _iter_files(root)
    ]
    refs.sort(key=lambda ref: ref.relative_path)
    return refs


__all__ = ["walk"]
