"""Locate the directory that holds the standalone ``server.js``."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .constants import MODULES_DIR, SERVER_MARKER
from .logging import get_logger

logger = get_logger("locator")


class ServerNotFoundError(FileNotFoundError):
    """Raised when no ``server.js`` exists anywhere in the standalone output."""


def locate_server_root(standalone_root: Path) -> Path:
    """Return the server root for flat and monorepo standalone layouts.

    Flat builds keep ``server.js`` at the standalone root. Monorepo builds nest
    it under the app's workspace path (``apps/web``, ``packages/apps/web``, ...),
    so the tree is searched depth-first without entering ``node_modules``.
    """
    root = Path(standalone_root)
    if (root / SERVER_MARKER).is_file():
        return root

    found = _search(root)
    if found is None:
        raise ServerNotFoundError(
            f"Could not find {SERVER_MARKER} in {root} or any of its subdirectories"
        )
    logger.info("Detected nested server root at %s", found.relative_to(root).as_posix())
    return found


def _search(directory: Path) -> Optional[Path]:
    try:
        children = sorted(child for child in directory.iterdir() if child.is_dir())
    except OSError:
        return None

    for child in children:
        if child.name == MODULES_DIR:
            continue
        if (child / SERVER_MARKER).is_file():
            return child
        nested = _search(child)
        if nested is not None:
            return nested
    return None


__all__ = ["ServerNotFoundError", "locate_server_root"]
