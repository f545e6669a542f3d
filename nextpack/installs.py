"""Resolve where a package manager placed an npm package on disk."""

from __future__ import annotations

from pathlib import Path
from typing import List

from .constants import BUN_STORE_DIR, MODULES_DIR


def resolve_install_locations(root: Path, package: str) -> List[Path]:
    """Return every install directory of ``package`` under ``root/node_modules``.

    Two layouts are recognised:

    * the hoisted layout, ``node_modules/<package>``;
    * Bun's isolated store, ``node_modules/.bun/<name>@<version>/node_modules/<package>``,
      where scoped names are flattened (``@scope/pkg`` becomes ``@scope+pkg``).

    The result is sorted and may be empty.
    """
    modules_root = Path(root) / MODULES_DIR
    locations: set[Path] = set()

    direct = modules_root / package
    if direct.is_dir():
        locations.add(direct)

    store = modules_root / BUN_STORE_DIR
    if store.is_dir():
        flat_name = package.replace("/", "+")
        for entry in store.glob(f"{flat_name}@*"):
            candidate = entry / MODULES_DIR / package
            if candidate.is_dir():
                locations.add(candidate)

    return sorted(locations)


def default_install_location(root: Path, package: str) -> Path:
    """Return the canonical hoisted location used when nothing is installed."""
    return Path(root) / MODULES_DIR / package


__all__ = ["default_install_location", "resolve_install_locations"]
