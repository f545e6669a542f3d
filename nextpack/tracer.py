"""Trace ``next/...`` modules that server chunks require at runtime.

Turbopack server chunks sometimes call ``require("next/dist/...")`` directly.
Bun's bundler never sees those paths, so the files they reach (and everything
those files require in turn) have to be embedded as opaque assets and restored
into ``node_modules`` when the binary starts.
"""

from __future__ import annotations

import posixpath
import re
import shutil
from pathlib import Path
from typing import Iterable, List, Optional, Set

from .constants import (
    BUILD_META_DIR,
    CHUNKS_SUBDIR,
    EXTERNAL_DIR,
    HOST_PACKAGE,
    MODULE_SUFFIXES,
    MODULES_DIR,
    TRACED_NAMESPACE,
)
from .logging import get_logger
from .walker import walk

logger = get_logger("tracer")

_REQUIRE_RE = re.compile(r"""\brequire\(\s*(["'])([^"'\n]+)\1\s*\)""")


def find_requires(source: str) -> List[str]:
    """Return every string literal passed to ``require(...)`` in ``source``."""
    return [match.group(2) for match in _REQUIRE_RE.finditer(source)]


def collect_seeds(server_root: Path) -> Set[str]:
    """Scan the server chunks for ``require("next/...")`` calls."""
    seeds: Set[str] = set()
    chunks_dir = Path(server_root) / BUILD_META_DIR / CHUNKS_SUBDIR
    for ref in walk(chunks_dir):
        source = _read_source(ref.absolute_path)
        if source is None:
            continue
        for specifier in find_requires(source):
            if specifier.startswith(TRACED_NAMESPACE):
                seeds.add(specifier)
    return seeds


def trace_external_modules(standalone_root: Path, server_root: Path) -> Set[str]:
    """Return the closed set of ``node_modules``-relative files the chunks depend on."""
    modules_root = Path(standalone_root) / MODULES_DIR
    seeds = collect_seeds(server_root)
    if not seeds:
        return set()

    visited: Set[str] = set()
    pending = [_normalize(seed, modules_root) for seed in sorted(seeds)]
    while pending:
        specifier = pending.pop()
        resolved = _resolve(specifier, modules_root, visited)
        if resolved is None or resolved in visited:
            continue
        path = modules_root / resolved
        if not path.is_file():
            continue
        visited.add(resolved)

        source = _read_source(path)
        if source is None:
            continue
        for request in find_requires(source):
            dependency = _dependency_specifier(resolved, request)
            if dependency is None:
                continue
            dependency = _normalize(dependency, modules_root)
            if dependency not in visited:
                pending.append(dependency)

    logger.info("Traced %d external module files from %d seed(s)", len(visited), len(seeds))
    return visited


def mirror_external_modules(
    standalone_root: Path, server_root: Path, specifiers: Iterable[str]
) -> List[Path]:
    """Copy traced files into ``<server_root>/.next/__external`` and return the copies.

    The package manifest of ``next`` travels with them so package-relative
    lookups keep working once the files are restored.
    """
    modules_root = Path(standalone_root) / MODULES_DIR
    mirror_root = Path(server_root) / BUILD_META_DIR / EXTERNAL_DIR

    wanted = set(specifiers)
    if not wanted:
        return []
    manifest = f"{HOST_PACKAGE}/package.json"
    if (modules_root / manifest).is_file():
        wanted.add(manifest)

    copied: List[Path] = []
    for specifier in sorted(wanted):
        source = modules_root / specifier
        if not source.is_file():
            continue
        target = mirror_root / specifier
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)
        copied.append(target)

    logger.info("Mirrored %d external modules into %s", len(copied), mirror_root)
    return copied


def _dependency_specifier(current: str, request: str) -> Optional[str]:
    if request in (".", "..") or request.startswith(("./", "../")):
        joined = posixpath.normpath(posixpath.join(posixpath.dirname(current), request))
        if joined.startswith("../") or joined in ("..", "."):
            return None
        return joined
    if request.startswith(TRACED_NAMESPACE):
        return request
    # Third-party and built-in modules are bundled by Bun or provided by the runtime.
    return None


def _normalize(specifier: str, modules_root: Path) -> str:
    specifier = specifier.rstrip("/")
    if specifier.endswith(MODULE_SUFFIXES):
        return specifier
    # A file wins over a directory of the same name, as in Node resolution.
    with_suffix = f"{specifier}.js"
    if not (modules_root / with_suffix).is_file() and (modules_root / specifier).is_dir():
        return specifier
    return with_suffix


def _resolve(specifier: str, modules_root: Path, visited: Set[str]) -> Optional[str]:
    """Map a directory specifier onto its ``index.js``, recording ``package.json``."""
    path = modules_root / specifier
    if not path.is_dir():
        return specifier

    manifest = f"{specifier}/package.json"
    if (modules_root / manifest).is_file():
        visited.add(manifest)
    return f"{specifier}/index.js"


def _read_source(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.debug("Skipping unreadable module %s: %s", path, exc)
        return None


__all__ = [
    "collect_seeds",
    "find_requires",
    "mirror_external_modules",
    "trace_external_modules",
]
