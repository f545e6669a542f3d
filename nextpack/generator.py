"""Generate the embedded-asset registry and bootstrap entry point."""

from __future__ import annotations

import hashlib
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List

from jinja2 import Environment, FileSystemLoader

from .config import load_build_context
from .constants import (
    BUILD_META_DIR,
    ENTRY_FILENAME,
    REGISTRY_FILENAME,
    RUNTIME_URL_PREFIX,
    SERVER_MARKER,
    STATIC_URL_PREFIX,
)
from .locator import locate_server_root
from .logging import get_logger
from .models import PUBLIC_ASSET, RUNTIME_ASSET, STATIC_ASSET, AssetEntry, FileRef
from .patches import patch_require_resolution
from .stubs import synthesize_stubs
from .tracer import mirror_external_modules, trace_external_modules
from .walker import walk

logger = get_logger("generator")

_NEXT_CONFIG_RE = re.compile(r"const nextConfig = (\{[\s\S]*?\})\n")
_UNSAFE_CHARS_RE = re.compile(r"[^a-zA-Z0-9]")
_TEMPLATES_DIR = Path(__file__).with_name("templates")


class ConfigExtractionError(RuntimeError):
    """Raised when ``server.js`` does not contain the inlined ``nextConfig`` literal."""


@dataclass
class DiscoveredAssets:
    """The three asset groups found in a standalone build."""

    static: List[AssetEntry]
    public: List[AssetEntry]
    runtime: List[AssetEntry]


def generate_entry_point(standalone_dir: Path, dist_dir: Path, project_dir: Path) -> Path:
    """Write ``assets.generated.js`` and ``server-entry.js`` and return the server root.

    Both files land in the server root, which differs from ``standalone_dir`` for
    monorepo builds. Package installs always live under ``standalone_dir``.
    """
    standalone_dir = Path(standalone_dir)
    server_root = locate_server_root(standalone_dir)
    next_config = extract_next_config((server_root / SERVER_MARKER).read_text(encoding="utf-8"))

    synthesize_stubs(standalone_dir)
    patch_require_resolution(standalone_dir)

    external = trace_external_modules(standalone_dir, server_root)
    mirror_external_modules(standalone_dir, server_root, external)

    discovered = discover_assets(server_root, Path(dist_dir), Path(project_dir))
    context = load_build_context(Path(dist_dir))
    if context is not None and context.asset_prefix:
        logger.info(
            "assetPrefix detected, skipping %d static assets (served from CDN)",
            len(discovered.static),
        )
        candidates = discovered.public + discovered.runtime
    else:
        candidates = discovered.static + discovered.public + discovered.runtime

    assets = dedupe_assets(candidates)
    logger.info(
        "Embedding %d assets (%d static + %d public + %d runtime)",
        len(assets),
        len(discovered.static),
        len(discovered.public),
        len(discovered.runtime),
    )

    var_names = assign_var_names(asset.url_path for asset in assets)
    env = _create_env()
    registry = env.get_template("assets.generated.js.j2").render(
        assets=[
            {
                "var_name": var_names[asset.url_path],
                "import_path": _import_path(asset.file.absolute_path, server_root),
                "url_path": asset.url_path,
            }
            for asset in assets
        ],
    )
    entry = env.get_template("server-entry.js.j2").render(
        next_config=next_config,
        extractions=[[asset.url_path, asset.disk_path] for asset in assets],
        registry_module=f"./{REGISTRY_FILENAME}",
    )

    (server_root / REGISTRY_FILENAME).write_text(registry, encoding="utf-8")
    (server_root / ENTRY_FILENAME).write_text(entry, encoding="utf-8")
    logger.debug("Wrote %s and %s in %s", REGISTRY_FILENAME, ENTRY_FILENAME, server_root)
    return server_root


def discover_assets(server_root: Path, dist_dir: Path, project_dir: Path) -> DiscoveredAssets:
    """Walk static, public and runtime directories and map each file to its URL path."""
    static = [
        AssetEntry(
            file=ref,
            url_path=f"{STATIC_URL_PREFIX}{ref.relative_path}",
            kind=STATIC_ASSET,
        )
        for ref in walk(dist_dir / "static")
    ]
    public = [
        AssetEntry(file=ref, url_path=f"/{ref.relative_path}", kind=PUBLIC_ASSET)
        for ref in walk(project_dir / "public")
    ]
    runtime = [
        AssetEntry(
            file=ref,
            url_path=f"{RUNTIME_URL_PREFIX}{BUILD_META_DIR}/{ref.relative_path}",
            kind=RUNTIME_ASSET,
        )
        for ref in walk(server_root / BUILD_META_DIR)
    ]
    return DiscoveredAssets(static=static, public=public, runtime=runtime)


def dedupe_assets(assets: Iterable[AssetEntry]) -> List[AssetEntry]:
    """Keep the first asset for each URL path and warn about the rest."""
    seen: Dict[str, FileRef] = {}
    unique: List[AssetEntry] = []
    for asset in assets:
        existing = seen.get(asset.url_path)
        if existing is not None:
            logger.warning(
                "Duplicate asset URL %s: keeping %s, ignoring %s",
                asset.url_path,
                existing.absolute_path,
                asset.file.absolute_path,
            )
            continue
        seen[asset.url_path] = asset.file
        unique.append(asset)
    return unique


def to_var_name(url_path: str) -> str:
    """Return a readable JS identifier for ``url_path`` with a short hash suffix."""
    digest = hashlib.md5(url_path.encode("utf-8")).hexdigest()[:6]
    safe = _UNSAFE_CHARS_RE.sub("_", url_path)[:40]
    return f"asset_{safe}_{digest}"


def assign_var_names(url_paths: Iterable[str]) -> Dict[str, str]:
    """Map each URL path to a unique identifier."""
    names: Dict[str, str] = {}
    used: set[str] = set()
    for url_path in url_paths:
        base = to_var_name(url_path)
        name = base
        counter = 2
        while name in used:
            name = f"{base}_{counter}"
            counter += 1
        used.add(name)
        names[url_path] = name
    return names


def extract_next_config(server_source: str) -> str:
    """Return the ``nextConfig`` object literal inlined in standalone ``server.js``."""
    match = _NEXT_CONFIG_RE.search(server_source)
    if match is None:
        raise ConfigExtractionError(
            f"Could not extract nextConfig from standalone {SERVER_MARKER}; "
            "the Next.js output format may have changed"
        )
    return match.group(1)


def _import_path(path: Path, server_root: Path) -> str:
    relative = Path(os.path.relpath(path, server_root)).as_posix()
    if relative.startswith("../"):
        return relative
    return f"./{relative}"


def _create_env(templates_dir: Path | None = None) -> Environment:
    loader = FileSystemLoader(str(templates_dir or _TEMPLATES_DIR))
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


__all__ = [
    "ConfigExtractionError",
    "DiscoveredAssets",
    "assign_var_names",
    "dedupe_assets",
    "discover_assets",
    "extract_next_config",
    "generate_entry_point",
    "to_var_name",
]
