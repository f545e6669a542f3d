"""Core data models shared across nextpack components."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .constants import BUILD_META_DIR, EXTERNAL_DIR, MODULES_DIR

STATIC_ASSET = "static"
PUBLIC_ASSET = "public"
RUNTIME_ASSET = "runtime"

_EXTERNAL_DISK_PREFIX = f"{EXTERNAL_DIR}/"


@dataclass(frozen=True)
class FileRef:
    """A discovered file and its POSIX path relative to the walked directory."""

    absolute_path: Path
    relative_path: str


@dataclass(frozen=True)
class AssetEntry:
    """A file embedded in the binary under a runtime-visible URL path.

    ``kind`` names the directory the file was discovered in, which decides
    where it is extracted; the URL alone is ambiguous once ``public/`` holds
    files under ``_next/static``.
    """

    file: FileRef
    url_path: str
    kind: str = PUBLIC_ASSET

    @property
    def disk_path(self) -> str:
        """Location under the server root where the asset is extracted at runtime."""
        relative = self.file.relative_path
        if self.kind == RUNTIME_ASSET:
            # Mirrored dependency files are restored into the install tree.
            if relative.startswith(_EXTERNAL_DISK_PREFIX):
                return f"{MODULES_DIR}/{relative[len(_EXTERNAL_DISK_PREFIX):]}"
            return f"{BUILD_META_DIR}/{relative}"
        if self.kind == STATIC_ASSET:
            return f"{BUILD_META_DIR}/static/{relative}"
        return f"public/{relative}"


@dataclass
class BuildContext:
    """Build settings recorded by the Next.js build hook."""

    dist_dir: Optional[str] = None
    project_dir: Optional[str] = None
    asset_prefix: Optional[str] = None
