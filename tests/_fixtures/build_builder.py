"""Helper utilities for constructing temporary Next.js build trees in tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Mapping

SERVER_JS = 'const nextConfig = {"env":{}}\nprocess.exit(0);\n'
NEXT_PACKAGE_JSON = json.dumps({"name": "next", "version": "16.0.0"})
REQUIRE_HOOK_JS = "module.exports = {};"


class BuildBuilder:
    """Writes a project with a ``.next/standalone`` tree into a throwaway directory."""

    def __init__(self, tmp_path: Path, name: str = "project") -> None:
        self.root = tmp_path / name
        self.root.mkdir()

    @property
    def dist_dir(self) -> Path:
        return self.root / ".next"

    @property
    def standalone_dir(self) -> Path:
        return self.dist_dir / "standalone"

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries relative to the project root."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def scaffold(
        self,
        server_dir: str = "",
        *,
        asset_prefix: str = "",
        with_context: bool = True,
    ) -> Path:
        """Write a minimal standalone build whose server lives at ``server_dir``."""
        prefix = f".next/standalone/{server_dir}/" if server_dir else ".next/standalone/"
        files = {
            ".next/static/chunks/app.js": "// static",
            f"{prefix}server.js": SERVER_JS,
            f"{prefix}.next/BUILD_ID": "test-build-id",
            f"{prefix}.next/server/chunks/ssr.js": "// no externals",
            ".next/standalone/node_modules/next/package.json": NEXT_PACKAGE_JSON,
            ".next/standalone/node_modules/next/dist/server/require-hook.js": REQUIRE_HOOK_JS,
            "public/favicon.ico": "icon",
        }
        if with_context:
            files[".next/bun-compile-ctx.json"] = json.dumps(
                {"distDir": "", "projectDir": "", "assetPrefix": asset_prefix}
            )
        self.write(files)
        return self.standalone_dir / server_dir if server_dir else self.standalone_dir


__all__ = ["BuildBuilder", "NEXT_PACKAGE_JSON", "REQUIRE_HOOK_JS", "SERVER_JS"]
