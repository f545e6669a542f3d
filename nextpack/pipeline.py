"""Pipeline orchestration for generate/build/context flows."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .compiler import compile_binary
from .config import NextpackConfig, load_config, write_build_context
from .constants import BUILD_META_DIR, CONTEXT_FILENAME, ENTRY_FILENAME
from .generator import generate_entry_point
from .logging import get_logger
from .models import BuildContext


@dataclass
class BuildOutcome:
    """Result of a full generate-and-compile run."""

    server_root: Path
    binary: Path


class Packager:
    """Coordinates entry-point generation and compilation for one Next.js project."""

    def __init__(self, project_dir: str | Path = ".") -> None:
        self.project_dir = Path(project_dir).expanduser().resolve()
        self.dist_dir = self.project_dir / BUILD_META_DIR
        self.standalone_dir = self.dist_dir / "standalone"
        self.logger = get_logger("pipeline")

    def run_generate(self) -> Path:
        """Generate the asset registry and entry point; return the server root."""
        if not self.standalone_dir.is_dir():
            raise FileNotFoundError(
                f"No standalone output found at {self.standalone_dir}. "
                'Run "next build" first with output: "standalone" in next.config.'
            )
        if (self.dist_dir / CONTEXT_FILENAME).exists():
            self.logger.info("Using build context from %s", self.dist_dir)

        self.logger.info("Generating entry point for %s", self.standalone_dir)
        return generate_entry_point(self.standalone_dir, self.dist_dir, self.project_dir)

    def run_build(
        self,
        *,
        outfile: Optional[Path] = None,
        extra_args: Sequence[str] = (),
        config: NextpackConfig | None = None,
    ) -> BuildOutcome:
        """Generate, then compile ``server-entry.js`` into a single binary."""
        config = config or load_config(self.project_dir)
        server_root = self.run_generate()

        compile_config = config.compile
        target = outfile or compile_config.outfile or (self.project_dir / "server")
        binary = compile_binary(
            server_root / ENTRY_FILENAME,
            Path(target).expanduser().resolve(),
            extra_args=[*compile_config.extra_args, *extra_args],
            executable=compile_config.executable,
            minify=compile_config.minify,
            bytecode=compile_config.bytecode,
            sourcemap=compile_config.sourcemap,
        )
        return BuildOutcome(server_root=server_root, binary=binary)

    def record_context(self, *, asset_prefix: str | None = None) -> Path:
        """Record the build context the way the Next.js build hook does."""
        context = BuildContext(
            dist_dir=str(self.dist_dir),
            project_dir=str(self.project_dir),
            asset_prefix=asset_prefix or "",
        )
        path = write_build_context(self.dist_dir, context)
        self.logger.info("Wrote build context to %s", path)
        return path


__all__ = ["BuildOutcome", "Packager"]
