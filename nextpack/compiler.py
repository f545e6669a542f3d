"""Adapter for ``bun build --compile``."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Sequence

from .logging import get_logger

logger = get_logger("compiler")

_DEFINES: tuple[str, ...] = (
    "process.env.TURBOPACK=1",
    "process.env.__NEXT_EXPERIMENTAL_REACT=",
    'process.env.NEXT_RUNTIME="nodejs"',
)


class CompileError(RuntimeError):
    """Raised when the Bun compiler is missing or exits with an error."""


def build_compile_args(
    entry_file: Path,
    output_file: Path,
    *,
    extra_args: Sequence[str] = (),
    executable: str = "bun",
    minify: bool = True,
    bytecode: bool = True,
    sourcemap: bool = True,
) -> List[str]:
    """Return the argv used to compile ``entry_file`` into a standalone binary."""
    args = [executable, "build", str(entry_file), "--production", "--compile"]
    if minify:
        args.append("--minify")
    if bytecode:
        args.append("--bytecode")
    if sourcemap:
        args.append("--sourcemap")
    for define in _DEFINES:
        args.extend(["--define", define])
    args.extend(["--outfile", str(output_file)])
    args.extend(extra_args)
    return args


def compile_binary(
    entry_file: Path,
    output_file: Path,
    *,
    extra_args: Sequence[str] = (),
    executable: str = "bun",
    minify: bool = True,
    bytecode: bool = True,
    sourcemap: bool = True,
) -> Path:
    """Compile the generated entry point and return the binary path."""
    args = build_compile_args(
        entry_file,
        output_file,
        extra_args=extra_args,
        executable=executable,
        minify=minify,
        bytecode=bytecode,
        sourcemap=sourcemap,
    )
    logger.info("Compiling to %s...", output_file)
    logger.debug("Running %s", " ".join(args))
    try:
        subprocess.run(args, check=True)
    except FileNotFoundError as exc:
        raise CompileError(f"Unable to locate Bun executable '{executable}'.") from exc
    except subprocess.CalledProcessError as exc:
        raise CompileError(f"bun build exited with status {exc.returncode}") from exc
    logger.info("Done: %s", output_file)
    return Path(output_file)


__all__ = ["CompileError", "build_compile_args", "compile_binary"]
