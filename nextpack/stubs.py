"""Placeholder modules for imports Bun cannot resolve but production never reaches."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from .installs import default_install_location, resolve_install_locations
from .logging import get_logger

logger = get_logger("stubs")


@dataclass(frozen=True)
class ModuleStub:
    """A placeholder written at ``<install location>/<subpath>``."""

    package: str
    subpath: str
    content: str


# Dev-only server modules are guarded by the runtime `dev` option, and the
# optional dependencies are loaded inside try/catch or conditional requires.
MODULE_STUBS: tuple[ModuleStub, ...] = (
    ModuleStub(
        package="next",
        subpath="dist/server/dev/next-dev-server.js",
        content="module.exports = { default: null };",
    ),
    ModuleStub(
        package="next",
        subpath="dist/server/lib/router-utils/setup-dev-bundler.js",
        content="module.exports = {};",
    ),
    ModuleStub(
        package="@opentelemetry/api",
        subpath="index.js",
        content="throw new Error('not installed');",
    ),
    ModuleStub(
        package="critters",
        subpath="index.js",
        content="module.exports = {};",
    ),
)


def synthesize_stubs(root: Path, stubs: Sequence[ModuleStub] = MODULE_STUBS) -> None:
    """Write each stub wherever its package is installed, never replacing a real file.

    When a package is not installed at all the stub goes to the hoisted
    ``node_modules/<package>`` location. If a user installs the real dependency
    later, that copy wins and gets embedded instead.
    """
    created: List[Path] = []
    for stub in stubs:
        locations = resolve_install_locations(root, stub.package)
        if not locations:
            locations = [default_install_location(root, stub.package)]

        for location in locations:
            target = location / stub.subpath
            if target.exists():
                continue
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(stub.content, encoding="utf-8")
            except OSError as exc:
                logger.warning("Could not write module stub %s: %s", target, exc)
                continue
            created.append(target)

    if created:
        logger.info("Created %d module stubs", len(created))
    for path in created:
        logger.debug("Stubbed %s", path)


__all__ = ["MODULE_STUBS", "ModuleStub", "synthesize_stubs"]
