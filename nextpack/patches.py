"""Version-guarded source patches for installed Next.js files."""

from __future__ import annotations

from pathlib import Path

from .constants import HOST_PACKAGE
from .installs import resolve_install_locations
from .logging import get_logger

logger = get_logger("patches")

REQUIRE_HOOK_SUBPATH = "dist/server/require-hook.js"

REQUIRE_HOOK_FRAGMENT = (
    "let resolve = process.env.NEXT_MINIMAL ? __non_webpack_require__.resolve : require.resolve;"
)

REQUIRE_HOOK_REPLACEMENT = (
    "let _resolve = process.env.NEXT_MINIMAL ? __non_webpack_require__.resolve : require.resolve;\n"
    "let resolve = (id) => { try { return _resolve(id); } catch { return ''; } };"
)


def apply_known_patch(path: Path, fragment: str, replacement: str) -> bool:
    """Replace ``fragment`` with ``replacement`` in ``path`` if the exact text is present.

    Returns ``False`` without touching the file when it is missing, unreadable,
    or does not contain the fragment (already patched or a different upstream
    version).
    """
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            content = handle.read()
    except (OSError, UnicodeDecodeError):
        return False

    if fragment not in content:
        return False

    try:
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content.replace(fragment, replacement, 1))
    except OSError as exc:
        logger.warning("Could not write patched %s: %s", path, exc)
        return False
    return True


def patch_require_resolution(root: Path) -> None:
    """Make ``require-hook.js`` tolerate ``require.resolve`` failures.

    Next.js eagerly resolves packages such as ``styled-jsx`` at startup, which
    throws in a compiled binary deployed without ``node_modules``.
    """
    patched = 0
    for location in resolve_install_locations(root, HOST_PACKAGE):
        hook_path = location / REQUIRE_HOOK_SUBPATH
        if apply_known_patch(hook_path, REQUIRE_HOOK_FRAGMENT, REQUIRE_HOOK_REPLACEMENT):
            patched += 1
            logger.debug("Patched %s", hook_path)
        else:
            logger.debug("No require-hook patch applied to %s", hook_path)

    if patched:
        logger.info("Patched require-hook.js in %d location(s) for compiled binary compatibility", patched)


__all__ = [
    "REQUIRE_HOOK_FRAGMENT",
    "REQUIRE_HOOK_REPLACEMENT",
    "apply_known_patch",
    "patch_require_resolution",
]
