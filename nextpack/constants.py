"""Fixed names and URL prefixes of the Next.js standalone layout."""

from __future__ import annotations

from typing import Tuple

SERVER_MARKER = "server.js"
MODULES_DIR = "node_modules"
BUN_STORE_DIR = ".bun"
BUILD_META_DIR = ".next"
CHUNKS_SUBDIR = "server/chunks"
EXTERNAL_DIR = "__external"

CONTEXT_FILENAME = "bun-compile-ctx.json"
CONFIG_FILENAME = ".nextpack.yml"
REGISTRY_FILENAME = "assets.generated.js"
ENTRY_FILENAME = "server-entry.js"

STATIC_URL_PREFIX = "/_next/static/"
RUNTIME_URL_PREFIX = "__runtime/"

HOST_PACKAGE = "next"
TRACED_NAMESPACE = "next/"

MODULE_SUFFIXES: Tuple[str, ...] = (".js", ".cjs", ".mjs", ".json", ".node")
