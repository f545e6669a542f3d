"""Tests for nextpack.locator."""

from __future__ import annotations

from pathlib import Path

import pytest

from nextpack.locator import ServerNotFoundError, locate_server_root


def _touch(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("// server", encoding="utf-8")


def test_flat_layout_returns_standalone_root(tmp_path: Path) -> None:
    _touch(tmp_path / "server.js")
    _touch(tmp_path / "apps" / "web" / "server.js")

    assert locate_server_root(tmp_path) == tmp_path


@pytest.mark.parametrize("nested", ["apps/web", "packages/apps/web", "a/b/c/d/e"])
def test_nested_layout_returns_nested_directory(tmp_path: Path, nested: str) -> None:
    _touch(tmp_path / nested / "server.js")
    _touch(tmp_path / "node_modules" / "next" / "package.json")

    assert locate_server_root(tmp_path) == tmp_path / nested


def test_node_modules_are_never_searched(tmp_path: Path) -> None:
    _touch(tmp_path / "node_modules" / "some-pkg" / "server.js")

    with pytest.raises(ServerNotFoundError, match="Could not find server.js"):
        locate_server_root(tmp_path)


def test_missing_server_raises_file_not_found(tmp_path: Path) -> None:
    _touch(tmp_path / ".next" / "BUILD_ID")

    with pytest.raises(FileNotFoundError):
        locate_server_root(tmp_path)
