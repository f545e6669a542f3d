"""Tests for nextpack.walker."""

from __future__ import annotations

from pathlib import Path

from nextpack.walker import walk


def _write(path: Path, content: str = "x") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_walk_returns_sorted_relative_paths(tmp_path: Path) -> None:
    _write(tmp_path / "b.txt")
    _write(tmp_path / "a" / "z.js")
    _write(tmp_path / "a" / "nested" / "c.css")

    refs = walk(tmp_path)

    assert [ref.relative_path for ref in refs] == ["a/nested/c.css", "a/z.js", "b.txt"]
    assert refs[0].absolute_path == tmp_path / "a" / "nested" / "c.css"


def test_walk_missing_directory_yields_nothing(tmp_path: Path) -> None:
    assert walk(tmp_path / "public") == []


def test_walk_is_stable_across_runs(tmp_path: Path) -> None:
    for name in ("c", "a", "b"):
        _write(tmp_path / name / "index.js")

    assert walk(tmp_path) == walk(tmp_path)
