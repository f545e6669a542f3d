"""Tests for nextpack.pipeline."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from nextpack.pipeline import Packager
from tests._fixtures.build_builder import BuildBuilder


def test_run_generate_requires_standalone_output(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="next build"):
        Packager(tmp_path).run_generate()


def test_run_generate_returns_server_root(build_builder: BuildBuilder) -> None:
    expected = build_builder.scaffold("apps/web")

    assert Packager(build_builder.root).run_generate() == expected.resolve()


def test_run_build_compiles_generated_entry(monkeypatch, build_builder: BuildBuilder) -> None:
    build_builder.scaffold()
    build_builder.write({".nextpack.yml": "compile:\n  extra_args: [\"--target=bun-linux-x64\"]\n"})
    calls: list[dict[str, object]] = []

    def fake_compile(entry_file, output_file, **kwargs):  # type: ignore[no-untyped-def]
        calls.append({"entry": entry_file, "output": output_file, **kwargs})
        return output_file

    monkeypatch.setattr("nextpack.pipeline.compile_binary", fake_compile)

    outcome = Packager(build_builder.root).run_build(extra_args=["--windows-hide-console"])

    root = build_builder.root.resolve()
    assert outcome.binary == root / "server"
    assert outcome.server_root == root / ".next" / "standalone"
    assert calls[0]["entry"] == root / ".next" / "standalone" / "server-entry.js"
    assert calls[0]["extra_args"] == ["--target=bun-linux-x64", "--windows-hide-console"]
    assert calls[0]["executable"] == "bun"


def test_run_build_prefers_explicit_outfile(monkeypatch, build_builder: BuildBuilder) -> None:
    build_builder.scaffold()
    build_builder.write({".nextpack.yml": "compile:\n  outfile: build/app\n"})
    monkeypatch.setattr(
        "nextpack.pipeline.compile_binary", lambda entry, output, **kwargs: output
    )

    configured = Packager(build_builder.root).run_build()
    explicit = Packager(build_builder.root).run_build(outfile=build_builder.root / "bin" / "srv")

    assert configured.binary == build_builder.root.resolve() / "build" / "app"
    assert explicit.binary == (build_builder.root / "bin" / "srv").resolve()


def test_record_context_writes_asset_prefix(tmp_path: Path) -> None:
    path = Packager(tmp_path).record_context(asset_prefix="https://cdn.example.com")

    assert path == tmp_path.resolve() / ".next" / "bun-compile-ctx.json"
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["assetPrefix"] == "https://cdn.example.com"
    assert payload["projectDir"] == str(tmp_path.resolve())
