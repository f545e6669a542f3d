"""Tests for nextpack.installs."""

from __future__ import annotations

from pathlib import Path

from nextpack.installs import default_install_location, resolve_install_locations


def test_resolves_hoisted_install(tmp_path: Path) -> None:
    (tmp_path / "node_modules" / "critters").mkdir(parents=True)

    assert resolve_install_locations(tmp_path, "critters") == [
        tmp_path / "node_modules" / "critters"
    ]


def test_resolves_bun_store_installs_with_scoped_names(tmp_path: Path) -> None:
    store = tmp_path / "node_modules" / ".bun"
    first = store / "@opentelemetry+api@1.9.0" / "node_modules" / "@opentelemetry" / "api"
    second = store / "@opentelemetry+api@1.8.0" / "node_modules" / "@opentelemetry" / "api"
    first.mkdir(parents=True)
    second.mkdir(parents=True)
    (store / "@opentelemetry+api-extra@1.0.0" / "node_modules" / "@opentelemetry" / "api").mkdir(
        parents=True
    )

    assert resolve_install_locations(tmp_path, "@opentelemetry/api") == sorted([first, second])


def test_combines_hoisted_and_store_installs(tmp_path: Path) -> None:
    hoisted = tmp_path / "node_modules" / "next"
    stored = tmp_path / "node_modules" / ".bun" / "next@16.0.0" / "node_modules" / "next"
    hoisted.mkdir(parents=True)
    stored.mkdir(parents=True)

    assert resolve_install_locations(tmp_path, "next") == sorted([hoisted, stored])


def test_missing_package_resolves_to_nothing(tmp_path: Path) -> None:
    assert resolve_install_locations(tmp_path, "next") == []
    assert default_install_location(tmp_path, "next") == tmp_path / "node_modules" / "next"
