# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for overlay root lookup."""

from __future__ import annotations

from pathlib import Path

import pytest

from hookchain.overlay import OverlayResolver, OverlayRoot, OverlayRoots
from hookchain.settings import Settings
from hookchain.submodule import SubmoduleContext


def test_resolve_prefers_local_then_main_then_submodule(overlay_roots: OverlayRoots, make_script) -> None:
    for base in (overlay_roots.local, overlay_roots.main, overlay_roots.submodule):
        make_script(base / "lint" / "js" / "jslint", "exit 0")
    resolver = OverlayResolver(overlay_roots)

    assert resolver.resolve("lint/js/jslint").root is OverlayRoot.LOCAL

    (overlay_roots.local / "lint" / "js" / "jslint").unlink()
    assert resolver.resolve("lint/js/jslint").root is OverlayRoot.MAIN

    (overlay_roots.main / "lint" / "js" / "jslint").unlink()
    script = resolver.resolve("lint/js/jslint")
    assert script is not None
    assert script.root is OverlayRoot.SUBMODULE
    assert script.path == overlay_roots.submodule / "lint" / "js" / "jslint"


def test_resolve_skips_non_executable_entries(overlay_roots: OverlayRoots, make_script) -> None:
    make_script(overlay_roots.local / "tool", "exit 0", executable=False)
    make_script(overlay_roots.main / "tool", "exit 0")
    (overlay_roots.submodule / "dir-tool").mkdir()

    resolver = OverlayResolver(overlay_roots)

    assert resolver.resolve("tool").root is OverlayRoot.MAIN
    assert resolver.resolve("dir-tool") is None
    assert resolver.resolve("missing") is None


def test_resolve_accepts_symlinks_to_executables(overlay_roots: OverlayRoots, make_script) -> None:
    target = make_script(overlay_roots.main / "real", "exit 0")
    (overlay_roots.local / "alias").symlink_to(target)

    script = OverlayResolver(overlay_roots).resolve("alias")

    assert script is not None
    assert script.root is OverlayRoot.LOCAL


def test_submodule_root_ignored_when_absent(tmp_path: Path, make_script) -> None:
    roots = OverlayRoots(local=tmp_path / "local", main=tmp_path / "main")
    make_script(tmp_path / "submodule" / "tool", "exit 0")

    assert OverlayResolver(roots).resolve("tool") is None
    assert [tier for tier, _ in roots.ordered()] == [OverlayRoot.LOCAL, OverlayRoot.MAIN]


def test_candidates_lists_every_match(overlay_roots: OverlayRoots, make_script) -> None:
    make_script(overlay_roots.local / "tool", "exit 0")
    make_script(overlay_roots.submodule / "tool", "exit 0")

    tiers = [script.root for script in OverlayResolver(overlay_roots).candidates("tool")]

    assert tiers == [OverlayRoot.LOCAL, OverlayRoot.SUBMODULE]


def test_paths_escaping_the_root_are_rejected(overlay_roots: OverlayRoots) -> None:
    resolver = OverlayResolver(overlay_roots)
    with pytest.raises(ValueError):
        resolver.resolve("../outside")
    with pytest.raises(ValueError):
        resolver.resolve("/etc/passwd")


def test_layered_files_orders_lowest_priority_first(overlay_roots: OverlayRoots) -> None:
    for base in (overlay_roots.local, overlay_roots.submodule):
        (base / "hookchain.toml").write_text("", encoding="utf-8")

    files = OverlayResolver(overlay_roots).layered_files("hookchain.toml")

    assert files == [overlay_roots.submodule / "hookchain.toml", overlay_roots.local / "hookchain.toml"]


def test_roots_from_standalone_context(tmp_path: Path) -> None:
    settings = Settings(root=tmp_path)
    roots = OverlayRoots.from_context(settings, SubmoduleContext.standalone(tmp_path))

    assert roots.main == tmp_path / ".hookchain"
    assert roots.local == tmp_path / ".hookchain" / "local"
    assert roots.submodule is None


def test_roots_from_submodule_context(tmp_path: Path) -> None:
    parent = tmp_path / "project"
    nested = parent / "tools" / "hookchain"
    context = SubmoduleContext(
        repo_root=nested,
        is_submodule=True,
        mount_path=Path("tools/hookchain"),
        parent_root=parent,
    )

    roots = OverlayRoots.from_context(Settings(root=nested, local_dir="override"), context)

    assert roots.main == parent / ".hookchain"
    assert roots.local == parent / ".hookchain" / "override"
    assert roots.submodule == nested
