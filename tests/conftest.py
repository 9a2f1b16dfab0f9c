# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from hookchain.overlay import OverlayRoots

ScriptFactory = Callable[..., Path]


def write_script(path: Path, body: str, *, executable: bool = True) -> Path:
    """Write a ``/bin/sh`` script at ``path`` and optionally mark it executable."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    path.chmod(0o755 if executable else 0o644)
    return path


@pytest.fixture
def make_script() -> ScriptFactory:
    """Return :func:`write_script` for tests that build overlay trees."""

    return write_script


@pytest.fixture
def overlay_roots(tmp_path: Path) -> OverlayRoots:
    """Return overlay roots with all three tiers under ``tmp_path``."""

    roots = OverlayRoots(
        local=tmp_path / "local",
        main=tmp_path / "main",
        submodule=tmp_path / "submodule",
    )
    for _tier, path in roots.ordered():
        path.mkdir(parents=True, exist_ok=True)
    return roots


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Remove hookchain variables from the environment and return a copy of it."""

    for key in list(os.environ):
        if key.startswith("HOOKCHAIN_"):
            monkeypatch.delenv(key, raising=False)
    return dict(os.environ)
