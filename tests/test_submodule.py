# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for submodule context detection."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

import pytest

from hookchain.submodule import SubmoduleDetector, default_git_runner


class _FakeGit:
    """Answer git invocations from a table keyed by ``(command, cwd)``."""

    def __init__(self, answers: dict[tuple[tuple[str, ...], Path], list[str]]) -> None:
        self.answers = answers
        self.calls: list[tuple[tuple[str, ...], Path]] = []

    def __call__(self, cmd: Sequence[str], cwd: Path) -> list[str]:
        key = (tuple(cmd), cwd)
        self.calls.append(key)
        return self.answers.get(key, [])


TOPLEVEL = ("git", "rev-parse", "--show-toplevel")
MODULES = ("git", "config", "--file", ".gitmodules", "--get-regexp", r"^submodule\..*\.path$")


def _layout(tmp_path: Path) -> tuple[Path, Path]:
    parent = tmp_path / "project"
    nested = parent / "vendor" / "hooks"
    nested.mkdir(parents=True)
    return parent.resolve(), nested.resolve()


def test_detects_registered_submodule(tmp_path: Path) -> None:
    parent, nested = _layout(tmp_path)
    git = _FakeGit(
        {
            (TOPLEVEL, nested): [str(nested)],
            (TOPLEVEL, nested.parent): [str(parent)],
            (MODULES, parent): ["submodule.other.path lib/other", "submodule.hooks.path vendor/hooks"],
        },
    )

    context = SubmoduleDetector(nested, runner=git).detect()

    assert context.is_submodule is True
    assert context.mount_path == Path("vendor/hooks")
    assert context.parent_root == parent
    assert context.repo_root == nested


def test_result_is_computed_once(tmp_path: Path) -> None:
    parent, nested = _layout(tmp_path)
    git = _FakeGit(
        {
            (TOPLEVEL, nested): [str(nested)],
            (TOPLEVEL, nested.parent): [str(parent)],
            (MODULES, parent): ["submodule.hooks.path vendor/hooks"],
        },
    )
    detector = SubmoduleDetector(nested, runner=git)

    first = detector.detect()
    calls_after_first = len(git.calls)
    assert detector.is_submodule() is True
    assert detector.detect() is first
    assert len(git.calls) == calls_after_first


def test_missing_parent_repository_means_standalone(tmp_path: Path) -> None:
    _parent, nested = _layout(tmp_path)
    git = _FakeGit({(TOPLEVEL, nested): [str(nested)]})

    context = SubmoduleDetector(nested, runner=git).detect()

    assert context.is_submodule is False
    assert context.repo_root == nested
    assert context.mount_path is None


def test_unregistered_nested_repository_is_not_a_submodule(tmp_path: Path) -> None:
    parent, nested = _layout(tmp_path)
    git = _FakeGit(
        {
            (TOPLEVEL, nested): [str(nested)],
            (TOPLEVEL, nested.parent): [str(parent)],
            (MODULES, parent): ["submodule.other.path lib/other"],
        },
    )

    assert SubmoduleDetector(nested, runner=git).detect().is_submodule is False


def test_outside_git_has_no_repo_root(tmp_path: Path) -> None:
    context = SubmoduleDetector(tmp_path, runner=_FakeGit({})).detect()

    assert context.repo_root is None
    assert context.is_submodule is False


def test_default_runner_treats_missing_git_as_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def _missing(*_args, **_kwargs):
        raise FileNotFoundError("Executable 'git' was not found on PATH")

    monkeypatch.setattr("hookchain.submodule.run_command", _missing)

    assert default_git_runner(["git", "status"], tmp_path) == []


def test_default_runner_treats_nonzero_exit_as_failure(tmp_path: Path) -> None:
    assert default_git_runner(["sh", "-c", "echo partial; exit 128"], tmp_path) == []
    assert default_git_runner(["sh", "-c", "echo top"], tmp_path) == ["top"]


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
def test_real_repository_is_standalone(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    repo.mkdir()
    subprocess.run(["git", "init", "-q", str(repo)], check=True)

    context = SubmoduleDetector(repo).detect()

    assert context.repo_root == repo.resolve()
    assert context.is_submodule is False
