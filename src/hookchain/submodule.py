# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Detect whether the hookchain repository is mounted as a git submodule."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .logging import ConsoleLogger
from .process import CommandOptions, SubprocessExecutionError, run_command

GitRunner = Callable[[Sequence[str], Path], list[str]]

_SUBMODULE_PATH_PATTERN = r"^submodule\..*\.path$"


@dataclass(frozen=True, slots=True)
class SubmoduleContext:
    """Answer to "is this repository nested inside a parent repository?".

    Attributes:
        repo_root: Top-level directory of this repository, ``None`` outside git.
        is_submodule: ``True`` when a parent repository registers this one.
        mount_path: Path of this repository relative to the parent's top level.
        parent_root: Top-level directory of the parent repository.
    """

    repo_root: Path | None
    is_submodule: bool = False
    mount_path: Path | None = None
    parent_root: Path | None = None

    @classmethod
    def standalone(cls, repo_root: Path | None) -> SubmoduleContext:
        """Return the context of a repository that no parent registers.

        Args:
            repo_root: Top-level directory of the repository, ``None`` outside git.

        Returns:
            SubmoduleContext: A context with ``is_submodule`` set to ``False``.
        """

        return cls(repo_root=repo_root)


def default_git_runner(cmd: Sequence[str], cwd: Path) -> list[str]:
    """Execute ``cmd`` in ``cwd`` and return its stdout lines.

    Args:
        cmd: Git command and arguments.
        cwd: Directory the command runs in.

    Returns:
        list[str]: Output lines, or ``[]`` when git is missing or exits nonzero.
    """

    try:
        cp = run_command(
            cmd,
            options=CommandOptions(cwd=cwd, capture_output=True, errors="replace", discard_stdin=True),
        )
    except (OSError, SubprocessExecutionError):
        return []
    return (cp.stdout or "").splitlines()


class SubmoduleDetector:
    """Compute the :class:`SubmoduleContext` of a repository once.

    Every failure along the way (git missing, no parent repository, a failing
    inspection command) means "not a submodule"; nothing here is fatal.
    """

    def __init__(
        self,
        start: Path,
        *,
        runner: GitRunner | None = None,
        logger: ConsoleLogger | None = None,
    ) -> None:
        self._start = start
        self._runner = runner or default_git_runner
        self._logger = logger
        self._context: SubmoduleContext | None = None

    def detect(self) -> SubmoduleContext:
        """Return the context, inspecting git only on the first call."""

        if self._context is None:
            self._context = self._inspect()
            if self._logger is not None:
                self._logger.debug(
                    f"submodule={self._context.is_submodule} mount_path={self._context.mount_path or '-'}",
                )
        return self._context

    def is_submodule(self) -> bool:
        return self.detect().is_submodule

    def _toplevel(self, directory: Path) -> Path | None:
        if not directory.is_dir():
            return None
        lines = self._runner(["git", "rev-parse", "--show-toplevel"], directory)
        if not lines or not lines[0].strip():
            return None
        return Path(lines[0].strip()).resolve()

    def _inspect(self) -> SubmoduleContext:
        repo_root = self._toplevel(self._start)
        if repo_root is None:
            return SubmoduleContext.standalone(None)
        parent_root = self._toplevel(repo_root.parent)
        if parent_root is None:
            return SubmoduleContext.standalone(repo_root)
        for mount in self._registered_paths(parent_root):
            candidate = self._toplevel(parent_root / mount)
            if candidate is not None and candidate == repo_root:
                return SubmoduleContext(
                    repo_root=repo_root,
                    is_submodule=True,
                    mount_path=Path(mount),
                    parent_root=parent_root,
                )
        return SubmoduleContext.standalone(repo_root)

    def _registered_paths(self, parent_root: Path) -> list[str]:
        lines = self._runner(
            ["git", "config", "--file", ".gitmodules", "--get-regexp", _SUBMODULE_PATH_PATTERN],
            parent_root,
        )
        paths: list[str] = []
        for raw in lines:
            parts = raw.strip().split(maxsplit=1)
            if len(parts) == 2:
                paths.append(parts[1])
        return paths


__all__ = ["GitRunner", "SubmoduleContext", "SubmoduleDetector", "default_git_runner"]
