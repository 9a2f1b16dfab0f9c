# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Git-based discovery of files to feed through helper chains."""

from __future__ import annotations

from pathlib import Path

from .submodule import GitRunner, default_git_runner

STAGED_FILES_COMMAND = ("git", "diff", "--name-only", "--cached", "--diff-filter=ACM")


def staged_files(root: Path, *, runner: GitRunner | None = None) -> list[Path]:
    """Return added, copied or modified staged files under ``root``.

    Paths are resolved, filtered to files that still exist and sorted. A failing
    git invocation yields an empty list.
    """

    run = runner or default_git_runner
    files: set[Path] = set()
    for raw in run(list(STAGED_FILES_COMMAND), root):
        stripped = raw.strip()
        if not stripped:
            continue
        candidate = (root / stripped).resolve()
        if candidate.is_file():
            files.add(candidate)
    return sorted(files)


__all__ = ["STAGED_FILES_COMMAND", "staged_files"]
