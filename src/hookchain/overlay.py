# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Three-tier overlay lookup: local override, main repository, submodule."""

from __future__ import annotations

import os
import stat
from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path, PurePosixPath

from .settings import Settings
from .submodule import SubmoduleContext


class OverlayRoot(IntEnum):
    """Overlay tiers; lower values take priority."""

    LOCAL = 0
    MAIN = 1
    SUBMODULE = 2

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class OverlayRoots:
    """Absolute directories backing each overlay tier.

    ``submodule`` is only set when the submodule context is affirmative.
    """

    local: Path
    main: Path
    submodule: Path | None = None

    def ordered(self) -> list[tuple[OverlayRoot, Path]]:
        """Return the present roots in priority order."""

        roots = [(OverlayRoot.LOCAL, self.local), (OverlayRoot.MAIN, self.main)]
        if self.submodule is not None:
            roots.append((OverlayRoot.SUBMODULE, self.submodule))
        return roots

    @classmethod
    def from_context(cls, settings: Settings, context: SubmoduleContext) -> OverlayRoots:
        """Derive the roots from runtime settings and the submodule context.

        Outside a submodule the main root lives in this repository. When this
        repository is mounted in a parent project, the parent's hooks directory
        becomes the main root and this repository's top level backs the
        submodule tier.
        """

        if context.is_submodule and context.parent_root is not None and context.repo_root is not None:
            main = context.parent_root / settings.hooks_dir
            return cls(local=main / settings.local_dir, main=main, submodule=context.repo_root)
        base = context.repo_root or settings.root
        main = base / settings.hooks_dir
        return cls(local=main / settings.local_dir, main=main)


@dataclass(frozen=True, slots=True)
class ExecutableScript:
    """An executable located under one overlay root."""

    root: OverlayRoot
    relative_path: PurePosixPath
    path: Path

    @property
    def name(self) -> str:
        return self.path.name


def is_executable(path: Path) -> bool:
    """Return ``True`` for regular files, or symlinks to them, carrying an execute bit."""

    try:
        info = path.stat()
    except OSError:
        return False
    if not stat.S_ISREG(info.st_mode):
        return False
    return os.access(path, os.X_OK)


def normalize_relative(relative_path: str | PurePosixPath) -> PurePosixPath:
    """Return ``relative_path`` as a POSIX path that stays inside an overlay root.

    Args:
        relative_path: Path to look up beneath every overlay root.

    Returns:
        PurePosixPath: The validated relative path.

    Raises:
        ValueError: If the path is absolute or climbs out with ``..``.
    """

    rel = PurePosixPath(relative_path)
    if rel.is_absolute() or ".." in rel.parts:
        raise ValueError(f"overlay paths must be relative and stay inside the root: {relative_path}")
    return rel


class OverlayResolver:
    """Locate executables and files across the overlay roots in priority order."""

    def __init__(self, roots: OverlayRoots) -> None:
        self._roots = roots

    @property
    def roots(self) -> OverlayRoots:
        """Return the roots searched by this resolver."""

        return self._roots

    def candidates(self, relative_path: str | PurePosixPath) -> Iterator[ExecutableScript]:
        """Yield every executable match for ``relative_path``, highest priority first.

        Raises:
            ValueError: If ``relative_path`` escapes the overlay roots.
        """

        rel = normalize_relative(relative_path)
        for tier, base in self._roots.ordered():
            candidate = base.joinpath(*rel.parts)
            if is_executable(candidate):
                yield ExecutableScript(root=tier, relative_path=rel, path=candidate)

    def resolve(self, relative_path: str | PurePosixPath) -> ExecutableScript | None:
        """Return the first executable match for ``relative_path``.

        Args:
            relative_path: Path such as ``lint/js/jslint`` looked up beneath each root.

        Returns:
            ExecutableScript | None: The match from the highest priority root that
            holds an executable at ``relative_path``, or ``None`` when no root does.
        """

        return next(self.candidates(relative_path), None)

    def layered_files(self, relative_path: str | PurePosixPath) -> list[Path]:
        """Return existing files for ``relative_path`` ordered lowest priority first.

        Used to merge configuration so higher tiers override lower ones.
        """

        rel = normalize_relative(relative_path)
        found = [base.joinpath(*rel.parts) for _tier, base in self._roots.ordered()]
        return [path for path in reversed(found) if path.is_file()]


__all__ = [
    "ExecutableScript",
    "OverlayResolver",
    "OverlayRoot",
    "OverlayRoots",
    "is_executable",
    "normalize_relative",
]
