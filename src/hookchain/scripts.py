# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run every script of a category directory across the overlay roots."""

from __future__ import annotations

from collections.abc import Mapping

from .constants import EXIT_CANNOT_EXECUTE
from .logging import ConsoleLogger
from .overlay import ExecutableScript, OverlayResolver, is_executable, normalize_relative
from .process import CommandOptions, run_command


class DirectoryScriptRunner:
    """Execute the effective script set of a category directory sequentially."""

    def __init__(
        self,
        resolver: OverlayResolver,
        *,
        env: Mapping[str, str] | None = None,
        logger: ConsoleLogger | None = None,
    ) -> None:
        self._resolver = resolver
        self._env = env
        self._logger = logger

    def scripts(self, category: str) -> list[ExecutableScript]:
        """Return the effective scripts of ``category`` sorted by basename.

        Direct, non-hidden, executable entries of every root are collected;
        a basename present in several roots resolves to the highest priority
        one. A category missing from every root yields an empty list.

        Args:
            category: Category directory relative to the overlay roots.

        Returns:
            list[ExecutableScript]: Scripts to run, in basename order.

        Raises:
            ValueError: If ``category`` escapes the overlay roots.
        """

        category_path = normalize_relative(category)
        names: set[str] = set()
        for _tier, base in self._resolver.roots.ordered():
            directory = base.joinpath(*category_path.parts)
            if not directory.is_dir():
                continue
            for entry in directory.iterdir():
                if entry.name.startswith("."):
                    continue
                if is_executable(entry):
                    names.add(entry.name)
        selected: list[ExecutableScript] = []
        for name in sorted(names):
            script = self._resolver.resolve(category_path / name)
            if script is not None:
                selected.append(script)
        return selected

    def run_all(self, category: str, *args: str) -> int:
        """Run each script of ``category`` with ``args``; stop at the first failure.

        A script that cannot be launched stops the run with ``126``.

        Returns:
            int: ``0`` when every script succeeded (or none exist), otherwise the
            first nonzero exit code.

        Raises:
            ValueError: If ``category`` escapes the overlay roots.
        """

        for script in self.scripts(category):
            if self._logger is not None:
                self._logger.debug(f"run script={script.path} root={script.root.label}")
            try:
                completed = run_command(
                    [str(script.path), *args],
                    options=CommandOptions(env=self._env, check=False),
                )
            except OSError as exc:
                if self._logger is not None:
                    self._logger.fail(f"{script.path} could not be executed: {exc}")
                return EXIT_CANNOT_EXECUTE
            if completed.returncode != 0:
                if self._logger is not None:
                    self._logger.debug(f"stop script={script.path} exit={completed.returncode}")
                return completed.returncode
        return 0


__all__ = ["DirectoryScriptRunner"]
