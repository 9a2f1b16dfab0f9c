# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""File type detection driven by the ``detect`` script category."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .constants import DETECT_CATEGORY, UNKNOWN_TYPE
from .logging import ConsoleLogger
from .process import CommandOptions, run_command
from .scripts import DirectoryScriptRunner


class DetectionError(RuntimeError):
    """Raised when a detection script cannot be executed at all."""


@dataclass(frozen=True, slots=True)
class DetectionResult:
    """Outcome of type detection.

    ``known`` is ``False`` when no detection script claimed the file; ``type``
    is then :data:`~hookchain.constants.UNKNOWN_TYPE`.
    """

    type: str
    known: bool
    script: Path | None = None

    @classmethod
    def unknown(cls) -> DetectionResult:
        return cls(type=UNKNOWN_TYPE, known=False)


class TypeDetector:
    """Ask each detection script, in runner order, to name the file's type.

    A detection script claims a file by exiting ``0`` and printing the type
    token on its first output line. Scripts exiting nonzero or printing nothing
    decline and the next one is asked.
    """

    def __init__(
        self,
        runner: DirectoryScriptRunner,
        *,
        category: str = DETECT_CATEGORY,
        env: Mapping[str, str] | None = None,
        logger: ConsoleLogger | None = None,
    ) -> None:
        self._runner = runner
        self._category = category
        self._env = env
        self._logger = logger

    def detect(self, file: Path) -> DetectionResult:
        """Return the detected type of ``file``.

        Raises:
            DetectionError: If a detection script cannot be launched.
        """

        for script in self._runner.scripts(self._category):
            try:
                completed = run_command(
                    [str(script.path), str(file)],
                    options=CommandOptions(
                        env=self._env,
                        check=False,
                        capture_output=True,
                        errors="replace",
                        discard_stdin=True,
                    ),
                )
            except OSError as exc:
                raise DetectionError(f"Detection script {script.path} could not run: {exc}") from exc
            if completed.returncode != 0:
                continue
            token = _first_token(completed.stdout)
            if token:
                if self._logger is not None:
                    self._logger.debug(f"detect file={file} type={token} script={script.path}")
                return DetectionResult(type=token, known=token != UNKNOWN_TYPE, script=script.path)
        if self._logger is not None:
            self._logger.debug(f"detect file={file} type={UNKNOWN_TYPE}")
        return DetectionResult.unknown()


def _first_token(output: str | None) -> str:
    for line in (output or "").splitlines():
        stripped = line.strip()
        if stripped:
            return stripped.split()[0].lower()
    return ""


__all__ = ["DetectionError", "DetectionResult", "TypeDetector"]
