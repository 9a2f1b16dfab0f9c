# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helper commands: a capability probe plus a file-acting run."""

from __future__ import annotations

import shlex
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from .config import ChainSettings
from .constants import COMMON_SUBDIR, EXIT_CANNOT_EXECUTE
from .overlay import ExecutableScript, OverlayResolver, normalize_relative
from .process import CommandOptions, run_command


@runtime_checkable
class Command(Protocol):
    """A lint/format tool that can report availability and act on a file."""

    @property
    def name(self) -> str: ...

    @property
    def location(self) -> Path: ...

    def is_available(self) -> bool: ...

    def run(self, file: Path, extra_args: Sequence[str] = ()) -> int: ...


@dataclass(frozen=True, slots=True)
class ScriptCommand:
    """Adapter shelling out to an overlay-resolved helper script.

    The probe invokes the script with its options and no file argument; the
    same options are used for the real run, so they must be dry-run safe.
    """

    name: str
    script: ExecutableScript
    options: str = ""
    env: Mapping[str, str] | None = None

    @property
    def location(self) -> Path:
        """Return the path of the script backing this command."""

        return self.script.path

    def argv(self, file: Path | None = None, extra_args: Sequence[str] = ()) -> list[str]:
        """Build the argument vector for a probe or a run.

        Args:
            file: Target file; ``None`` builds the probe invocation.
            extra_args: Arguments appended after the file.

        Returns:
            list[str]: Script path, split options, the file and ``extra_args``.
        """

        args = [str(self.script.path), *shlex.split(self.options)]
        if file is not None:
            args.append(str(file))
        args.extend(extra_args)
        return args

    def is_available(self) -> bool:
        """Return ``True`` when the file-less invocation exits ``0``.

        Output is captured and decoded leniently; a script that cannot be
        launched is reported as unavailable.
        """

        try:
            completed = run_command(
                self.argv(),
                options=CommandOptions(
                    env=self.env,
                    check=False,
                    capture_output=True,
                    errors="replace",
                    discard_stdin=True,
                ),
            )
        except OSError:
            return False
        return completed.returncode == 0

    def run(self, file: Path, extra_args: Sequence[str] = ()) -> int:
        """Run the script on ``file`` with inherited output.

        Args:
            file: File the tool acts on.
            extra_args: Caller arguments appended after the file.

        Returns:
            int: The script's exit code, or ``126`` when it cannot be launched.
        """

        try:
            completed = run_command(
                self.argv(file, extra_args),
                options=CommandOptions(env=self.env, check=False),
            )
        except OSError:
            return EXIT_CANNOT_EXECUTE
        return completed.returncode


class CommandResolver:
    """Resolve command names to :class:`Command` instances for a category and type."""

    def __init__(self, overlay: OverlayResolver, chain_settings: ChainSettings) -> None:
        self._overlay = overlay
        self._chain_settings = chain_settings

    def locate(self, category: str, file_type: str, name: str) -> ExecutableScript | None:
        """Return ``<category>/<type>/<name>``, else ``<category>/_common/<name>``.

        Raises:
            ValueError: If ``category`` or the composed path escapes the overlay roots.
        """

        base = normalize_relative(category)
        return self._overlay.resolve(base / file_type / name) or self._overlay.resolve(base / COMMON_SUBDIR / name)

    def resolve(
        self,
        prefix: str,
        category: str,
        file_type: str,
        name: str,
        *,
        env: Mapping[str, str] | None = None,
    ) -> Command | None:
        """Return the command bound to its configured options.

        Args:
            prefix: Configuration prefix such as ``LINT``.
            category: Helper category directory such as ``lint``.
            file_type: Detected type of the target file.
            name: Command name from the chain.
            env: Environment for the command's process.

        Returns:
            Command | None: The command with its ``(prefix, type, name)`` options,
            or ``None`` when no overlay root provides it.
        """

        script = self.locate(category, file_type, name)
        if script is None:
            return None
        return ScriptCommand(
            name=name,
            script=script,
            options=self._chain_settings.options_for(prefix, file_type, name),
            env=env,
        )


__all__ = ["Command", "CommandResolver", "EXIT_CANNOT_EXECUTE", "ScriptCommand"]
