# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; we provide a controlled wrapper around
# external tool execution, normalising arguments and disabling ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess


@dataclass(slots=True, frozen=True)
class CommandOptions:
    """Immutable command execution options.

    No timeout is offered: helper tools run to completion and a hung tool
    blocks the caller. ``errors`` is the decoding error handler applied to
    captured text, e.g. ``"replace"`` for tools printing non-UTF-8 bytes.
    """

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    check: bool = True
    capture_output: bool = False
    text: bool = True
    errors: str | None = None
    discard_stdin: bool = False


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Normalise the subprocess argument sequence.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If a bare executable name is not on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    options: CommandOptions | None = None,
) -> CompletedProcess[str]:
    """Execute ``args`` after normalising the executable path.

    Args:
        args: Command and argument sequence to execute.
        options: Options configuring execution semantics.

    Returns:
        CompletedProcess: Subprocess execution metadata.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
        OSError: If the executable cannot be launched.
        SubprocessExecutionError: If ``check`` is set and the command fails.
    """

    opts = options or CommandOptions()
    normalized = _normalize_args(args)
    # Bandit: commands come from overlay-resolved scripts; we pass argument
    # lists directly without shell expansion.
    completed: CompletedProcess[str] = subprocess.run(  # nosec B603
        normalized,
        cwd=str(opts.cwd) if opts.cwd is not None else None,
        env=dict(opts.env) if opts.env is not None else None,
        check=False,
        capture_output=opts.capture_output,
        text=opts.text,
        errors=opts.errors if opts.text else None,
        stdin=subprocess.DEVNULL if opts.discard_stdin else None,
    )

    if opts.check and completed.returncode != 0:
        raise SubprocessExecutionError(
            normalized,
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )

    return completed


__all__ = ["CommandOptions", "SubprocessExecutionError", "run_command"]
