# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``hookchain detect``: print the detected type of a file."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ...detection import DetectionError
from ..shared import CLIError, build_workspace

FILE_ARGUMENT = Annotated[Path, typer.Argument(help="File whose type should be detected.")]


def detect_command(ctx: typer.Context, file: FILE_ARGUMENT) -> None:
    """Print the file type; exit 1 when no detection script recognises it.

    Args:
        ctx: Typer context carrying the global options.
        file: File whose type is detected.

    Raises:
        CLIError: If the configuration is invalid or a detection script cannot run.
    """

    workspace = build_workspace(ctx)
    try:
        result = workspace.detect(file)
    except DetectionError as exc:
        workspace.logger.fail(str(exc))
        raise CLIError(str(exc), exit_code=2) from exc
    typer.echo(result.type)
    if not result.known:
        raise typer.Exit(code=1)


def register(app: typer.Typer) -> None:
    """Register the detect command on ``app``.

    Args:
        app: Typer application receiving the detect command.
    """

    app.command(name="detect", help="Detect the type of a file.")(detect_command)


__all__ = ["register"]
