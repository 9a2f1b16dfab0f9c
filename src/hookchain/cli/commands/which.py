# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``hookchain which``: show which overlay root provides an executable."""

from __future__ import annotations

from typing import Annotated

import typer

from ..shared import CLIError, build_workspace

PATH_ARGUMENT = Annotated[str, typer.Argument(help="Path relative to the overlay roots.")]
ALL_OPTION = Annotated[bool, typer.Option("--all", "-a", help="List every match, highest priority first.")]


def which_command(ctx: typer.Context, relative_path: PATH_ARGUMENT, show_all: ALL_OPTION = False) -> None:
    """Print the resolved executable for ``relative_path``; exit 1 when none exists.

    Args:
        ctx: Typer context carrying the global options.
        relative_path: Path looked up beneath the overlay roots.
        show_all: Print every match instead of the winning one.

    Raises:
        CLIError: If ``relative_path`` escapes the overlay roots.
    """

    workspace = build_workspace(ctx)
    try:
        matches = list(workspace.overlay.candidates(relative_path))
    except ValueError as exc:
        raise CLIError(str(exc), exit_code=2) from exc
    if not matches:
        workspace.logger.warn(f"{relative_path} not found in any overlay root")
        raise typer.Exit(code=1)
    for script in matches if show_all else matches[:1]:
        typer.echo(f"{script.root.label}\t{script.path}")


def register(app: typer.Typer) -> None:
    """Register the which command on ``app``.

    Args:
        app: Typer application receiving the which command.
    """

    app.command(name="which", help="Resolve an executable across the overlay roots.")(which_command)


__all__ = ["register"]
