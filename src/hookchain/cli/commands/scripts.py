# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``hookchain run-all``: run every script of a category directory."""

from __future__ import annotations

from typing import Annotated

import typer

from ..shared import CLIError, build_workspace

CATEGORY_ARGUMENT = Annotated[str, typer.Argument(help="Category directory, e.g. 'pre-commit.d'.")]
ARGS_ARGUMENT = Annotated[list[str] | None, typer.Argument(help="Arguments passed to every script.")]


def run_all_command(ctx: typer.Context, category: CATEGORY_ARGUMENT, args: ARGS_ARGUMENT = None) -> None:
    """Run the category's scripts in name order and exit with the first failure code.

    Args:
        ctx: Typer context carrying the global options.
        category: Category directory such as ``pre-commit.d``.
        args: Arguments passed to every script.

    Raises:
        CLIError: If ``category`` escapes the overlay roots.
    """

    workspace = build_workspace(ctx)
    try:
        code = workspace.run_all(category, *(args or []))
    except ValueError as exc:
        workspace.logger.fail(str(exc))
        raise CLIError(str(exc), exit_code=2) from exc
    if code != 0:
        workspace.logger.fail(f"{category}: script failed with exit code {code}")
    raise typer.Exit(code=code)


def register(app: typer.Typer) -> None:
    """Register the run-all command on ``app``.

    Args:
        app: Typer application receiving the run-all command.
    """

    app.command(name="run-all", help="Run every script of a category across the overlay roots.")(
        run_all_command,
    )


__all__ = ["register"]
