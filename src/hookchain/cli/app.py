# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and global options."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .commands import register_commands
from .shared import CLIState
from .typer_ext import create_typer

app = create_typer(
    help="Run overlay-resolved lint/format helper chains.",
    no_args_is_help=True,
    add_completion=False,
)

ROOT_OPTION = Annotated[
    Path | None,
    typer.Option("--root", "-r", help="Working directory root (defaults to $HOOKCHAIN_ROOT or the cwd)."),
]
DEBUG_OPTION = Annotated[bool, typer.Option("--debug", help="Print probe and commit decisions.")]
EMOJI_OPTION = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji output.")]


@app.callback()
def main_callback(
    ctx: typer.Context,
    root: ROOT_OPTION = None,
    debug: DEBUG_OPTION = False,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Capture global options for the subcommands."""

    ctx.obj = CLIState(root=root, debug=debug, emoji=emoji)


register_commands(app)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "main"]
