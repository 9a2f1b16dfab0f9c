# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``hookchain context``: show overlay roots and submodule context."""

from __future__ import annotations

import typer
from rich.table import Table

from ...console import detect_tty, get_console_manager
from ..shared import build_workspace


def context_command(ctx: typer.Context) -> None:
    """Print the overlay roots and the submodule context.

    Args:
        ctx: Typer context carrying the global options.

    Raises:
        CLIError: If the chain configuration is invalid.
    """

    workspace = build_workspace(ctx)
    submodule = workspace.context
    table = Table(title="hookchain overlay", show_header=True, header_style="bold")
    table.add_column("Root")
    table.add_column("Path")
    table.add_column("Exists")
    for tier, path in workspace.roots.ordered():
        table.add_row(tier.label, str(path), "yes" if path.is_dir() else "no")
    console = get_console_manager().get(color=detect_tty(), emoji=workspace.logger.use_emoji)
    console.print(table)
    console.print(f"repository: {submodule.repo_root or '-'}")
    if submodule.is_submodule:
        console.print(f"submodule: yes (mounted at {submodule.mount_path} in {submodule.parent_root})")
    else:
        console.print("submodule: no")


def register(app: typer.Typer) -> None:
    """Register the context command on ``app``.

    Args:
        app: Typer application receiving the context command.
    """

    app.command(name="context", help="Show the overlay roots and submodule context.")(context_command)


__all__ = ["register"]
