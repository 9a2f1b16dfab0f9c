# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (global options, errors, workspace)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from ..config import ConfigError
from ..logging import ConsoleLogger, build_logger
from ..settings import Settings
from ..workspace import Workspace


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLIState:
    """Global options captured by the application callback."""

    root: Path | None = None
    debug: bool = False
    emoji: bool = True

    def settings(self) -> Settings:
        """Return environment settings with ``--root`` and ``--debug`` applied on top."""

        return Settings.from_env(root=self.root, debug=True if self.debug else None)

    def logger(self, settings: Settings | None = None) -> ConsoleLogger:
        """Return a console logger honouring the emoji and debug preferences.

        Args:
            settings: Resolved settings whose ``debug`` flag wins over ``--debug``.

        Returns:
            ConsoleLogger: Logger bound to a stderr console.
        """

        debug = settings.debug if settings is not None else self.debug
        return build_logger(emoji=self.emoji, debug=debug)


def get_state(ctx: typer.Context) -> CLIState:
    """Return the :class:`CLIState` stored on the root context."""

    state = ctx.find_root().obj
    if isinstance(state, CLIState):
        return state
    return CLIState()


def build_workspace(ctx: typer.Context) -> Workspace:
    """Return a workspace configured from the global CLI options.

    Raises:
        CLIError: If the chain configuration is invalid.
    """

    state = get_state(ctx)
    settings = state.settings()
    logger = state.logger(settings)
    try:
        return Workspace.create(settings, logger=logger)
    except ConfigError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc), exit_code=2) from exc


__all__ = ["CLIError", "CLIState", "build_workspace", "get_state"]
