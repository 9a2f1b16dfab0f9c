# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command registry."""

from __future__ import annotations

import typer

from . import context, detect, fingerprint, helpers, scripts, which

__all__ = ["register_commands"]


def register_commands(app: typer.Typer) -> None:
    """Register the built-in commands on ``app``."""

    detect.register(app)
    helpers.register(app)
    scripts.register(app)
    which.register(app)
    context.register(app)
    fingerprint.register(app)
