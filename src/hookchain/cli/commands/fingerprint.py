# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``hookchain fingerprint``: print a file's content and metadata digest."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ...fingerprint import fingerprint

FILE_ARGUMENT = Annotated[
    Path,
    typer.Argument(exists=True, dir_okay=False, readable=True, help="File to fingerprint."),
]


def fingerprint_command(file: FILE_ARGUMENT) -> None:
    """Print the ``sha256:mode:uid:gid:size`` fingerprint of ``file``.

    Args:
        file: Existing file to fingerprint.
    """

    typer.echo(fingerprint(file))


def register(app: typer.Typer) -> None:
    """Register the fingerprint command on ``app``.

    Args:
        app: Typer application receiving the fingerprint command.
    """

    app.command(name="fingerprint", help="Print the content and metadata fingerprint of a file.")(
        fingerprint_command,
    )


__all__ = ["register"]
