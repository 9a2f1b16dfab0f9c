# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``hookchain run`` and ``hookchain check``: run helper chains on files."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ...chains import ChainOutcome, ChainStatus
from ...detection import DetectionError
from ...discovery import staged_files
from ...logging import ConsoleLogger
from ...workspace import Workspace
from ..shared import CLIError, build_workspace

PREFIX_ARGUMENT = Annotated[str, typer.Argument(help="Configuration prefix, e.g. LINT or FORMAT.")]
CATEGORY_ARGUMENT = Annotated[str, typer.Argument(help="Helper category directory, e.g. 'lint'.")]
FILE_ARGUMENT = Annotated[Path, typer.Argument(help="File to run the helpers on.")]
EXTRA_ARGUMENT = Annotated[list[str] | None, typer.Argument(help="Extra arguments passed to every command.")]
FILES_ARGUMENT = Annotated[list[Path] | None, typer.Argument(help="Files to run the helpers on.")]
STAGED_OPTION = Annotated[bool, typer.Option("--staged", help="Also process files staged in git.")]


def report_outcome(outcome: ChainOutcome, logger: ConsoleLogger) -> None:
    """Emit user-facing lines for a finished helper run."""

    if not outcome.detection.known:
        logger.debug(f"file={outcome.file} type=unknown")
    if outcome.status is ChainStatus.UNAVAILABLE:
        rejected = " | ".join("+".join(chain) for chain in outcome.probe.missing)
        logger.debug(f"file={outcome.file} unavailable={rejected}")
    changed = [run.name for run in outcome.runs if run.changed]
    if changed:
        logger.info(f"{outcome.file} was reformatted by {', '.join(changed)}")
    failed = outcome.failed
    if failed is not None:
        logger.fail(f"{failed.name} failed on {outcome.file} (exit code {failed.exit_code})")


def _run_one(workspace: Workspace, prefix: str, category: str, file: Path, extra: list[str]) -> ChainOutcome:
    try:
        outcome = workspace.run_helpers(prefix, category, file, *extra)
    except (DetectionError, ValueError) as exc:
        workspace.logger.fail(str(exc))
        raise CLIError(str(exc), exit_code=2) from exc
    report_outcome(outcome, workspace.logger)
    return outcome


def run_helpers_command(
    ctx: typer.Context,
    prefix: PREFIX_ARGUMENT,
    category: CATEGORY_ARGUMENT,
    file: FILE_ARGUMENT,
    extra: EXTRA_ARGUMENT = None,
) -> None:
    """Run the first available configured chain on ``file``.

    Args:
        ctx: Typer context carrying the global options.
        prefix: Configuration prefix such as ``LINT``.
        category: Helper category directory such as ``lint``.
        file: File the helpers act on.
        extra: Arguments appended to every committed command.
    """

    workspace = build_workspace(ctx)
    outcome = _run_one(workspace, prefix, category, file, extra or [])
    raise typer.Exit(code=outcome.exit_code)


def check_command(
    ctx: typer.Context,
    prefix: PREFIX_ARGUMENT,
    category: CATEGORY_ARGUMENT,
    files: FILES_ARGUMENT = None,
    staged: STAGED_OPTION = False,
) -> None:
    """Run helpers over several files; exit with the first failure code after all ran.

    Args:
        ctx: Typer context carrying the global options.
        prefix: Configuration prefix such as ``FORMAT``.
        category: Helper category directory such as ``format``.
        files: Files named on the command line.
        staged: Also process the files staged in git.
    """

    workspace = build_workspace(ctx)
    targets = list(files or [])
    if staged:
        targets.extend(staged_files(workspace.repo_root))
    if not targets:
        workspace.logger.warn("No files to check")
        raise typer.Exit(code=0)
    unique = list(dict.fromkeys(targets))
    first_failure = 0
    for file in unique:
        outcome = _run_one(workspace, prefix, category, file, [])
        if outcome.exit_code != 0 and first_failure == 0:
            first_failure = outcome.exit_code
    if first_failure == 0:
        workspace.logger.ok(f"{prefix.upper()}: {len(unique)} file(s) passed")
    raise typer.Exit(code=first_failure)


def register(app: typer.Typer) -> None:
    """Register the run and check commands on ``app``.

    Args:
        app: Typer application receiving the run and check commands.
    """

    app.command(name="run", help="Run a helper chain on one file.")(run_helpers_command)
    app.command(name="check", help="Run helper chains on many files.")(check_command)


__all__ = ["register", "report_outcome"]
