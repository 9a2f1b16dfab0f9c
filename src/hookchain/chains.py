# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Probe-then-commit resolution of configured helper chains.

For a file of a given type, the configuration lists alternative chains in
order of preference. Every command of a chain must be available before any of
them runs: formatters rewrite files in place and there is no rollback, so a
chain whose later command turns out to be missing must never start.

Two phases:

* probe: walk the alternatives, resolve each command through the overlay
  (type-specific directory first, then ``_common``) and ask it whether it is
  available. The first chain with nothing missing is selected.
* commit: resolve the selected chain again and run each command against the
  file in chain order, stopping at the first nonzero exit.

Nothing configured, or nothing available, is a successful no-op.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from contextlib import ExitStack
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .cleanup import CleanupRegistry
from .commands import Command, CommandResolver
from .config import ChainSettings, ChainSpec
from .constants import ENV_FILE_TYPE, ENV_SCRATCH
from .detection import DetectionResult, TypeDetector
from .fingerprint import FileWatch
from .logging import ConsoleLogger


class ChainStatus(str, Enum):
    """Why a helper run ended the way it did."""

    UNCONFIGURED = "unconfigured"
    UNAVAILABLE = "unavailable"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CommandRun:
    """Result of one committed command."""

    name: str
    script: Path
    exit_code: int
    changed: bool


@dataclass(slots=True)
class ProbeReport:
    """Probe-phase findings: the selected chain and what each rejected chain lacked."""

    selected: ChainSpec | None = None
    missing: dict[ChainSpec, list[str]] = field(default_factory=dict)


@dataclass(slots=True)
class ChainOutcome:
    """Everything a caller needs to report on a helper run."""

    file: Path
    prefix: str
    category: str
    detection: DetectionResult
    status: ChainStatus
    probe: ProbeReport = field(default_factory=ProbeReport)
    runs: list[CommandRun] = field(default_factory=list)

    @property
    def selected(self) -> ChainSpec | None:
        return self.probe.selected

    @property
    def exit_code(self) -> int:
        failed = self.failed
        return failed.exit_code if failed is not None else 0

    @property
    def failed(self) -> CommandRun | None:
        for run in self.runs:
            if run.exit_code != 0:
                return run
        return None

    @property
    def changed(self) -> bool:
        return any(run.changed for run in self.runs)


class HelperChainResolver:
    """Select the first fully available configured chain and run it on a file."""

    def __init__(
        self,
        detector: TypeDetector,
        commands: CommandResolver,
        chain_settings: ChainSettings,
        *,
        registry: CleanupRegistry | None = None,
        temp_dir: Path | None = None,
        env: Mapping[str, str] | None = None,
        logger: ConsoleLogger | None = None,
    ) -> None:
        self._detector = detector
        self._commands = commands
        self._chain_settings = chain_settings
        self._registry = registry
        self._temp_dir = temp_dir
        self._env = env
        self._logger = logger

    def run_helpers(self, prefix: str, category: str, file: Path, *extra_args: str) -> int:
        """Run the helpers for ``file`` and return the process exit code.

        Args:
            prefix: Configuration prefix such as ``LINT``.
            category: Helper category directory such as ``lint``.
            file: File the helpers act on.
            *extra_args: Arguments appended to every committed command.

        Returns:
            int: ``0`` when nothing was configured, nothing was available or
            the chain succeeded; otherwise the failing command's exit code.
        """

        return self.run(prefix, category, file, *extra_args).exit_code

    def run(self, prefix: str, category: str, file: Path, *extra_args: str) -> ChainOutcome:
        """Detect, probe and commit; return the detailed :class:`ChainOutcome`.

        Raises:
            DetectionError: If type detection itself could not run.
            ValueError: If ``category`` escapes the overlay roots.
        """

        detection = self._detector.detect(file)
        outcome = ChainOutcome(
            file=file,
            prefix=prefix,
            category=category,
            detection=detection,
            status=ChainStatus.UNCONFIGURED,
        )
        alternatives = self._chain_settings.alternatives(prefix, detection.type)
        if not alternatives:
            self._debug(f"skip file={file} prefix={prefix} type={detection.type} reason=unconfigured")
            return outcome

        outcome.probe = self.probe(prefix, category, detection.type, alternatives)
        if outcome.probe.selected is None:
            outcome.status = ChainStatus.UNAVAILABLE
            self._debug(f"skip file={file} prefix={prefix} type={detection.type} reason=unavailable")
            return outcome

        outcome.runs = self._commit(prefix, category, detection.type, outcome.probe.selected, file, extra_args)
        outcome.status = ChainStatus.FAILED if outcome.failed is not None else ChainStatus.SUCCEEDED
        return outcome

    def probe(
        self,
        prefix: str,
        category: str,
        file_type: str,
        alternatives: tuple[ChainSpec, ...] | None = None,
    ) -> ProbeReport:
        """Return the first chain whose commands all resolve and report available.

        Probing never passes the target file to a command.
        """

        if alternatives is None:
            alternatives = self._chain_settings.alternatives(prefix, file_type)
        env = self._command_env(file_type)
        report = ProbeReport()
        for chain in alternatives:
            missing = [name for name in chain if not self._probe_one(prefix, category, file_type, name, env)]
            if not missing:
                report.selected = chain
                self._debug(f"select chain={'+'.join(chain)} type={file_type}")
                return report
            report.missing[chain] = missing
            self._debug(f"reject chain={'+'.join(chain)} missing={','.join(missing)}")
        return report

    def _probe_one(
        self,
        prefix: str,
        category: str,
        file_type: str,
        name: str,
        env: Mapping[str, str],
    ) -> bool:
        command = self._commands.resolve(prefix, category, file_type, name, env=env)
        if command is None:
            self._debug(f"probe command={name} result=unresolved")
            return False
        available = command.is_available()
        self._debug(f"probe command={name} script={command.location} available={available}")
        return available

    def _commit(
        self,
        prefix: str,
        category: str,
        file_type: str,
        chain: ChainSpec,
        file: Path,
        extra_args: tuple[str, ...],
    ) -> list[CommandRun]:
        runs: list[CommandRun] = []
        with ExitStack() as stack:
            env = self._command_env(file_type)
            if self._registry is not None:
                scratch = stack.enter_context(self._registry.scratch_dir(directory=self._temp_dir))
                env[ENV_SCRATCH] = str(scratch)
            for name in chain:
                command = self._commands.resolve(prefix, category, file_type, name, env=env)
                if command is None:
                    # The script vanished between probe and commit.
                    runs.append(CommandRun(name=name, script=Path(name), exit_code=1, changed=False))
                    break
                run = self._run_one(command, file, extra_args)
                runs.append(run)
                if run.exit_code != 0:
                    break
        return runs

    def _run_one(self, command: Command, file: Path, extra_args: tuple[str, ...]) -> CommandRun:
        watch = FileWatch(file) if file.is_file() else None
        self._debug(f"run command={command.name} script={command.location} file={file}")
        exit_code = command.run(file, extra_args)
        changed = watch.changed() if watch is not None else False
        self._debug(f"done command={command.name} exit={exit_code} changed={changed}")
        return CommandRun(name=command.name, script=command.location, exit_code=exit_code, changed=changed)

    def _command_env(self, file_type: str) -> dict[str, str]:
        env = dict(os.environ if self._env is None else self._env)
        env[ENV_FILE_TYPE] = file_type
        return env

    def _debug(self, message: str) -> None:
        if self._logger is not None:
            self._logger.debug(message)


__all__ = [
    "ChainOutcome",
    "ChainStatus",
    "CommandRun",
    "HelperChainResolver",
    "ProbeReport",
]
