# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Wire settings, submodule context, overlay and resolvers into one workspace."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .chains import ChainOutcome, HelperChainResolver
from .cleanup import CleanupRegistry, process_registry
from .commands import CommandResolver
from .config import ChainSettings, load_chain_settings
from .constants import CONFIG_FILENAME
from .detection import DetectionResult, TypeDetector
from .logging import ConsoleLogger, build_logger
from .overlay import OverlayResolver, OverlayRoots
from .scripts import DirectoryScriptRunner
from .settings import Settings
from .submodule import GitRunner, SubmoduleContext, SubmoduleDetector


@dataclass(slots=True)
class Workspace:
    """Components sharing one submodule context computed at startup."""

    settings: Settings
    context: SubmoduleContext
    overlay: OverlayResolver
    chain_settings: ChainSettings
    runner: DirectoryScriptRunner
    detector: TypeDetector
    helpers: HelperChainResolver
    logger: ConsoleLogger

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        *,
        logger: ConsoleLogger | None = None,
        git_runner: GitRunner | None = None,
        registry: CleanupRegistry | None = None,
        env: Mapping[str, str] | None = None,
    ) -> Workspace:
        """Build a workspace, detecting the submodule context exactly once.

        Raises:
            ConfigError: If a configuration file in any overlay root is invalid.
        """

        resolved_settings = settings or Settings.from_env(env)
        log = logger or build_logger(debug=resolved_settings.debug)
        context = SubmoduleDetector(resolved_settings.root, runner=git_runner, logger=log).detect()
        roots = OverlayRoots.from_context(resolved_settings, context)
        overlay = OverlayResolver(roots)
        config_files = overlay.layered_files(CONFIG_FILENAME)
        for path in config_files:
            log.debug(f"config path={path}")
        chain_settings = load_chain_settings(config_files, env=env)
        runner = DirectoryScriptRunner(overlay, env=env, logger=log)
        detector = TypeDetector(runner, env=env, logger=log)
        helpers = HelperChainResolver(
            detector,
            CommandResolver(overlay, chain_settings),
            chain_settings,
            registry=registry or process_registry(),
            temp_dir=resolved_settings.temp_dir,
            env=env,
            logger=log,
        )
        return cls(
            settings=resolved_settings,
            context=context,
            overlay=overlay,
            chain_settings=chain_settings,
            runner=runner,
            detector=detector,
            helpers=helpers,
            logger=log,
        )

    @property
    def roots(self) -> OverlayRoots:
        """Return the overlay roots derived from the submodule context."""

        return self.overlay.roots

    @property
    def repo_root(self) -> Path:
        """Return the repository top level, falling back to the configured root."""

        return self.context.repo_root or self.settings.root

    def detect(self, file: Path) -> DetectionResult:
        """Return the detected type of ``file``.

        Raises:
            DetectionError: If a detection script cannot be launched.
        """

        return self.detector.detect(file)

    def run_all(self, category: str, *args: str) -> int:
        """Run every script of ``category`` and return the first failure code."""

        return self.runner.run_all(category, *args)

    def run_helpers(self, prefix: str, category: str, file: Path, *extra_args: str) -> ChainOutcome:
        """Run the helper chain configured for ``file``.

        Args:
            prefix: Configuration prefix such as ``LINT``.
            category: Helper category directory such as ``lint``.
            file: File the helpers act on.
            *extra_args: Arguments appended to every committed command.

        Returns:
            ChainOutcome: Detection, probe and commit details of the run.
        """

        return self.helpers.run(prefix, category, file, *extra_args)


__all__ = ["Workspace"]
