# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Process-wide registry of exit-time cleanup actions.

Actions run exactly once, in registration order, whichever way the process
ends: normal interpreter exit, an uncaught exception, or a terminating
signal. Scratch files and directories are handed out as scoped handles that
release on scope exit and are also registered here, so an interrupted helper
chain never leaks them.
"""

from __future__ import annotations

import atexit
import os
import shutil
import signal
import tempfile
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import FrameType
from typing import Final

from .logging import ConsoleLogger

CleanupAction = Callable[[], None]
SignalHandler = Callable[[int, FrameType | None], object] | int | signal.Handlers | None

DEFAULT_SIGNALS: Final[tuple[signal.Signals, ...]] = tuple(
    getattr(signal, name) for name in ("SIGINT", "SIGTERM", "SIGHUP") if hasattr(signal, name)
)


@dataclass(slots=True)
class ScratchPath:
    """Handle owning a temporary file or directory."""

    path: Path
    released: bool = False

    def release(self) -> None:
        """Remove the scratch path; further calls are no-ops."""

        if self.released:
            return
        self.released = True
        if self.path.is_dir() and not self.path.is_symlink():
            shutil.rmtree(self.path, ignore_errors=True)
        else:
            self.path.unlink(missing_ok=True)


class CleanupRegistry:
    """Ordered, append-only list of actions drained once at process exit."""

    def __init__(
        self,
        *,
        signals: Sequence[signal.Signals] = DEFAULT_SIGNALS,
        logger: ConsoleLogger | None = None,
    ) -> None:
        self._signals = tuple(signals)
        self._logger = logger
        self._actions: list[CleanupAction] = []
        self._previous: dict[int, SignalHandler] = {}
        self._installed = False
        self._drained = False

    @property
    def installed(self) -> bool:
        return self._installed

    @property
    def drained(self) -> bool:
        return self._drained

    def __len__(self) -> int:
        return len(self._actions)

    def defer(self, action: CleanupAction) -> None:
        """Append ``action``; the first call installs the termination handlers.

        Raises:
            RuntimeError: If the registry has already been drained.
        """

        if self._drained:
            raise RuntimeError("cleanup registry has already been drained")
        self._actions.append(action)
        if not self._installed:
            self._install()

    def drain(self) -> None:
        """Run every registered action in registration order, at most once.

        A failing action is reported and the remaining actions still run.
        """

        if self._drained:
            return
        self._drained = True
        for action in self._actions:
            try:
                action()
            except Exception as exc:  # noqa: BLE001
                if self._logger is not None:
                    self._logger.warn(f"Cleanup action {action!r} failed: {exc}")

    def _install(self) -> None:
        self._installed = True
        atexit.register(self.drain)
        for signum in self._signals:
            try:
                self._previous[signum] = signal.getsignal(signum)
                signal.signal(signum, self._handle_signal)
            except ValueError:
                # Signal handlers can only be installed from the main thread;
                # the atexit hook still covers normal termination.
                self._previous.pop(signum, None)

    def _handle_signal(self, signum: int, frame: FrameType | None) -> None:
        self.drain()
        previous = self._previous.get(signum, signal.SIG_DFL)
        if previous is None:
            previous = signal.SIG_DFL
        signal.signal(signum, previous)
        if callable(previous):
            previous(signum, frame)
            return
        if previous == signal.SIG_IGN:
            return
        os.kill(os.getpid(), signum)

    @contextmanager
    def scratch_dir(self, *, prefix: str = "hookchain-", directory: Path | None = None) -> Iterator[Path]:
        """Yield a temporary directory removed on scope exit or process exit."""

        handle = ScratchPath(Path(tempfile.mkdtemp(prefix=prefix, dir=directory)))
        self.defer(handle.release)
        try:
            yield handle.path
        finally:
            handle.release()

    @contextmanager
    def scratch_file(
        self,
        *,
        prefix: str = "hookchain-",
        suffix: str = "",
        directory: Path | None = None,
    ) -> Iterator[Path]:
        """Yield a temporary file path removed on scope exit or process exit."""

        fd, raw_path = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=directory)
        os.close(fd)
        handle = ScratchPath(Path(raw_path))
        self.defer(handle.release)
        try:
            yield handle.path
        finally:
            handle.release()


@lru_cache(maxsize=1)
def process_registry() -> CleanupRegistry:
    """Return the registry shared by the whole process."""

    return CleanupRegistry()


def defer_cleanup(action: CleanupAction) -> None:
    """Register ``action`` on the process-wide registry."""

    process_registry().defer(action)


__all__ = [
    "CleanupAction",
    "CleanupRegistry",
    "DEFAULT_SIGNALS",
    "ScratchPath",
    "defer_cleanup",
    "process_registry",
]
