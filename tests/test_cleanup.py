# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the exit-time cleanup registry."""

from __future__ import annotations

import os
import signal
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

import hookchain
from hookchain.cleanup import CleanupRegistry

SRC_DIR = Path(hookchain.__file__).resolve().parents[1]


def test_drain_runs_actions_once_in_order() -> None:
    calls: list[int] = []
    registry = CleanupRegistry(signals=())
    for index in (1, 2, 3):
        registry.defer(lambda index=index: calls.append(index))

    registry.drain()
    registry.drain()

    assert calls == [1, 2, 3]
    assert registry.drained is True
    assert len(registry) == 3


def test_failing_action_does_not_skip_later_ones() -> None:
    calls: list[str] = []

    def _boom() -> None:
        raise OSError("already gone")

    registry = CleanupRegistry(signals=())
    registry.defer(_boom)
    registry.defer(lambda: calls.append("after"))

    registry.drain()

    assert calls == ["after"]


def test_defer_after_drain_is_rejected() -> None:
    registry = CleanupRegistry(signals=())
    registry.defer(lambda: None)
    registry.drain()

    with pytest.raises(RuntimeError):
        registry.defer(lambda: None)


def test_handlers_install_once_on_first_registration() -> None:
    registry = CleanupRegistry(signals=())

    assert registry.installed is False
    registry.defer(lambda: None)
    registry.defer(lambda: None)
    assert registry.installed is True
    registry.drain()


def test_scratch_dir_released_on_scope_exit(tmp_path: Path) -> None:
    registry = CleanupRegistry(signals=())

    with registry.scratch_dir(directory=tmp_path) as scratch:
        (scratch / "nested.txt").write_text("data", encoding="utf-8")
        assert scratch.is_dir()

    assert not scratch.exists()
    registry.drain()


def test_scratch_file_released_at_drain_when_scope_never_exits(tmp_path: Path) -> None:
    registry = CleanupRegistry(signals=())
    scope = registry.scratch_file(suffix=".tmp", directory=tmp_path)
    scratch = scope.__enter__()

    assert scratch.exists()
    registry.drain()
    assert not scratch.exists()
    scope.__exit__(None, None, None)


def _run_child(tmp_path: Path, tail: str) -> tuple[subprocess.CompletedProcess[str], Path]:
    marker = tmp_path / "drained.txt"
    script = textwrap.dedent(
        f"""
        import os
        import signal
        import sys
        from pathlib import Path

        from hookchain.cleanup import defer_cleanup

        marker = Path({str(marker)!r})

        def record(label):
            def _action():
                with marker.open("a", encoding="utf-8") as handle:
                    handle.write(label + "\\n")
            return _action

        for label in ("one", "two", "three"):
            defer_cleanup(record(label))
        """,
    ) + textwrap.dedent(tail)
    env = {**os.environ, "PYTHONPATH": os.pathsep.join(filter(None, [str(SRC_DIR), os.environ.get("PYTHONPATH")]))}
    completed = subprocess.run(
        [sys.executable, "-c", script],
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )
    return completed, marker


def test_normal_exit_drains_registry(tmp_path: Path) -> None:
    completed, marker = _run_child(tmp_path, "sys.exit(0)\n")

    assert completed.returncode == 0, completed.stderr
    assert marker.read_text(encoding="utf-8").splitlines() == ["one", "two", "three"]


def test_uncaught_exception_drains_registry(tmp_path: Path) -> None:
    completed, marker = _run_child(tmp_path, "raise RuntimeError('boom')\n")

    assert completed.returncode == 1
    assert marker.read_text(encoding="utf-8").splitlines() == ["one", "two", "three"]


@pytest.mark.skipif(not hasattr(signal, "SIGTERM") or os.name != "posix", reason="POSIX signals required")
def test_terminating_signal_drains_registry_then_terminates(tmp_path: Path) -> None:
    completed, marker = _run_child(tmp_path, "os.kill(os.getpid(), signal.SIGTERM)\nimport time\ntime.sleep(5)\n")

    assert completed.returncode == -signal.SIGTERM
    assert marker.read_text(encoding="utf-8").splitlines() == ["one", "two", "three"]
