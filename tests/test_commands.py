# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for helper command lookup and the script adapter."""

from __future__ import annotations

from pathlib import Path

import pytest

from hookchain.commands import EXIT_CANNOT_EXECUTE, Command, CommandResolver
from hookchain.config import ChainSettings
from hookchain.overlay import OverlayResolver, OverlayRoots


def _resolver(roots: OverlayRoots, options: dict | None = None) -> CommandResolver:
    settings = ChainSettings.model_validate({"options": options or {}})
    return CommandResolver(OverlayResolver(roots), settings)


def test_type_directory_wins_over_common(overlay_roots: OverlayRoots, make_script) -> None:
    specific = make_script(overlay_roots.main / "lint" / "js" / "tidy", "exit 0")
    common = make_script(overlay_roots.local / "lint" / "_common" / "tidy", "exit 0")
    resolver = _resolver(overlay_roots)

    assert resolver.locate("lint", "js", "tidy").path == specific
    assert resolver.locate("lint", "css", "tidy").path == common
    assert resolver.resolve("LINT", "lint", "js", "absent") is None


def test_options_are_split_into_arguments(overlay_roots: OverlayRoots, make_script) -> None:
    script = make_script(overlay_roots.main / "format" / "python" / "black", "exit 0")
    resolver = _resolver(overlay_roots, {"FORMAT": {"python": {"black": "--line-length 100 --config 'a b.toml'"}}})

    command = resolver.resolve("format", "format", "python", "black")

    assert isinstance(command, Command)
    assert command.location == script
    assert command.argv() == [str(script), "--line-length", "100", "--config", "a b.toml"]
    assert command.argv(Path("mod.py"), ["--check"]) == [
        str(script),
        "--line-length",
        "100",
        "--config",
        "a b.toml",
        "mod.py",
        "--check",
    ]


def test_probe_reports_unavailable_on_nonzero_exit(overlay_roots: OverlayRoots, make_script) -> None:
    make_script(overlay_roots.main / "lint" / "js" / "jslint", '[ $# -eq 0 ] && exit 1\nexit 0')

    command = _resolver(overlay_roots).resolve("LINT", "lint", "js", "jslint")

    assert command is not None
    assert command.is_available() is False


def test_unlaunchable_script_maps_to_cannot_execute(overlay_roots: OverlayRoots, tmp_path: Path) -> None:
    script = overlay_roots.main / "lint" / "js" / "broken"
    script.parent.mkdir(parents=True)
    script.write_text("#!/nonexistent/interpreter\n", encoding="utf-8")
    script.chmod(0o755)
    target = tmp_path / "app.js"
    target.write_text("ok\n", encoding="utf-8")

    command = _resolver(overlay_roots).resolve("LINT", "lint", "js", "broken")

    assert command is not None
    assert command.is_available() is False
    assert command.run(target) == EXIT_CANNOT_EXECUTE


def test_non_utf8_availability_output_is_ignored(overlay_roots: OverlayRoots, make_script) -> None:
    make_script(
        overlay_roots.main / "lint" / "js" / "jslint",
        "[ $# -eq 0 ] && printf 'jslint \\251 1999\\n' && printf '\\377' >&2\nexit 0",
    )

    command = _resolver(overlay_roots).resolve("LINT", "lint", "js", "jslint")

    assert command is not None
    assert command.is_available() is True


@pytest.mark.parametrize("category", ["../lint", "lint/../../lint", "/lint"])
def test_escaping_category_is_rejected(overlay_roots: OverlayRoots, make_script, category: str) -> None:
    make_script(overlay_roots.main / "lint" / "js" / "tidy", "exit 0")

    with pytest.raises(ValueError):
        _resolver(overlay_roots).locate(category, "js", "tidy")
