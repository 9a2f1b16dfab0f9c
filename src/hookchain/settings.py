# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Environment-derived runtime settings."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_HOOKS_DIR,
    DEFAULT_LOCAL_DIR,
    ENV_DEBUG,
    ENV_HOOKS_DIR,
    ENV_LOCAL_DIR,
    ENV_ROOT,
    ENV_TMPDIR,
)

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


def _is_truthy(raw: str | None) -> bool:
    return raw is not None and raw.strip().lower() in _TRUTHY


class Settings(BaseModel):
    """Read-only inputs consumed by the core: verbosity, root and temp location."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(default_factory=Path.cwd)
    debug: bool = False
    temp_dir: Path | None = None
    hooks_dir: str = DEFAULT_HOOKS_DIR
    local_dir: str = DEFAULT_LOCAL_DIR

    @field_validator("root")
    @classmethod
    def _resolve_root(cls, value: Path) -> Path:
        return value.expanduser().resolve()

    @field_validator("temp_dir")
    @classmethod
    def _existing_temp_dir(cls, value: Path | None) -> Path | None:
        if value is None:
            return None
        candidate = value.expanduser()
        return candidate if candidate.is_dir() else None

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None, **overrides: object) -> Settings:
        """Build settings from ``env`` (defaults to ``os.environ``) plus explicit overrides.

        ``HOOKCHAIN_TMPDIR`` takes precedence over ``TMPDIR``; a temp directory
        that does not exist is ignored.
        """

        source = os.environ if env is None else env
        data: dict[str, object] = {"debug": _is_truthy(source.get(ENV_DEBUG))}
        if raw_root := source.get(ENV_ROOT):
            data["root"] = Path(raw_root)
        if raw_tmp := source.get(ENV_TMPDIR) or source.get("TMPDIR"):
            data["temp_dir"] = Path(raw_tmp)
        if raw_hooks := source.get(ENV_HOOKS_DIR):
            data["hooks_dir"] = raw_hooks
        if raw_local := source.get(ENV_LOCAL_DIR):
            data["local_dir"] = raw_local
        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(data)


__all__ = ["Settings"]
