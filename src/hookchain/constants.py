# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Constants shared across hookchain modules."""

from __future__ import annotations

from typing import Final

DEFAULT_HOOKS_DIR: Final[str] = ".hookchain"
DEFAULT_LOCAL_DIR: Final[str] = "local"
CONFIG_FILENAME: Final[str] = "hookchain.toml"

DETECT_CATEGORY: Final[str] = "detect"
COMMON_SUBDIR: Final[str] = "_common"
UNKNOWN_TYPE: Final[str] = "unknown"

CHAIN_SEPARATOR: Final[str] = "+"

# Shell convention for "found but could not be executed".
EXIT_CANNOT_EXECUTE: Final[int] = 126

ENV_DEBUG: Final[str] = "HOOKCHAIN_DEBUG"
ENV_ROOT: Final[str] = "HOOKCHAIN_ROOT"
ENV_TMPDIR: Final[str] = "HOOKCHAIN_TMPDIR"
ENV_HOOKS_DIR: Final[str] = "HOOKCHAIN_HOOKS_DIR"
ENV_LOCAL_DIR: Final[str] = "HOOKCHAIN_LOCAL_DIR"
ENV_SCRATCH: Final[str] = "HOOKCHAIN_SCRATCH"
ENV_FILE_TYPE: Final[str] = "HOOKCHAIN_TYPE"

__all__ = [
    "CHAIN_SEPARATOR",
    "COMMON_SUBDIR",
    "CONFIG_FILENAME",
    "DEFAULT_HOOKS_DIR",
    "DEFAULT_LOCAL_DIR",
    "DETECT_CATEGORY",
    "ENV_DEBUG",
    "ENV_FILE_TYPE",
    "ENV_HOOKS_DIR",
    "ENV_LOCAL_DIR",
    "ENV_ROOT",
    "ENV_SCRATCH",
    "ENV_TMPDIR",
    "EXIT_CANNOT_EXECUTE",
    "UNKNOWN_TYPE",
]
