# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Chain configuration models and layered TOML loading.

A configuration document maps ``(PREFIX, TYPE)`` to an ordered list of
alternative chains and ``(PREFIX, TYPE, COMMAND)`` to an option string::

    [chains.LINT]
    css = "prettycss"                 # whitespace-separated alternatives
    python = ["isort+black", "yapf"]  # '+' joins the commands of one chain

    [options.LINT.python]
    black = "--quiet"

Keys are case-insensitive and stored upper-cased.
"""

from __future__ import annotations

import os
import re
import shlex
import tomllib
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import CHAIN_SEPARATOR

ChainSpec = tuple[str, ...]
ChainAlternatives = tuple[ChainSpec, ...]

_ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$(\w+)|\$\{([^}]+)\}")
_FORBIDDEN_NAMES: Final[frozenset[str]] = frozenset({".", ".."})


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


def _validate_command_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("command names must not be empty")
    if "/" in cleaned or os.sep in cleaned or cleaned in _FORBIDDEN_NAMES:
        raise ValueError(f"command name {cleaned!r} must not contain path separators")
    if any(char.isspace() for char in cleaned):
        raise ValueError(f"command name {cleaned!r} must not contain whitespace")
    return cleaned


def _parse_chain(raw: Any) -> ChainSpec:
    if isinstance(raw, str):
        parts = raw.split(CHAIN_SEPARATOR)
    elif isinstance(raw, Sequence):
        parts = list(raw)
    else:
        raise ValueError(f"chain entries must be strings or arrays, got {type(raw).__name__}")
    if not parts:
        raise ValueError("a chain must name at least one command")
    return tuple(_validate_command_name(str(part)) for part in parts)


def parse_alternatives(raw: Any) -> ChainAlternatives:
    """Return the ordered chain alternatives described by ``raw``.

    A string holds whitespace-separated alternatives; an array holds one entry
    per alternative. Inside an alternative ``+`` (or a nested array) lists the
    commands that must run together.

    Raises:
        ValueError: If the value is malformed.
    """

    if isinstance(raw, str):
        return tuple(_parse_chain(token) for token in raw.split())
    if isinstance(raw, Sequence):
        return tuple(_parse_chain(entry) for entry in raw)
    raise ValueError(f"chain configuration must be a string or array, got {type(raw).__name__}")


def _require_table(raw: Any, label: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise ValueError(f"{label} must be a table")
    return raw


class ChainSettings(BaseModel):
    """Validated chain and option tables keyed by upper-cased names."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    chains: dict[str, dict[str, ChainAlternatives]] = Field(default_factory=dict)
    options: dict[str, dict[str, dict[str, str]]] = Field(default_factory=dict)

    @field_validator("chains", mode="before")
    @classmethod
    def _normalise_chains(cls, value: Any) -> dict[str, dict[str, ChainAlternatives]]:
        normalised: dict[str, dict[str, ChainAlternatives]] = {}
        for prefix, by_type in _require_table(value, "chains").items():
            table = _require_table(by_type, f"chains.{prefix}")
            normalised[prefix.upper()] = {
                file_type.upper(): parse_alternatives(raw) for file_type, raw in table.items()
            }
        return normalised

    @field_validator("options", mode="before")
    @classmethod
    def _normalise_options(cls, value: Any) -> dict[str, dict[str, dict[str, str]]]:
        normalised: dict[str, dict[str, dict[str, str]]] = {}
        for prefix, by_type in _require_table(value, "options").items():
            prefix_table: dict[str, dict[str, str]] = {}
            for file_type, by_command in _require_table(by_type, f"options.{prefix}").items():
                commands = _require_table(by_command, f"options.{prefix}.{file_type}")
                prefix_table[file_type.upper()] = {
                    _validate_command_name(name).upper(): _stringify_option(raw) for name, raw in commands.items()
                }
            normalised[prefix.upper()] = prefix_table
        return normalised

    def alternatives(self, prefix: str, file_type: str) -> ChainAlternatives:
        """Return the configured chain alternatives for ``(prefix, file_type)``."""

        return self.chains.get(prefix.upper(), {}).get(file_type.upper(), ())

    def options_for(self, prefix: str, file_type: str, command: str) -> str:
        """Return the option string for ``(prefix, file_type, command)``, empty when unset."""

        return self.options.get(prefix.upper(), {}).get(file_type.upper(), {}).get(command.upper(), "")


def _stringify_option(raw: Any) -> str:
    if isinstance(raw, str):
        value = raw
    elif isinstance(raw, Sequence):
        value = shlex.join(str(item) for item in raw)
    else:
        raise ValueError(f"option values must be strings or arrays, got {type(raw).__name__}")
    shlex.split(value)  # rejects unbalanced quotes
    return value


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _upper_keys(data: Mapping[str, Any], depth: int) -> dict[str, Any]:
    if depth <= 0:
        return dict(data)
    return {
        key.upper(): _upper_keys(value, depth - 1) if isinstance(value, Mapping) else value
        for key, value in data.items()
    }


def _expand_env(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        return _ENV_VAR_PATTERN.sub(lambda match: env.get(match.group(1) or match.group(2), match.group(0)), value)
    if isinstance(value, Mapping):
        return {key: _expand_env(item, env) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item, env) for item in value]
    return value


def read_config_file(path: Path) -> dict[str, Any]:
    """Return the raw TOML document at ``path``; a missing file yields ``{}``.

    Raises:
        ConfigError: If the document cannot be parsed.
    """

    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def load_chain_settings(paths: Iterable[Path], *, env: Mapping[str, str] | None = None) -> ChainSettings:
    """Merge the documents at ``paths`` (lowest precedence first) and validate them.

    Table keys are compared case-insensitively, so ``[chains.lint]`` in one
    layer and ``[chains.LINT]`` in another address the same table.

    Raises:
        ConfigError: If any document is unreadable or fails validation.
    """

    environment = os.environ if env is None else env
    merged: dict[str, Any] = {}
    for path in paths:
        document = read_config_file(path)
        if not document:
            continue
        normalised = {
            key: _upper_keys(value, 3) if isinstance(value, Mapping) else value for key, value in document.items()
        }
        merged = _deep_merge(merged, normalised)
    try:
        return ChainSettings.model_validate(_expand_env(merged, environment))
    except ValidationError as exc:
        raise ConfigError(f"Invalid chain configuration: {exc}") from exc


__all__ = [
    "ChainAlternatives",
    "ChainSettings",
    "ChainSpec",
    "ConfigError",
    "load_chain_settings",
    "parse_alternatives",
    "read_config_file",
]
