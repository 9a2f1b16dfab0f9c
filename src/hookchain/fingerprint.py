# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Content and metadata fingerprints used to detect file mutation.

Modification times are not part of a fingerprint; touching a file does not
change it.
"""

from __future__ import annotations

import hashlib
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

_CHUNK_SIZE: Final[int] = 65536


def _content_digest(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def fingerprint(path: Path) -> str:
    """Return a comparable digest of ``path``'s content and metadata.

    Args:
        path: File to fingerprint.

    Returns:
        str: ``<sha256>:<mode>:<uid>:<gid>:<size>`` with the permission bits in octal.

    Raises:
        OSError: If the file cannot be read.
    """

    info = path.stat()
    mode = stat.S_IMODE(info.st_mode)
    return f"{_content_digest(path)}:{mode:o}:{info.st_uid}:{info.st_gid}:{info.st_size}"


@dataclass(slots=True)
class FileWatch:
    """Capture a fingerprint now and compare it with a later one."""

    path: Path
    before: str = field(init=False)

    def __post_init__(self) -> None:
        self.before = fingerprint(self.path)

    def changed(self) -> bool:
        """Return ``True`` when the file no longer matches the captured fingerprint.

        A file removed since capture counts as changed.
        """

        try:
            return fingerprint(self.path) != self.before
        except FileNotFoundError:
            return True


__all__ = ["FileWatch", "fingerprint"]
