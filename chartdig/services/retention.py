"""Keep only the latest extracted version of each release.

Helm names release secrets ``<release>.v<N>`` with N counting up from 1. When
retention is enabled, extracting ``foo.v5`` removes an existing ``foo.v4``
directory from the output root. Nothing else is touched: neither the current
version nor newer ones, nor versions older than N-1.
"""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from chartdig.core.result import Err, Ok, Result

__all__ = ["ReleaseName", "RetentionError", "prune"]

_NAME_RE = re.compile(r"(?P<base>.+)\.v(?P<version>[0-9]+)", re.ASCII)


@dataclass(frozen=True, slots=True)
class RetentionError:
    kind: Literal["invalid_version", "delete_failed"]
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseName:
    """A record identifier split into its base and version number."""

    base: str
    version: int

    @classmethod
    def parse(cls, record_id: str) -> Result[ReleaseName, RetentionError]:
        match = _NAME_RE.fullmatch(record_id)
        if match is None:
            return Err(
                RetentionError(
                    kind="invalid_version",
                    message=f"'{record_id}' has no '.v<N>' version suffix",
                    hint="Retention only applies to records named <release>.v<N>",
                )
            )
        return Ok(cls(base=match.group("base"), version=int(match.group("version"))))

    def sibling(self, version: int) -> str:
        return f"{self.base}.v{version}"

    def __str__(self) -> str:
        return self.sibling(self.version)


def prune(
    current_record_id: str,
    root: Path,
    *,
    enabled: bool,
) -> Result[Path | None, RetentionError]:
    """Delete the directory of the version just before current_record_id.

    Args:
        current_record_id: Identifier of the record that was just extracted.
        root: Output root holding one directory per record.
        enabled: Retention toggle; when False nothing happens.

    Returns:
        Ok(path) of the deleted directory, Ok(None) when there was nothing to
        delete, or Err when the identifier can't be parsed or deletion failed.
    """
    if not enabled:
        return Ok(None)

    parsed = ReleaseName.parse(current_record_id)
    if isinstance(parsed, Err):
        return parsed

    name = parsed.value
    if name.version <= 0:
        return Ok(None)

    previous = root / name.sibling(name.version - 1)
    if not previous.is_dir():
        return Ok(None)

    try:
        shutil.rmtree(previous)
    except OSError as e:
        return Err(
            RetentionError(
                kind="delete_failed",
                message=f"cannot remove previous version {previous}: {e}",
            )
        )
    return Ok(previous)
