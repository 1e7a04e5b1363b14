"""Write a release record back out as a chart directory.

Layout under ``root / record_id``:

    Chart.yaml      chart metadata rendered as YAML
    values.yaml     default values rendered as YAML
    <templates>     each template at its relative path, raw bytes
    <files>         each auxiliary file at its relative path, raw bytes

Existing files are overwritten. Files written before a failure are left in
place; a failed record can leave its directory partially populated.

Entry handling depends on ``strict``:
    - lenient (default): an entry whose content is not valid base64 is written
      as an empty file, and an entry whose path would land outside the
      destination is skipped. Both are reported as diagnostics.
    - strict: either case fails the whole record.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Literal

import yaml

from chartdig.core.result import Err, Ok, Result
from chartdig.platform.files import atomic_write_bytes
from chartdig.release.model import ChartFile, ReleaseRecord

__all__ = [
    "CHART_FILE",
    "VALUES_FILE",
    "EntryDiagnostic",
    "MaterializeError",
    "MaterializeReport",
    "materialize",
    "render_yaml",
]

CHART_FILE = "Chart.yaml"
VALUES_FILE = "values.yaml"


@dataclass(frozen=True, slots=True)
class MaterializeError:
    kind: Literal["invalid_record_id", "write_failed", "entry_invalid"]
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class EntryDiagnostic:
    """A chart entry that could not be written as-is."""

    entry: str
    kind: Literal["undecodable", "unsafe_path"]
    reason: str

    def __str__(self) -> str:
        return f"{self.entry}: {self.reason}"

    @property
    def outcome(self) -> str:
        """What lenient mode did with the entry."""
        return "skipped" if self.kind == "unsafe_path" else "written empty"


@dataclass(frozen=True, slots=True)
class MaterializeReport:
    destination: Path
    written: tuple[Path, ...]
    diagnostics: tuple[EntryDiagnostic, ...]


def render_yaml(document: object) -> bytes:
    """Render a JSON document as block-style YAML, keeping key order."""
    if document is None:
        document = {}
    text = yaml.safe_dump(
        document,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
    return text.encode("utf-8")


def materialize(
    release: ReleaseRecord,
    root: Path,
    *,
    record_id: str,
    strict: bool = False,
) -> Result[MaterializeReport, MaterializeError]:
    """Write the chart tree of one release under root.

    Args:
        release: Parsed release record.
        root: Output root; the record gets its own subdirectory.
        record_id: Store identifier of the record, used as directory name.
        strict: Fail on undecodable entries or unsafe entry paths instead of
            reporting them.

    Returns:
        Ok(MaterializeReport), or Err(MaterializeError) on the first failure.
    """
    if not _is_single_component(record_id):
        return Err(
            MaterializeError(
                kind="invalid_record_id",
                message=f"record id '{record_id}' is not a valid directory name",
            )
        )

    destination = root / record_id
    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(
            MaterializeError(
                kind="write_failed",
                message=f"cannot create {destination}: {e}",
            )
        )

    writer = _TreeWriter(destination, strict=strict)

    for filename, document in ((CHART_FILE, release.metadata), (VALUES_FILE, release.values)):
        written = writer.write(destination / filename, render_yaml(document))
        if isinstance(written, Err):
            return written

    for entry in (*release.templates, *release.files):
        written = writer.write_entry(entry)
        if isinstance(written, Err):
            return written

    return Ok(
        MaterializeReport(
            destination=destination,
            written=tuple(writer.written),
            diagnostics=tuple(writer.diagnostics),
        )
    )


class _TreeWriter:
    def __init__(self, destination: Path, *, strict: bool) -> None:
        self._destination = destination
        self._resolved = destination.resolve()
        self._strict = strict
        self.written: list[Path] = []
        self.diagnostics: list[EntryDiagnostic] = []

    def write(self, path: Path, content: bytes) -> Result[None, MaterializeError]:
        try:
            atomic_write_bytes(path, content)
        except OSError as e:
            return Err(MaterializeError(kind="write_failed", message=f"cannot write {path}: {e}"))
        self.written.append(path)
        return Ok(None)

    def write_entry(self, entry: ChartFile) -> Result[None, MaterializeError]:
        target = self._target(entry.name)
        if target is None:
            return self._diagnose(entry, "unsafe_path", "path escapes the chart directory")

        try:
            content = base64.b64decode(entry.data, validate=True)
        except (binascii.Error, ValueError) as e:
            diagnosed = self._diagnose(entry, "undecodable", f"invalid base64 content ({e})")
            if isinstance(diagnosed, Err):
                return diagnosed
            content = b""

        return self.write(target, content)

    def _target(self, name: str) -> Path | None:
        if "\x00" in name:
            return None
        relative = PurePosixPath(name)
        if not relative.parts or relative.is_absolute() or ".." in relative.parts:
            return None

        target = self._destination.joinpath(*relative.parts)
        try:
            resolved = target.resolve()
        except (OSError, ValueError):
            return None
        if resolved == self._resolved or not resolved.is_relative_to(self._resolved):
            return None
        return target

    def _diagnose(
        self,
        entry: ChartFile,
        kind: Literal["undecodable", "unsafe_path"],
        reason: str,
    ) -> Result[None, MaterializeError]:
        diagnostic = EntryDiagnostic(entry=entry.name, kind=kind, reason=reason)
        if self._strict:
            return Err(
                MaterializeError(
                    kind="entry_invalid",
                    message=f"chart entry {diagnostic}",
                    hint="Run without --strict to skip or blank invalid entries",
                )
            )
        self.diagnostics.append(diagnostic)
        return Ok(None)


def _is_single_component(name: str) -> bool:
    if name in ("", ".", ".."):
        return False
    return "/" not in name and "\\" not in name and "\x00" not in name
