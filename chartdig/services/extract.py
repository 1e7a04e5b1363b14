"""Release extraction pipeline.

One pass over the release secrets of a namespace:

    list -> filter -> decode -> parse -> materialize -> prune

Records are handled strictly one after another, in the order the cluster
returned them. Each record is fully written (and its previous version pruned,
when retention is on) before the next one starts. The first failing record
stops the run unless ``keep_going`` is set.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from chartdig.codec.payload import decode
from chartdig.core.config import DEFAULT_NAMESPACE
from chartdig.core.result import Err, Ok, Result
from chartdig.output.console import ConsoleProtocol, Style
from chartdig.release.model import ReleaseRecord
from chartdig.release.parser import parse
from chartdig.services.errors import ExtractError, PartialFailure, RecordFailure
from chartdig.services.materializer import MaterializeReport, materialize
from chartdig.services.retention import ReleaseName, prune
from chartdig.services.source import RawRecord, RecordSource, SourceError, is_release_record

__all__ = [
    "ExtractOptions",
    "ExtractService",
    "ExtractSummary",
    "ReleaseListing",
]


@dataclass(frozen=True, slots=True)
class ExtractOptions:
    output_dir: Path
    namespace: str = DEFAULT_NAMESPACE
    only_latest: bool = False
    strict_entries: bool = False
    keep_going: bool = False


@dataclass(frozen=True, slots=True)
class ExtractSummary:
    extracted: tuple[str, ...]
    pruned: tuple[Path, ...]
    warnings: int = 0


@dataclass(frozen=True, slots=True)
class ReleaseListing:
    record_id: str
    namespace: str
    type_tag: str
    release: str | None
    version: int | None


@dataclass(frozen=True, slots=True)
class _RecordOutcome:
    report: MaterializeReport
    pruned: Path | None
    warnings: int


class ExtractService:
    """Recover chart directories from release records."""

    def __init__(
        self,
        *,
        console: ConsoleProtocol,
        source: RecordSource,
        options: ExtractOptions,
    ) -> None:
        self._console = console
        self._source = source
        self._options = options

    def candidates(self) -> Result[tuple[RawRecord, ...], SourceError]:
        """Release records of the namespace, in store order."""
        listed = self._source.list_candidates(self._options.namespace)
        if isinstance(listed, Err):
            return listed
        return Ok(tuple(r for r in listed.value if is_release_record(r)))

    def list_releases(self) -> Result[tuple[ReleaseListing, ...], SourceError]:
        candidates = self.candidates()
        if isinstance(candidates, Err):
            return candidates

        listings: list[ReleaseListing] = []
        for record in candidates.value:
            name = ReleaseName.parse(record.name)
            listings.append(
                ReleaseListing(
                    record_id=record.name,
                    namespace=record.namespace or self._options.namespace,
                    type_tag=record.type_tag,
                    release=name.value.base if isinstance(name, Ok) else None,
                    version=name.value.version if isinstance(name, Ok) else None,
                )
            )
        return Ok(tuple(listings))

    def run(self) -> Result[ExtractSummary, ExtractError]:
        opts = self._options
        candidates = self.candidates()
        if isinstance(candidates, Err):
            return candidates

        records = candidates.value
        self._console.header(
            f"Extracting {len(records)} release(s) from namespace '{opts.namespace}'"
        )
        if not records:
            self._console.print("No release records found", Style.DIM)

        extracted: list[str] = []
        pruned: list[Path] = []
        failures: list[RecordFailure] = []
        warnings = 0

        for record in records:
            outcome = self._process(record)
            if isinstance(outcome, Err):
                if not opts.keep_going:
                    return outcome
                self._console.error(outcome.error.message)
                failures.append(outcome.error)
                continue

            extracted.append(record.name)
            warnings += outcome.value.warnings
            if outcome.value.pruned is not None:
                pruned.append(outcome.value.pruned)

        if failures:
            return Err(PartialFailure(failures=tuple(failures), extracted=len(extracted)))

        return Ok(
            ExtractSummary(extracted=tuple(extracted), pruned=tuple(pruned), warnings=warnings)
        )

    def _process(self, record: RawRecord) -> Result[_RecordOutcome, RecordFailure]:
        opts = self._options

        parsed = decode(record.payload).flat_map(parse)
        if isinstance(parsed, Err):
            return Err(RecordFailure(record_id=record.name, error=parsed.error))
        release = parsed.value

        written = materialize(
            release,
            opts.output_dir,
            record_id=record.name,
            strict=opts.strict_entries,
        )
        if isinstance(written, Err):
            return Err(RecordFailure(record_id=record.name, error=written.error))
        report = written.value

        self._console.success(f"{record.name}: {_describe(release)} -> {report.destination}")
        for diagnostic in report.diagnostics:
            self._console.warning(f"{record.name}: {diagnostic} ({diagnostic.outcome})")
        warnings = len(report.diagnostics)

        removed = prune(record.name, opts.output_dir, enabled=opts.only_latest)
        if isinstance(removed, Err):
            if removed.error.kind != "invalid_version":
                return Err(RecordFailure(record_id=record.name, error=removed.error))
            # Extraction succeeded; only the previous version is left in place
            self._console.warning(f"{removed.error.message}, previous version not pruned")
            return Ok(_RecordOutcome(report=report, pruned=None, warnings=warnings + 1))

        if removed.value is not None:
            self._console.print(f"  pruned {removed.value}", Style.DIM)
        return Ok(_RecordOutcome(report=report, pruned=removed.value, warnings=warnings))


def _describe(release: ReleaseRecord) -> str:
    files = len(release.templates) + len(release.files)
    version = release.chart_version
    chart = f"{release.name} {version}" if version else release.name or "<unnamed>"
    return f"{chart} ({files} file(s))"
