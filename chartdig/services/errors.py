"""Error types produced by the extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from chartdig.codec.payload import CodecError, DecompressionError
from chartdig.release.parser import ParseError
from chartdig.services.materializer import MaterializeError
from chartdig.services.retention import RetentionError
from chartdig.services.source import SourceError

__all__ = [
    "ExtractError",
    "PartialFailure",
    "RecordError",
    "RecordFailure",
]

RecordError: TypeAlias = CodecError | DecompressionError | ParseError | MaterializeError | RetentionError


@dataclass(frozen=True, slots=True)
class RecordFailure:
    """A single record that could not be extracted."""

    record_id: str
    error: RecordError

    @property
    def message(self) -> str:
        return f"{self.record_id}: {self.error.message}"

    @property
    def hint(self) -> str | None:
        return self.error.hint


@dataclass(frozen=True, slots=True)
class PartialFailure:
    """Some records failed while running with keep-going enabled."""

    failures: tuple[RecordFailure, ...]
    extracted: int

    @property
    def message(self) -> str:
        total = len(self.failures) + self.extracted
        return f"{len(self.failures)} of {total} releases failed to extract"


ExtractError: TypeAlias = SourceError | RecordFailure | PartialFailure
