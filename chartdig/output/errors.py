"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from chartdig.codec.payload import CodecError, DecompressionError
from chartdig.core.errors import ErrorCode
from chartdig.output.console import Style
from chartdig.release.parser import ParseError
from chartdig.services.errors import ExtractError, PartialFailure, RecordError, RecordFailure
from chartdig.services.materializer import MaterializeError
from chartdig.services.retention import RetentionError
from chartdig.services.source import SourceError

if TYPE_CHECKING:
    from chartdig.output.console import ConsoleProtocol

__all__ = ["print_extract_error", "extract_error_exit_code"]


def print_extract_error(error: ExtractError, console: ConsoleProtocol) -> None:
    """Print an extraction error to console with appropriate formatting."""
    match error:
        case SourceError(message=message, hint=hint):
            console.error(message)
            if hint:
                console.print(f"hint: {hint}", Style.DIM)
        case RecordFailure(record_id=record_id, error=inner):
            console.error(f"{record_id}: {_describe(inner)}")
            if inner.hint:
                console.print(f"hint: {inner.hint}", Style.DIM)
        case PartialFailure(failures=failures):
            console.error(error.message)
            for failure in failures:
                console.print(f"  {failure.message}", Style.DIM)


def _describe(error: RecordError) -> str:
    match error:
        case CodecError(message=message) | DecompressionError(message=message):
            return f"corrupt payload: {message}"
        case ParseError(message=message):
            return f"malformed release: {message}"
        case MaterializeError(message=message) | RetentionError(message=message):
            return message
    return str(error)


def _record_error_exit_code(error: RecordError) -> int:
    match error:
        case CodecError() | DecompressionError() | ParseError():
            return int(ErrorCode.DECODE_ERROR)
        case MaterializeError(kind="entry_invalid"):
            return int(ErrorCode.DECODE_ERROR)
        case MaterializeError(kind="invalid_record_id"):
            return int(ErrorCode.USER_ERROR)
        case MaterializeError() | RetentionError():
            return int(ErrorCode.IO_ERROR)
    return int(ErrorCode.IO_ERROR)


def extract_error_exit_code(error: ExtractError) -> int:
    """Get exit code for an extraction error."""
    match error:
        case SourceError(kind="kubectl_missing"):
            return int(ErrorCode.ENV_ERROR)
        case SourceError():
            return int(ErrorCode.NETWORK_ERROR)
        case RecordFailure(error=inner):
            return _record_error_exit_code(inner)
        case PartialFailure(failures=failures) if failures:
            return _record_error_exit_code(failures[0].error)
    return int(ErrorCode.IO_ERROR)
