"""Payload codec for Helm release blobs.

Helm stores a release as JSON, gzip-compressed, then base64-encoded (standard
alphabet, padded). ``decode`` unwinds those layers in reverse order and
``encode`` applies them, so ``decode(encode(raw)) == Ok(raw)`` for any bytes.
"""

from __future__ import annotations

import base64
import binascii
import gzip
import zlib
from dataclasses import dataclass
from typing import TypeAlias

from chartdig.core.result import Err, Ok, Result

__all__ = ["CodecError", "DecompressionError", "PayloadError", "decode", "encode"]

GZIP_MAGIC = b"\x1f\x8b"


@dataclass(frozen=True, slots=True)
class CodecError:
    """The base64 layer is malformed."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class DecompressionError:
    """The gzip stream has a bad header, or is truncated or corrupt."""

    message: str
    hint: str | None = None


PayloadError: TypeAlias = CodecError | DecompressionError


def decode(blob: bytes) -> Result[bytes, PayloadError]:
    """Decode a stored release payload into the raw release document.

    Args:
        blob: base64 text of a gzip stream, as found in the secret's
            ``release`` key.

    Returns:
        Ok(raw bytes) or the error of the first layer that failed.
    """
    compressed = _b64decode(blob)
    if isinstance(compressed, Err):
        return compressed
    return _gunzip(compressed.value)


def encode(raw: bytes) -> bytes:
    """Apply the storage layers Helm uses: gzip, then base64."""
    return base64.b64encode(gzip.compress(raw))


def _b64decode(blob: bytes) -> Result[bytes, CodecError]:
    # Line breaks are tolerated, like Go's base64.StdEncoding
    text = blob.replace(b"\r", b"").replace(b"\n", b"")
    try:
        return Ok(base64.b64decode(text, validate=True))
    except (binascii.Error, ValueError) as e:
        return Err(
            CodecError(
                message=f"invalid base64 payload: {e}",
                hint="The release key must hold standard, padded base64",
            )
        )


def _gunzip(data: bytes) -> Result[bytes, DecompressionError]:
    if not data.startswith(GZIP_MAGIC):
        return Err(
            DecompressionError(
                message="payload is not a gzip stream (bad magic header)",
            )
        )
    try:
        return Ok(gzip.decompress(data))
    except EOFError as e:
        return Err(DecompressionError(message=f"gzip stream is truncated: {e}"))
    except (gzip.BadGzipFile, zlib.error) as e:
        return Err(DecompressionError(message=f"gzip stream is corrupt: {e}"))
