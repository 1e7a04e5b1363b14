"""Release payload codec (base64 + gzip)."""

from .payload import CodecError, DecompressionError, decode, encode

__all__ = [
    "CodecError",
    "DecompressionError",
    "decode",
    "encode",
]
