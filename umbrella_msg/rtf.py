"""Compressed RTF (PR_RTF_COMPRESSED) decompression."""

from __future__ import annotations

from compressed_rtf import decompress

from .errors import RtfDecompressionError


def decompress_rtf(data: bytes) -> str:
    """Decompress an LZFu / MELA body into RTF text.

    Raises :class:`RtfDecompressionError` for truncated, corrupt or
    unknown-format input.
    """
    try:
        raw = decompress(data)
    # compressed_rtf signals bad input with bare Exception (CRC mismatch,
    # unknown magic, short header) and lets struct/index errors escape.
    except Exception as exc:
        raise RtfDecompressionError(str(exc)) from exc
    return raw.decode("utf-8", errors="replace")
