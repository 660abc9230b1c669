"""Cascading text decoder for MAPI string properties.

Property streams carry no reliable encoding marker: Unicode properties are
UTF-16 LE, ANSI properties use whatever code page the sending client ran
with.  :func:`decode_text` tries a fixed sequence of encodings and returns
the first plausible result together with a label naming the one that won.
"""

from __future__ import annotations

import codecs
from typing import NamedTuple

UTF16_LE = "UTF-16 LE"
UTF8 = "UTF-8"
GBK = "GBK"
UTF8_LOSSY = "UTF-8 (lossy)"

_GB_FAMILY = frozenset({"gb2312", "gbk", "gb18030"})


class DecodedText(NamedTuple):
    text: str
    encoding: str


def decode_text(data: bytes, *, legacy_codec: str = "gb18030") -> DecodedText | None:
    """Decode *data* using the UTF-16 LE → UTF-8 → GBK → lossy UTF-8 cascade.

    Returns ``None`` when *data* is empty or every stage yields only
    whitespace and NULs.
    """
    if not data:
        return None

    text = _try_utf16_le(data)
    if text:
        return DecodedText(text, UTF16_LE)

    try:
        text = _trim(data.decode("utf-8"))
    except UnicodeDecodeError:
        text = ""
    if text:
        return DecodedText(text, UTF8)

    try:
        text = _trim(data.decode(legacy_codec))
    except UnicodeDecodeError:
        text = ""
    if text:
        return DecodedText(text, legacy_label(legacy_codec))

    text = _trim(data.decode("utf-8", errors="replace"))
    if text:
        return DecodedText(text, UTF8_LOSSY)

    return None


def legacy_label(codec: str) -> str:
    """Label for the legacy stage: ``"GBK"`` for the GB family, else the codec name."""
    name = codecs.lookup(codec).name
    return GBK if name in _GB_FAMILY else name.upper()


def _try_utf16_le(data: bytes) -> str:
    if len(data) < 2 or len(data) % 2:
        return ""

    end = len(data)
    for offset in range(0, len(data), 2):
        if data[offset] == 0 and data[offset + 1] == 0:
            end = offset
            break
    if end == 0:
        return ""

    text = data[:end].decode("utf-16-le", errors="replace").strip()
    # Binary payloads decode to symbols and unassigned code points; real
    # text has at least one letter, digit or space.
    if any(ch.isalnum() or ch.isspace() for ch in text):
        return text
    return ""


def _trim(text: str) -> str:
    return text.rstrip("\x00").strip()
